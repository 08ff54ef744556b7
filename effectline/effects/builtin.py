"""Effects registered by default on every registry."""

from __future__ import annotations

from typing import Optional

from ..items import Item
from ..requests import EffectParameter
from .base import BaseEffect


class ResizeEffect(BaseEffect):
    name = "Resize"

    def apply(self, item: Item, parameter: Optional[EffectParameter] = None) -> bool:
        size = self.require_int(parameter, "target size")
        item.append_description(f"Resize to {size}px")
        return True


class BlurEffect(BaseEffect):
    name = "Blur"

    def apply(self, item: Item, parameter: Optional[EffectParameter] = None) -> bool:
        radius = self.require_int(parameter, "blur size")
        item.append_description(f"Blur {radius}px")
        return True


class GrayscaleEffect(BaseEffect):
    """Parameterless; any parameter supplied is ignored."""

    name = "Grayscale"

    def apply(self, item: Item, parameter: Optional[EffectParameter] = None) -> bool:
        item.append_description("Convert to Grayscale")
        return True


BUILTIN_EFFECTS = (ResizeEffect, BlurEffect, GrayscaleEffect)

__all__ = ["BUILTIN_EFFECTS", "BlurEffect", "GrayscaleEffect", "ResizeEffect"]
