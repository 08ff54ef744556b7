"""Effect implementations and their shared base class."""

from .base import BaseEffect
from .builtin import BUILTIN_EFFECTS, BlurEffect, GrayscaleEffect, ResizeEffect

__all__ = [
    "BUILTIN_EFFECTS",
    "BaseEffect",
    "BlurEffect",
    "GrayscaleEffect",
    "ResizeEffect",
]
