"""Effect parameters and deferred effect requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class EffectParameter:
    """Named, loosely typed value handed to an effect.

    The value is stored verbatim; each effect validates the type it needs
    when it is applied.
    """

    name: str
    value: Any

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass(frozen=True)
class EffectRequest:
    """An effect name plus optional parameter, not yet executed."""

    effect_name: str
    parameter: Optional[EffectParameter] = None

    @classmethod
    def with_value(cls, effect_name: str, parameter_name: str, value: Any) -> "EffectRequest":
        return cls(effect_name, EffectParameter(parameter_name, value))

    def to_dict(self) -> dict:
        data: dict = {"effect": self.effect_name}
        if self.parameter is not None:
            data["parameter"] = {"name": self.parameter.name, "value": self.parameter.value}
        return data


__all__ = ["EffectParameter", "EffectRequest"]
