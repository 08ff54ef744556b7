"""Exceptions raised by the effect pipeline."""

from __future__ import annotations


class EffectError(RuntimeError):
    """Raised when effect registration or execution fails."""


class UnknownEffectError(EffectError):
    """Raised when an effect name has no registered constructor."""


class InvalidParameterError(EffectError):
    """Raised by an effect when its parameter is missing or of the wrong type."""


class ItemNotTrackedError(EffectError):
    """Raised when requests are queued for an item the processor does not track."""


__all__ = [
    "EffectError",
    "InvalidParameterError",
    "ItemNotTrackedError",
    "UnknownEffectError",
]
