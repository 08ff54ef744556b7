"""Pluggable effect pipeline: registry, per-item queues and batch execution."""

from .effects import BaseEffect, BlurEffect, GrayscaleEffect, ResizeEffect
from .errors import EffectError, InvalidParameterError, ItemNotTrackedError, UnknownEffectError
from .items import Item
from .processor import ProcessingSummary, Processor
from .registry import EffectRegistry, load_effect_class
from .reporting import (
    CollectingReporter,
    CompositeReporter,
    EffectFailure,
    FailureReporter,
    JSONLFailureReporter,
    LoggingReporter,
)
from .requests import EffectParameter, EffectRequest

__all__ = [
    "BaseEffect",
    "BlurEffect",
    "CollectingReporter",
    "CompositeReporter",
    "EffectError",
    "EffectFailure",
    "EffectParameter",
    "EffectRegistry",
    "EffectRequest",
    "FailureReporter",
    "GrayscaleEffect",
    "InvalidParameterError",
    "Item",
    "ItemNotTrackedError",
    "JSONLFailureReporter",
    "LoggingReporter",
    "ProcessingSummary",
    "Processor",
    "ResizeEffect",
    "UnknownEffectError",
    "load_effect_class",
]
