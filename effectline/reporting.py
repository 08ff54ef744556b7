"""Structured failure events and the reporters that receive them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .jsonl import DEFAULT_MAX_BYTES, JSONLWriter

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectFailure:
    """A request that could not be applied during a processing run."""

    item_name: str
    effect_name: str
    error_message: str
    error_type: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "item_name": self.item_name,
            "effect_name": self.effect_name,
            "error_message": self.error_message,
            "error_type": self.error_type,
        }

    def __str__(self) -> str:
        return (
            f"Failed to apply effect '{self.effect_name}' on item "
            f"'{self.item_name}': {self.error_message}"
        )


@runtime_checkable
class FailureReporter(Protocol):
    """Collaborator notified once per failed request."""

    def report(self, failure: EffectFailure) -> None:
        ...


class LoggingReporter:
    """Report failures as warnings on a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or LOGGER

    def report(self, failure: EffectFailure) -> None:
        self.logger.warning("%s", failure)


class CollectingReporter:
    """Keep failures in memory, in the order they were reported."""

    def __init__(self) -> None:
        self._failures: List[EffectFailure] = []
        self._lock = Lock()

    @property
    def failures(self) -> List[EffectFailure]:
        with self._lock:
            return list(self._failures)

    def report(self, failure: EffectFailure) -> None:
        with self._lock:
            self._failures.append(failure)

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()


class JSONLFailureReporter:
    """Append each failure to a rotating JSONL file."""

    def __init__(self, path: Path, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.writer = JSONLWriter(path, max_bytes=max_bytes)

    def report(self, failure: EffectFailure) -> None:
        self.writer.append(failure.to_dict())


class CompositeReporter:
    """Forward every failure to each wrapped reporter."""

    def __init__(self, *reporters: FailureReporter) -> None:
        self.reporters = reporters

    def report(self, failure: EffectFailure) -> None:
        for reporter in self.reporters:
            reporter.report(failure)


__all__ = [
    "CollectingReporter",
    "CompositeReporter",
    "EffectFailure",
    "FailureReporter",
    "JSONLFailureReporter",
    "LoggingReporter",
]
