"""Per-item effect queues and the batch loop that executes them."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from threading import RLock
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import EffectError, ItemNotTrackedError
from .items import Item
from .registry import EffectRegistry
from .reporting import EffectFailure, FailureReporter, LoggingReporter
from .requests import EffectRequest

LOGGER = logging.getLogger(__name__)


@dataclass
class ProcessingSummary:
    items_processed: int = 0
    effects_applied: int = 0
    failures: List[EffectFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> Dict[str, object]:
        return {
            "items_processed": self.items_processed,
            "effects_applied": self.effects_applied,
            "failed": self.failed,
            "failures": [failure.to_dict() for failure in self.failures],
        }


class Processor:
    """Track items, queue effect requests for them and apply the queues.

    Items are keyed by identity. Every request runs inside its own failure
    boundary during :meth:`process_all`: a failure is handed to the reporter
    once and the remaining requests still run.
    """

    def __init__(
        self,
        registry: Optional[EffectRegistry] = None,
        reporter: Optional[FailureReporter] = None,
        *,
        max_workers: Optional[int] = None,
    ) -> None:
        self._registry = registry if registry is not None else EffectRegistry()
        self.reporter = reporter if reporter is not None else LoggingReporter()
        self.max_workers = max_workers
        self._queues: Dict[Item, List[EffectRequest]] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    def effect_registry(self) -> EffectRegistry:
        return self._registry

    def add_item(self, item: Item) -> None:
        with self._lock:
            self._queues.setdefault(item, [])

    def remove_item(self, item: Item) -> bool:
        with self._lock:
            return self._queues.pop(item, None) is not None

    def queue_effect(self, item: Item, request: EffectRequest) -> None:
        with self._lock:
            try:
                queue = self._queues[item]
            except KeyError as exc:
                raise ItemNotTrackedError(
                    f"Item '{item.name}' is not registered for processing."
                ) from exc
            queue.append(request)

    def dequeue_effect(self, item: Item, effect_name: str) -> int:
        """Drop every queued request named ``effect_name``; return how many went."""

        with self._lock:
            queue = self._queues.get(item)
            if not queue:
                return 0
            kept = [request for request in queue if request.effect_name != effect_name]
            removed = len(queue) - len(kept)
            queue[:] = kept
            return removed

    def pending(self, item: Item) -> Tuple[EffectRequest, ...]:
        with self._lock:
            return tuple(self._queues.get(item, ()))

    def all_items(self) -> List[Item]:
        with self._lock:
            return list(self._queues)

    def __contains__(self, item: object) -> bool:
        with self._lock:
            return item in self._queues

    def __len__(self) -> int:
        with self._lock:
            return len(self._queues)

    # ------------------------------------------------------------------
    def process_all(self) -> ProcessingSummary:
        """Apply every queued request to every tracked item.

        Queues are left in place; calling this twice applies them twice.
        """

        with self._lock:
            work = [(item, list(queue)) for item, queue in self._queues.items()]

        summary = ProcessingSummary(items_processed=len(work))
        if self.max_workers and self.max_workers > 1 and len(work) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(lambda entry: self._process_item(*entry), work))
        else:
            outcomes = [self._process_item(item, requests) for item, requests in work]

        for applied, failures in outcomes:
            summary.effects_applied += applied
            summary.failures.extend(failures)

        LOGGER.info(
            "Processed %d item(s): %d effect(s) applied, %d failed",
            summary.items_processed,
            summary.effects_applied,
            summary.failed,
        )
        return summary

    def _process_item(
        self, item: Item, requests: Sequence[EffectRequest]
    ) -> Tuple[int, List[EffectFailure]]:
        applied = 0
        failures: List[EffectFailure] = []
        for request in requests:
            failure = self._apply_request(item, request)
            if failure is None:
                applied += 1
                continue
            failures.append(failure)
            self._report(failure)
        return applied, failures

    def _report(self, failure: EffectFailure) -> None:
        try:
            self.reporter.report(failure)
        except Exception:  # noqa: BLE001
            LOGGER.exception(
                "Reporter failed for effect '%s' on item '%s'",
                failure.effect_name,
                failure.item_name,
            )

    def _apply_request(self, item: Item, request: EffectRequest) -> Optional[EffectFailure]:
        try:
            effect = self._registry.create(request.effect_name)
            succeeded = effect.apply(item, request.parameter)
        except EffectError as exc:
            return self._failure(item, request, str(exc), type(exc).__name__)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception(
                "Effect '%s' raised unexpectedly on item '%s'", request.effect_name, item.name
            )
            return self._failure(item, request, str(exc), type(exc).__name__)

        if succeeded is False:
            return self._failure(item, request, "Effect reported failure", "EffectError")
        LOGGER.debug("Applied effect '%s' to item '%s'", request.effect_name, item.name)
        return None

    @staticmethod
    def _failure(item: Item, request: EffectRequest, message: str, error_type: str) -> EffectFailure:
        return EffectFailure(
            item_name=item.name,
            effect_name=request.effect_name,
            error_message=message,
            error_type=error_type,
        )


__all__ = ["ProcessingSummary", "Processor"]
