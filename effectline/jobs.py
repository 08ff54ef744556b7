"""JSON job files describing items, their requests and extra effects."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .items import Item
from .processor import Processor
from .registry import EffectRegistry, load_effect_class
from .reporting import FailureReporter
from .requests import EffectParameter, EffectRequest


class JobError(ValueError):
    """Raised when a job document is malformed."""


@dataclass(frozen=True)
class ItemJob:
    name: str
    kind: str = "item"
    requests: Tuple[EffectRequest, ...] = ()


@dataclass(frozen=True)
class Job:
    """Parsed job: effect specs to import plus items with their requests."""

    items: Tuple[ItemJob, ...] = ()
    effects: Tuple[str, ...] = ()

    def build_processor(
        self,
        reporter: Optional[FailureReporter] = None,
        *,
        extra_effects: Sequence[str] = (),
        max_workers: Optional[int] = None,
    ) -> Tuple[Processor, List[Item]]:
        """Return a processor with every item added and every request queued."""

        registry = EffectRegistry(
            load_effect_class(spec) for spec in (*self.effects, *extra_effects)
        )
        processor = Processor(registry, reporter, max_workers=max_workers)
        items: List[Item] = []
        for item_job in self.items:
            item = Item(item_job.name, kind=item_job.kind)
            processor.add_item(item)
            for request in item_job.requests:
                processor.queue_effect(item, request)
            items.append(item)
        return processor, items


def load_job(path: Path) -> Job:
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise JobError(f"Job file {path} is not valid JSON: {exc}") from exc
    return parse_job(raw)


def parse_job(raw: Any) -> Job:
    if not isinstance(raw, Mapping):
        raise JobError("Job document must be a JSON object")

    effects = raw.get("effects", [])
    if not isinstance(effects, list) or not all(isinstance(spec, str) for spec in effects):
        raise JobError("'effects' must be a list of 'module:ClassName' strings")

    items = raw.get("items", [])
    if not isinstance(items, list):
        raise JobError("'items' must be a list")

    return Job(
        items=tuple(_parse_item(entry, index) for index, entry in enumerate(items)),
        effects=tuple(effects),
    )


def _parse_item(entry: Any, index: int) -> ItemJob:
    if not isinstance(entry, Mapping):
        raise JobError(f"items[{index}] must be an object")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise JobError(f"items[{index}] requires a non-empty 'name'")
    kind = entry.get("kind", "item")
    if not isinstance(kind, str):
        raise JobError(f"items[{index}].kind must be a string")
    requests = entry.get("requests", [])
    if not isinstance(requests, list):
        raise JobError(f"items[{index}].requests must be a list")
    return ItemJob(
        name=name,
        kind=kind,
        requests=tuple(
            _parse_request(request, f"items[{index}].requests[{position}]")
            for position, request in enumerate(requests)
        ),
    )


def _parse_request(entry: Any, where: str) -> EffectRequest:
    if not isinstance(entry, Mapping):
        raise JobError(f"{where} must be an object")
    effect_name = entry.get("effect")
    if not isinstance(effect_name, str) or not effect_name:
        raise JobError(f"{where} requires a non-empty 'effect'")

    parameter = entry.get("parameter")
    if parameter is None:
        return EffectRequest(effect_name)
    if not isinstance(parameter, Mapping) or not isinstance(parameter.get("name"), str):
        raise JobError(f"{where}.parameter must be an object with a string 'name'")
    # values are kept verbatim; effects validate them when applied
    return EffectRequest(effect_name, EffectParameter(parameter["name"], parameter.get("value")))


__all__ = ["ItemJob", "Job", "JobError", "load_job", "parse_job"]
