"""Tests for queueing and batch execution in the processor."""

from __future__ import annotations

import logging

import pytest

from effectline.errors import ItemNotTrackedError
from effectline.items import Item
from effectline.processor import Processor
from effectline.registry import EffectRegistry
from effectline.reporting import CollectingReporter
from effectline.requests import EffectParameter, EffectRequest

from .dummy_effects import AlternateResizeEffect, ExplodingEffect, RefusingEffect


def _size(effect_name: str, value) -> EffectRequest:
    return EffectRequest(effect_name, EffectParameter("Size", value))


@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def processor(reporter: CollectingReporter) -> Processor:
    return Processor(reporter=reporter)


def test_processor_exposes_builtin_registry(processor: Processor) -> None:
    assert processor.effect_registry().list_names() == {"Resize", "Blur", "Grayscale"}


def test_image_scenarios(processor: Processor, reporter: CollectingReporter) -> None:
    image1 = Item("Image#1", kind="image")
    image2 = Item("Image#2", kind="image")
    image3 = Item("Image#3", kind="image")
    for image in (image1, image2, image3):
        processor.add_item(image)

    processor.queue_effect(image1, _size("Resize", 100))
    processor.queue_effect(image1, _size("Blur", 2))
    processor.queue_effect(image2, _size("Resize", 100))
    processor.queue_effect(image3, _size("Resize", 150))
    processor.queue_effect(image3, _size("Blur", 5))
    processor.queue_effect(image3, EffectRequest("Grayscale"))

    summary = processor.process_all()

    assert image1.render() == "Original image 'Image#1' -> Resize to 100px -> Blur 2px"
    assert image2.render() == "Original image 'Image#2' -> Resize to 100px"
    assert image3.render() == (
        "Original image 'Image#3' -> Resize to 150px -> Blur 5px -> Convert to Grayscale"
    )
    assert summary.items_processed == 3
    assert summary.effects_applied == 6
    assert summary.failures == []
    assert reporter.failures == []


def test_add_item_is_idempotent(processor: Processor) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Grayscale"))
    processor.add_item(item)
    assert processor.all_items() == [item]
    assert processor.pending(item) == (EffectRequest("Grayscale"),)


def test_all_items_in_insertion_order(processor: Processor) -> None:
    items = [Item(name) for name in ("c", "a", "b")]
    for item in items:
        processor.add_item(item)
    assert processor.all_items() == items
    assert len(processor) == 3


def test_queue_on_untracked_item_raises_without_mutation(processor: Processor) -> None:
    tracked, stranger = Item("tracked"), Item("stranger")
    processor.add_item(tracked)

    with pytest.raises(ItemNotTrackedError):
        processor.queue_effect(stranger, EffectRequest("Grayscale"))

    assert stranger not in processor
    assert processor.all_items() == [tracked]
    assert processor.pending(tracked) == ()
    assert stranger.history == ("Original item 'stranger'",)


def test_items_with_same_name_keep_separate_queues(processor: Processor) -> None:
    first, second = Item("twin"), Item("twin")
    processor.add_item(first)
    processor.add_item(second)
    processor.queue_effect(first, EffectRequest("Grayscale"))

    processor.process_all()

    assert first.render() == "Original item 'twin' -> Convert to Grayscale"
    assert second.render() == "Original item 'twin'"


def test_dequeue_removes_all_and_only_matching(processor: Processor) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, _size("Blur", 1))
    processor.queue_effect(item, EffectRequest("Grayscale"))
    processor.queue_effect(item, _size("Blur", 3))
    processor.queue_effect(item, _size("Resize", 10))

    assert processor.dequeue_effect(item, "Blur") == 2
    assert processor.pending(item) == (EffectRequest("Grayscale"), _size("Resize", 10))

    assert processor.dequeue_effect(item, "Sepia") == 0
    assert processor.pending(item) == (EffectRequest("Grayscale"), _size("Resize", 10))


def test_dequeue_on_untracked_item_is_noop(processor: Processor) -> None:
    assert processor.dequeue_effect(Item("ghost"), "Blur") == 0
    assert processor.all_items() == []


def test_remove_item_discards_queue_and_keeps_history(processor: Processor) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Grayscale"))
    processor.process_all()

    assert processor.remove_item(item) is True
    assert processor.remove_item(item) is False
    assert processor.all_items() == []

    processor.add_item(item)
    assert processor.pending(item) == ()
    assert item.render() == "Original item 'a' -> Convert to Grayscale"


def test_unknown_effect_reported_once(processor: Processor, reporter: CollectingReporter) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Sepia"))

    summary = processor.process_all()

    assert item.history == ("Original item 'a'",)
    assert len(reporter.failures) == 1
    failure = reporter.failures[0]
    assert failure.item_name == "a"
    assert failure.effect_name == "Sepia"
    assert failure.error_message == "Effect 'Sepia' is not registered."
    assert failure.error_type == "UnknownEffectError"
    assert summary.failures == reporter.failures


@pytest.mark.parametrize("parameter", [None, EffectParameter("Size", "big")])
@pytest.mark.parametrize("effect_name", ["Resize", "Blur"])
def test_invalid_parameter_reported_once(
    processor: Processor, reporter: CollectingReporter, effect_name: str, parameter
) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest(effect_name, parameter))

    processor.process_all()

    assert item.history == ("Original item 'a'",)
    assert [failure.error_type for failure in reporter.failures] == ["InvalidParameterError"]


def test_failures_do_not_affect_siblings(processor: Processor, reporter: CollectingReporter) -> None:
    broken, healthy = Item("broken"), Item("healthy")
    processor.add_item(broken)
    processor.add_item(healthy)
    processor.queue_effect(broken, _size("Resize", "wide"))
    processor.queue_effect(broken, EffectRequest("Sepia"))
    processor.queue_effect(broken, _size("Blur", 4))
    processor.queue_effect(healthy, EffectRequest("Grayscale"))

    summary = processor.process_all()

    assert broken.render() == "Original item 'broken' -> Blur 4px"
    assert healthy.render() == "Original item 'healthy' -> Convert to Grayscale"
    assert [(f.item_name, f.effect_name) for f in reporter.failures] == [
        ("broken", "Resize"),
        ("broken", "Sepia"),
    ]
    assert summary.effects_applied == 2
    assert summary.failed == 2


def test_third_party_exceptions_and_false_results_are_reported(
    reporter: CollectingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    processor = Processor(EffectRegistry([ExplodingEffect, RefusingEffect]), reporter)
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Explode"))
    processor.queue_effect(item, EffectRequest("Refuse"))
    processor.queue_effect(item, EffectRequest("Grayscale"))

    with caplog.at_level(logging.ERROR, logger="effectline.processor"):
        processor.process_all()

    assert [(f.effect_name, f.error_type) for f in reporter.failures] == [
        ("Explode", "ZeroDivisionError"),
        ("Refuse", "EffectError"),
    ]
    assert item.render() == "Original item 'a' -> Convert to Grayscale"
    assert "raised unexpectedly" in caplog.text


def test_queues_survive_processing(processor: Processor) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Grayscale"))
    processor.process_all()
    processor.process_all()
    assert item.history.count("Convert to Grayscale") == 2


def test_registry_changes_apply_to_next_run(processor: Processor, reporter: CollectingReporter) -> None:
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Grayscale"))
    processor.effect_registry().unregister("Grayscale")

    processor.process_all()

    assert reporter.failures[0].error_type == "UnknownEffectError"


def test_duplicate_registration_keeps_original_variant(processor: Processor) -> None:
    processor.effect_registry().register_effect(AlternateResizeEffect)
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, _size("Resize", 100))
    processor.process_all()
    assert item.history[-1] == "Resize to 100px"


def test_default_reporter_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    processor = Processor()
    item = Item("a")
    processor.add_item(item)
    processor.queue_effect(item, EffectRequest("Sepia"))

    with caplog.at_level(logging.WARNING):
        processor.process_all()

    assert "Failed to apply effect 'Sepia' on item 'a'" in caplog.text


def test_parallel_processing_keeps_per_item_order(reporter: CollectingReporter) -> None:
    processor = Processor(reporter=reporter, max_workers=4)
    items = [Item(f"item-{index}") for index in range(20)]
    for index, item in enumerate(items):
        processor.add_item(item)
        processor.queue_effect(item, _size("Resize", index))
        processor.queue_effect(item, EffectRequest("Sepia"))
        processor.queue_effect(item, _size("Blur", index + 1))
        processor.queue_effect(item, EffectRequest("Grayscale"))

    summary = processor.process_all()

    for index, item in enumerate(items):
        assert item.history[1:] == (
            f"Resize to {index}px",
            f"Blur {index + 1}px",
            "Convert to Grayscale",
        )
    assert summary.effects_applied == 60
    assert len(reporter.failures) == 20
    assert [failure.item_name for failure in summary.failures] == [item.name for item in items]


class _BrokenReporter:
    def __init__(self) -> None:
        self.calls = 0

    def report(self, failure) -> None:
        self.calls += 1
        raise OSError("disk full")


def test_raising_reporter_does_not_abort_batch(caplog: pytest.LogCaptureFixture) -> None:
    reporter = _BrokenReporter()
    processor = Processor(reporter=reporter)
    first, second = Item("first"), Item("second")
    processor.add_item(first)
    processor.add_item(second)
    processor.queue_effect(first, EffectRequest("Sepia"))
    processor.queue_effect(first, EffectRequest("Grayscale"))
    processor.queue_effect(second, EffectRequest("Grayscale"))

    with caplog.at_level(logging.ERROR, logger="effectline.processor"):
        summary = processor.process_all()

    assert first.render() == "Original item 'first' -> Convert to Grayscale"
    assert second.render() == "Original item 'second' -> Convert to Grayscale"
    assert reporter.calls == 1
    assert [(f.item_name, f.effect_name) for f in summary.failures] == [("first", "Sepia")]
    assert summary.effects_applied == 2
    assert "Reporter failed for effect 'Sepia' on item 'first'" in caplog.text
