"""Items carrying an append-only history of applied effects."""

from __future__ import annotations

from typing import List, Tuple

HISTORY_SEPARATOR = " -> "


class Item:
    """A named entity whose history records every effect applied to it.

    Items hash and compare by identity, so two items sharing a name are
    still tracked separately by a :class:`~effectline.processor.Processor`.
    """

    def __init__(self, name: str, kind: str = "item") -> None:
        self.name = name
        self.kind = kind
        self._history: List[str] = [f"Original {kind} '{name}'"]

    @property
    def history(self) -> Tuple[str, ...]:
        return tuple(self._history)

    def append_description(self, text: str) -> None:
        self._history.append(text)

    def render(self) -> str:
        return HISTORY_SEPARATOR.join(self._history)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind,
            "history": list(self._history),
            "rendered": self.render(),
        }

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Item(name={self.name!r}, kind={self.kind!r})"


__all__ = ["HISTORY_SEPARATOR", "Item"]
