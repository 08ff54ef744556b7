"""Append-only JSONL file with size-bounded rotation."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List

DEFAULT_MAX_BYTES = 75 * 1024


class JSONLWriter:
    """Write one JSON record per line, trimming the oldest lines past ``max_bytes``."""

    def __init__(self, path: Path, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.path = Path(path)
        self.max_bytes = max_bytes
        self._lock = Lock()

    def append(self, record: Dict[str, Any]) -> None:
        line = json.dumps(record, ensure_ascii=False, sort_keys=True)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
            if self.path.stat().st_size > self.max_bytes:
                self._rewrite(self._newest_lines())

    def read(self) -> List[Dict[str, Any]]:
        with self._lock:
            try:
                lines = self.path.read_text("utf-8").splitlines()
            except FileNotFoundError:
                return []
        return [json.loads(line) for line in lines if line.strip()]

    def _newest_lines(self) -> List[str]:
        lines = self.path.read_text("utf-8").splitlines()
        kept: List[str] = []
        total = 0
        for line in reversed(lines):
            size = len(line.encode("utf-8")) + 1
            if total + size > self.max_bytes:
                break
            kept.append(line)
            total += size
        kept.reverse()
        return kept

    def _rewrite(self, lines: List[str]) -> None:
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=".tmp_jsonl_",
            suffix=self.path.suffix or ".jsonl",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.writelines(f"{line}\n" for line in lines)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


__all__ = ["DEFAULT_MAX_BYTES", "JSONLWriter"]
