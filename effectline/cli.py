"""Command line interface for running effect jobs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List

from .jobs import JobError, load_job
from .reporting import CompositeReporter, FailureReporter, JSONLFailureReporter, LoggingReporter

LOGGER = logging.getLogger(__name__)


def build_reporter(failures_path: Path | None) -> FailureReporter:
    if failures_path is None:
        return LoggingReporter()
    return CompositeReporter(LoggingReporter(), JSONLFailureReporter(failures_path))


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply queued effects to the items of a job file")
    parser.add_argument("job", help="JSON job file describing items and their effect requests")
    parser.add_argument(
        "--effect",
        action="append",
        dest="effects",
        default=[],
        help="Extra effect class in module:Class format. Can be provided multiple times.",
    )
    parser.add_argument("--failures", help="Append failed requests to this JSONL file")
    parser.add_argument("--workers", type=int, default=None, help="Process items on N threads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    reporter = build_reporter(Path(args.failures) if args.failures else None)
    try:
        job = load_job(Path(args.job))
        processor, items = job.build_processor(
            reporter, extra_effects=args.effects, max_workers=args.workers
        )
    except (OSError, ImportError, JobError, TypeError, ValueError) as exc:
        LOGGER.error("Unable to load job %s: %s", args.job, exc)
        return 2

    summary = processor.process_all()
    output = {
        "items": [item.to_dict() for item in items],
        "summary": summary.to_dict(),
    }
    print(json.dumps(output, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
