from __future__ import annotations

"""Command line entry point: answer the setup questions, then crawl."""

import argparse
import logging
from pathlib import Path
from typing import Sequence

from . import config, traversal
from .bootstrap import PromptChooser, parse_output_methods, prompt_mongo_uri, select_output_methods
from .config_validation import validate_runtime_config
from .error_codes import ErrorCode, TraversalError
from .logging_utils import _scraper_event
from .models import TraversalConfig
from .sinks import RecordSink, build_sink
from .utils import ensure_dirs, log_line, setup_run_logger


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser for the crawler CLI."""

    parser = argparse.ArgumentParser(
        prog="catalog-crawler",
        description="Extract every course of one campus and academic year.",
    )
    parser.add_argument("--campus", help="Campus option value; prompted for when omitted.")
    parser.add_argument("--year", help="Academic year option value; prompted for when omitted.")
    parser.add_argument(
        "--output",
        help="Output methods, comma separated (mongo, local); prompted for when omitted.",
    )
    parser.add_argument("--mongo-uri", help="MongoDB connection string for the mongo output.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help=f"Directory for local JSON output (default: {config.OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one traversal. Returns the process exit code."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    ensure_dirs()
    setup_run_logger()

    try:
        methods = parse_output_methods(args.output) if args.output else select_output_methods()
    except ValueError as exc:
        parser.error(str(exc))

    mongo_uri = args.mongo_uri or config.MONGO_URI
    if "mongo" in methods and not mongo_uri:
        mongo_uri = prompt_mongo_uri()

    try:
        validate_runtime_config("cli", methods=methods, mongo_uri=mongo_uri)
    except ValueError as exc:
        parser.error(str(exc))

    output_dir = args.output_dir or config.OUTPUT_DIR

    def sink_factory(resolved: TraversalConfig) -> RecordSink:
        return build_sink(methods, resolved, mongo_uri=mongo_uri, output_dir=output_dir)

    try:
        summary = traversal.crawl(
            sink_factory,
            TraversalConfig(campus_code=args.campus, year_code=args.year),
            PromptChooser(),
            headless=False if args.headed else None,
        )
    except KeyboardInterrupt:
        log_line("[FATAL] Interrupted", level=logging.ERROR)
        return 130
    except Exception as exc:  # noqa: BLE001
        error_code = exc.error_code if isinstance(exc, TraversalError) else ErrorCode.INTERNAL
        _scraper_event(
            "error",
            phase="run",
            level=logging.ERROR,
            error_code=error_code,
            error=repr(exc),
        )
        log_line(f"[FATAL] {type(exc).__name__}: {exc}", level=logging.ERROR)
        return 1

    log_line(
        f"[RUN] {summary.records_written} courses from {summary.groups_done}/"
        f"{summary.groups_total} schools ({len(summary.empty_groups)} without courses)"
    )
    if summary.numeric_fallbacks:
        log_line(
            f"[RUN] {summary.numeric_fallbacks} numeric fields were not numbers and stored as NaN",
            level=logging.WARNING,
        )
    log_line("All done!")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
