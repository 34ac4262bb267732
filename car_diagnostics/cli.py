from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from car_diagnostics.config import load_settings, setup_logging
from car_diagnostics.engine import DiagnosticEngine
from car_diagnostics.loader import load_car
from car_diagnostics.sinks import FileSink, LineSink, StdoutSink

logger = logging.getLogger(__name__)


def _build_sink(out: str | None) -> LineSink:
    if out:
        return FileSink(Path(out))
    return StdoutSink()


def main(argv: List[str] | None = None) -> int:
    settings = load_settings()

    p = argparse.ArgumentParser(
        prog="car-diagnostics",
        description="Report missing fields, missing parts and damaged parts of a car record",
    )
    p.add_argument(
        "input",
        nargs="?",
        default=str(settings.input_path),
        help="Car record (.xml, .json, .yaml); defaults to CAR_DIAG_INPUT or the bundled sample",
    )
    p.add_argument(
        "--out",
        default=str(settings.output_path) if settings.output_path else None,
        help="Write report lines to this file instead of stdout",
    )
    p.add_argument("--log-level", default=settings.log_level)

    args = p.parse_args(argv)
    setup_logging(args.log_level)

    try:
        car = load_car(args.input)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load %s: %s", args.input, exc)
        print(f"An error occurred attempting to load {args.input}", file=sys.stderr)
        return 1

    sink = _build_sink(args.out)
    try:
        DiagnosticEngine(sink=sink).run(car)
    except ValueError as exc:
        logger.error("Diagnostics aborted: %s", exc)
        return 2
    finally:
        sink.close()

    return 0
