from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent
SAMPLE_CAR_PATH = PACKAGE_DIR / "data" / "SampleCar.xml"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    return default if raw is None else str(raw)


@dataclass(frozen=True)
class Settings:
    input_path: Path
    output_path: Optional[Path]
    log_level: str


def load_settings(*, dotenv_path: Optional[Path] = None) -> Settings:
    # Real environment variables win over the .env file.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    input_raw = _env_str("CAR_DIAG_INPUT", "").strip()
    output_raw = _env_str("CAR_DIAG_OUTPUT", "").strip()
    log_level = _env_str("CAR_DIAG_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

    return Settings(
        input_path=Path(input_raw) if input_raw else SAMPLE_CAR_PATH,
        output_path=Path(output_raw) if output_raw else None,
        log_level=log_level,
    )


def setup_logging(level: str = "WARNING") -> None:
    """Log to stderr; stdout carries the diagnostic report."""

    log_level = getattr(logging, str(level).upper().strip(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[logging.StreamHandler(stream=sys.stderr)],
        force=True,
    )
