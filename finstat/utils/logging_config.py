# finstat/utils/logging_config.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Union

# LogRecord attributes that are not user-supplied `extra` fields
_STANDARD_KEYS = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class ExtraFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            k: v for k, v in record.__dict__.items() if k not in _STANDARD_KEYS
        }
        if not extras:
            return base
        extra_str = " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
        return f"{base} | {extra_str}"


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Application-side logging setup; within the library only
    BuildMultiPeriodReportUseCase.from_config_file calls it.

    2026-01-14 09:49:59 | INFO | finstat.entities.multi_period_report | message | entity=ACME

    A file handler (finstat.log) is added only when LOG_DIR is set.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()

    # calling twice must not duplicate handlers
    if root.handlers:
        root.setLevel(level)
        return

    root.setLevel(level)

    formatter = ExtraFormatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    log_dir_env = os.getenv("LOG_DIR")
    if log_dir_env:
        log_dir = Path(log_dir_env)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "finstat.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
