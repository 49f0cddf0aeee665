from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig

LOGGER_NAME = "daily_digest"

# Shared by the log handler and the progress bar so their output does not interleave
STDERR_CONSOLE = Console(stderr=True)


def setup_logging(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_string(cfg.level))
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        # stdout carries the JSON output, so diagnostics go to stderr
        console_handler = RichHandler(
            console=STDERR_CONSOLE,
            rich_tracebacks=True,
            show_time=False,
            show_level=True,
            show_path=False,
        )
        console_handler.setLevel(_level_from_string(cfg.level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if cfg.file:
        log_dir = log_dir or Path(cfg.directory or ".")
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        file_handler.setLevel(_level_from_string(cfg.level))
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        logger.addHandler(file_handler)

    return logger


def log_event(
    logger: logging.Logger | None,
    message: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    if logger is None:
        return
    logger.log(level, message, extra=fields)


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extract_extras(record))
        return json.dumps(payload, ensure_ascii=True, default=str)


_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
