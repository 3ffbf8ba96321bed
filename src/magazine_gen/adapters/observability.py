"""Runtime logging configuration with bounded retention."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_CONFIGURED = False


def _int_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def _resolve_level(level_name: str | None) -> int:
    name = (level_name or os.environ.get("MAGAZINE_GEN_LOG_LEVEL", "")).strip().upper()
    level = getattr(logging, name or "WARNING", None)
    return level if isinstance(level, int) else logging.WARNING


def _file_handler(formatter: logging.Formatter) -> RotatingFileHandler | None:
    raw_path = os.environ.get("MAGAZINE_GEN_LOG_PATH", "").strip()
    if not raw_path:
        return None
    log_path = Path(raw_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=log_path,
        maxBytes=_int_env(
            "MAGAZINE_GEN_LOG_MAX_BYTES",
            1024 * 1024,
            minimum=64 * 1024,
            maximum=50 * 1024 * 1024,
        ),
        backupCount=_int_env("MAGAZINE_GEN_LOG_BACKUP_COUNT", 5, minimum=1, maximum=50),
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def configure_runtime_logging(level_name: str | None = None) -> None:
    """Configure stderr logging, plus a rotating file when a log path is set.

    `level_name` (from CLI flags) wins over `MAGAZINE_GEN_LOG_LEVEL`; the
    default level is WARNING so normal runs only print the CLI summary.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(_resolve_level(level_name))
    root.handlers.clear()
    root.addHandler(stream_handler)
    file_handler = _file_handler(formatter)
    if file_handler is not None:
        root.addHandler(file_handler)

    _CONFIGURED = True
