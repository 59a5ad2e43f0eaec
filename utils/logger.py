from __future__ import annotations

import json
import logging
import logging.handlers
import sys
import time
from contextvars import ContextVar
from functools import wraps
from pathlib import Path
from typing import Any

from config.settings import settings

# Correlation ID for tracing a single position analysis
_analysis_id: ContextVar[str] = ContextVar("analysis_id", default="")


def set_analysis_id(aid: str) -> None:
    _analysis_id.set(aid)


def get_analysis_id() -> str:
    return _analysis_id.get()


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Correlation id and stage timing carried by a record, in output order."""
    fields: dict[str, Any] = {}
    aid = getattr(record, "analysis_id", None) or _analysis_id.get()
    if aid:
        fields["analysis_id"] = aid
    duration = getattr(record, "duration_ms", None)
    if duration is not None:
        fields["duration_ms"] = round(duration, 1)
    return fields


class AnalysisContextFilter(logging.Filter):
    """Stamps the active analysis id onto each record as it is emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "analysis_id", None):
            record.analysis_id = _analysis_id.get()
        return True


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

class JSONFormatter(logging.Formatter):
    """One object per line; ``extra_data`` goes under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_record_fields(record),
        }
        extra = getattr(record, "extra_data", None)
        if extra:
            entry["extra"] = extra
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``<time> LEVEL logger: message | key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.formatTime(record, self.datefmt)} {record.levelname:<7} {record.name}: {record.getMessage()}"
        fields = {**_record_fields(record), **(getattr(record, "extra_data", None) or {})}
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ---------------------------------------------------------------------------
# Setup (called once)
# ---------------------------------------------------------------------------

_configured = False


def setup_logging() -> None:
    global _configured
    if _configured:
        return
    _configured = True

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    fmt = settings.log_format.lower()
    log_file = settings.log_file

    formatter: logging.Formatter
    if fmt == "json":
        formatter = JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = TextFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    context_filter = AnalysisContextFilter()
    root = logging.getLogger()
    root.setLevel(level)

    # Console handler
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.addFilter(context_filter)
    root.addHandler(console)

    # File handler (rotating)
    if not log_file:
        log_dir = settings.project_root / "storage" / "logs"
        log_file = str(log_dir / "payoff_analyzer.log")

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.addFilter(context_filter)
    root.addHandler(file_handler)

    # Quiet noisy third-party loggers
    for name in ("urllib3", "yfinance", "peewee"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------

def log_timed(func):
    """Decorator for analysis stages: logs duration, and the error if one escapes."""
    logger = logging.getLogger(f"analysis.stage.{func.__name__}")

    @wraps(func)
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception:
            duration = (time.perf_counter() - t0) * 1000
            logger.warning(
                "Stage failed",
                extra={"duration_ms": duration, "extra_data": {"stage": func.__name__}},
            )
            raise
        duration = (time.perf_counter() - t0) * 1000
        logger.debug(
            "Stage completed",
            extra={"duration_ms": duration, "extra_data": {"stage": func.__name__}},
        )
        return result

    return wrapper
