"""Structured logging setup.

Provides:
- JSON-lines file logging with trace/span identifiers when a span is recording
- Settings-derived log level
- Log file at <app_log_dir>/fitfocus.jsonl
- A console handler in debug mode
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider

from fitfocus.modules.config import AppSettings, config_manager
from fitfocus.version import VERSION

_EXCLUDED_RECORD_KEYS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module", "lineno",
    "funcName", "created", "msecs", "relativeCreated", "thread", "threadName", "processName", "process",
    "exc_info", "exc_text", "stack_info", "getMessage", "taskName",
}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        span = trace.get_current_span()
        trace_id = span_id = None
        if span and span.is_recording():
            sc = span.get_span_context()
            if sc.is_valid:
                trace_id = f"{sc.trace_id:032x}"
                span_id = f"{sc.span_id:016x}"

        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process_id": os.getpid(),
        }
        if trace_id:
            entry["trace_id"] = trace_id
        if span_id:
            entry["span_id"] = span_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for k, v in record.__dict__.items():
            if k not in _EXCLUDED_RECORD_KEYS:
                entry[f"extra_{k}"] = v
        return json.dumps(entry, default=str)


def _resolve_level(level_name: str) -> int:
    level = getattr(logging, level_name.upper(), None)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Optional[AppSettings] = None, install_tracer: bool = True) -> Path:
    """Configure root logging for the application.

    Replaces any existing root handlers.

    Returns:
        Path of the JSON-lines log file
    """
    settings = settings or config_manager.app_settings
    level = _resolve_level(settings.log_level)

    logs_dir = Path(settings.app_log_dir).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "fitfocus.jsonl"

    if install_tracer:
        resource = Resource.create(
            {
                SERVICE_NAME: settings.app_name,
                SERVICE_VERSION: VERSION,
                "environment": "development" if settings.debug_mode else "production",
            }
        )
        trace.set_tracer_provider(TracerProvider(resource=resource))

    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(level)
    root.addHandler(file_handler)
    root.setLevel(level)

    if settings.debug_mode:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        console.setLevel(logging.DEBUG)
        root.addHandler(console)

    logging.getLogger(__name__).info("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_file)
    return log_file
