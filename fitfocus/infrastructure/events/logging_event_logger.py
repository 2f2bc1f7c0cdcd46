"""EventLogger that writes manager events to the application log."""

import logging
from typing import Any, Dict, Optional

from fitfocus.core.log_sanitizer import sanitize_for_logging
from fitfocus.interfaces.events import LoggableEvent
from fitfocus.modules.config import ConfigManager, config_manager

logger = logging.getLogger(__name__)
metrics_logger = logging.getLogger(f"{__name__}.metrics")


class LoggingEventLogger:
    """
    Event logger for headless use.

    Severe events are logged at WARNING, analytic events at INFO. When
    FEATURE_METRICS_LOGGING_ENABLED is set, every event is also written as a
    ``[METRIC]`` line carrying only counts, flags and type codes, so session
    notes and error text never reach the metrics stream.
    """

    def __init__(self, user_id: Optional[str] = None, config: Optional[ConfigManager] = None):
        self.user_id = user_id
        self._config = config

    @property
    def metrics_enabled(self) -> bool:
        settings = (self._config or config_manager).app_settings
        return settings.feature_metrics_logging_enabled

    def track_event(self, event: LoggableEvent) -> None:
        params = event.parameters or {}
        level = logging.WARNING if event.log_type == "severe" else logging.INFO
        if params:
            logger.log(level, "%s %s", event.event_name, _render(params))
        else:
            logger.log(level, "%s", event.event_name)

        if self.metrics_enabled:
            self._log_metric(event.event_name, log_type=event.log_type, **_metric_safe(params))

    def _log_metric(self, event_type: str, **metadata: Any) -> None:
        user = sanitize_for_logging(self.user_id) if self.user_id else "unknown"
        line = f"[METRIC] [{user}] {event_type}"
        if metadata:
            line = f"{line} {_render(metadata)}"
        metrics_logger.info(line)


def _render(params: Dict[str, Any]) -> str:
    return " ".join(f"{k}={sanitize_for_logging(v)}" for k, v in params.items())


def _metric_safe(params: Dict[str, Any]) -> Dict[str, Any]:
    """Keep counts, flags and types; drop free text such as error descriptions."""
    return {
        k: v for k, v in params.items()
        if isinstance(v, (bool, int, float)) or k.endswith(("_type", "_code"))
    }
