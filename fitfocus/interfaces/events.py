"""Event logger interface for reporting manager activity."""

from typing import Any, Dict, Optional, Protocol


class LoggableEvent(Protocol):
    """An analytics or diagnostics event."""

    @property
    def event_name(self) -> str:
        ...

    @property
    def parameters(self) -> Optional[Dict[str, Any]]:
        ...

    @property
    def log_type(self) -> str:
        """Either "analytic" or "severe"."""
        ...


class EventLogger(Protocol):
    """
    Side channel for events that are reported rather than raised.

    Background failures (stream termination, cache save errors) reach
    callers only through this port.
    """

    def track_event(self, event: LoggableEvent) -> None:
        """
        Record an event.

        Args:
            event: Event to record
        """
        ...
