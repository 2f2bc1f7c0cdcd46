"""Event logging adapters."""

from .logging_event_logger import LoggingEventLogger

__all__ = ["LoggingEventLogger"]
