"""Infrastructure layer - external adapters and wiring."""

from .app_factory import AppFactory

__all__ = [
    "AppFactory",
]
