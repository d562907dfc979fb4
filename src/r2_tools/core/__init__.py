"""Core utilities and shared components for r2-tools."""

from .config import Settings, settings
from .exceptions import (
    ConfigurationError,
    R2ToolsError,
    RemoteListingError,
    ValidationError,
)
from .observability import get_logger, get_tracer

__all__ = [
    "Settings",
    "settings",
    "R2ToolsError",
    "ConfigurationError",
    "RemoteListingError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
