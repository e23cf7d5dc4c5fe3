"""Core utilities and shared components for objstore-tools."""

from .config import settings
from .exceptions import ObjstoreToolsError, ValidationError
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "ObjstoreToolsError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
