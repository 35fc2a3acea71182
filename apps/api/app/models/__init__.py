"""Expose ORM models."""
from .meeting import Meeting

__all__ = [
    "Meeting",
]
