"""Data package for the trust scoring service.

This package exposes database models and store helpers for persisted
verification history and configuration.
"""

from .models import (
    Base,
    ConfigEntry,
    HistoryEntry,
)

__all__ = [
    "Base",
    "ConfigEntry",
    "HistoryEntry",
]
