"""Local verification history."""

from .history import HistoryStore

__all__ = ["HistoryStore"]
