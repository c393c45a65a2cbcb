"""
Database repositories package for the translation history store.
"""

from .base import BaseRepository
from .history_repository import HistoryRepository

__all__ = [
    "BaseRepository",
    "HistoryRepository"
]
