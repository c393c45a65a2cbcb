"""
Database package for the translation history store.
"""

from .connection import Base, DatabaseManager
from .models import TranslationHistoryRecord, generate_history_id

__all__ = [
    "Base",
    "DatabaseManager",
    "TranslationHistoryRecord",
    "generate_history_id"
]
