"""
SQLAlchemy models for the translation history store.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Integer, String, Text

from neural_translator.database.connection import Base


def generate_history_id(now: datetime = None) -> str:
    """Sortable id: UTC timestamp followed by a short random suffix."""
    now = now or datetime.now(timezone.utc)
    return f"{now.strftime('%Y%m%d%H%M%S%f')}-{uuid.uuid4().hex[:8]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TranslationHistoryRecord(Base):
    """One settled translation."""

    __tablename__ = "translation_history"

    id = Column(String(40), primary_key=True, default=generate_history_id)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    source_text = Column(Text, nullable=False)
    translated_text = Column(Text, nullable=False)
    from_language = Column(String(32), nullable=False)
    to_language = Column(String(32), nullable=False)
    engine = Column(String(16), nullable=True)
    latency_ms = Column(Integer, nullable=True)
    cache_hit = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint('latency_ms IS NULL OR latency_ms >= 0', name='check_latency_non_negative'),
        Index('idx_translation_history_pair', 'from_language', 'to_language'),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "source_text": self.source_text,
            "translated_text": self.translated_text,
            "from_language": self.from_language,
            "to_language": self.to_language,
            "engine": self.engine,
            "latency_ms": self.latency_ms,
            "cache_hit": self.cache_hit
        }
