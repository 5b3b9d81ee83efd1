import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Index, Integer, String, Text

from .connection import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MeaningObject(Base):
    """Canonical meaning record, owned by the workspace that created it."""

    __tablename__ = "meaning_objects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    workspace_id = Column(String, nullable=False, index=True)
    created_by = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)  # Lowercase meaning type ("task", "goal", ...)
    source_lang = Column(String(16), nullable=False)
    meaning_json = Column(JSON, nullable=False)  # Whole validated payload, replaced on update
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class TranslationCacheEntry(Base):
    """Durable tier of the translation cache: one rendered string per key."""

    __tablename__ = "translation_cache"
    __table_args__ = (Index("ix_translation_cache_timestamp", "timestamp", "seq"),)

    key = Column(String, primary_key=True)  # table:id:field:locale or meaning:id:locale
    text = Column(Text, nullable=False)
    timestamp = Column(Float, nullable=False)  # Epoch seconds at insertion
    seq = Column(Integer, nullable=False, default=0)  # Write order, breaks timestamp ties
