"""
SQLAlchemy Models for taxonomy persistence

One row per (category, subcategory) taxonomy entry, plus a single-row
table holding the store version. Keyword buckets are stored as JSON.
"""

from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, JSON, UniqueConstraint, Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TaxonomyEntryRecord(Base):
    """Persisted taxonomy entry (append-only: rows are merged, never shrunk)."""
    __tablename__ = "taxonomy_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(200), nullable=False)
    subcategory = Column(String(200), nullable=False)

    # {"primary": [...], "secondary": [...], ...}
    keywords = Column(JSON, nullable=False, default=dict)
    uk_terms = Column(JSON, nullable=False, default=list)
    url_patterns = Column(JSON, nullable=False, default=list)
    schema_hints = Column(JSON, nullable=False, default=list)

    confidence = Column(Float, default=1.0)
    source = Column(String(32), nullable=False, default="user_input")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("category", "subcategory", name="uq_taxonomy_category_subcategory"),
        Index("idx_taxonomy_category", "category"),
    )

    def __repr__(self):
        return f"<TaxonomyEntryRecord {self.category} / {self.subcategory}>"


class TaxonomyVersionRecord(Base):
    """Single row tracking the persisted store version."""
    __tablename__ = "taxonomy_version"

    id = Column(Integer, primary_key=True, default=1)
    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
