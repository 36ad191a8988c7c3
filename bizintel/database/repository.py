"""
Repository Layer - Taxonomy persistence

Simple functions to save a TaxonomyStore to the database and load it back.
Saving is an append-only merge: keywords already stored are kept, new
ones are appended, nothing is deleted.
"""

import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..taxonomy.models import TaxonomyBucket, TaxonomyEntry, TaxonomySource
from ..taxonomy.store import TaxonomyStore
from .models import TaxonomyEntryRecord, TaxonomyVersionRecord

logger = logging.getLogger(__name__)


def _merge_lists(existing: List[str], new: List[str]) -> List[str]:
    merged = list(existing or [])
    seen = {item.lower() for item in merged}
    for item in new:
        if item.lower() not in seen:
            seen.add(item.lower())
            merged.append(item)
    return merged


def save_entry(db: Session, entry: TaxonomyEntry) -> TaxonomyEntryRecord:
    """Insert an entry, or merge its keywords into the stored row."""
    record = db.execute(
        select(TaxonomyEntryRecord).where(
            TaxonomyEntryRecord.category == entry.category,
            TaxonomyEntryRecord.subcategory == entry.subcategory,
        )
    ).scalar_one_or_none()

    keywords = entry.bucket.to_dict()

    if record is None:
        record = TaxonomyEntryRecord(
            category=entry.category,
            subcategory=entry.subcategory,
            keywords=keywords,
            uk_terms=list(entry.uk_terms),
            url_patterns=list(entry.url_patterns),
            schema_hints=list(entry.schema_hints),
            confidence=entry.confidence,
            source=entry.source.value,
            created_at=entry.created_at,
        )
        db.add(record)
        return record

    # Reassign (not mutate) JSON columns so the change is tracked
    stored: Dict[str, List[str]] = dict(record.keywords or {})
    record.keywords = {
        name: _merge_lists(stored.get(name, []), values)
        for name, values in keywords.items()
    }
    record.uk_terms = _merge_lists(record.uk_terms, entry.uk_terms)
    record.url_patterns = _merge_lists(record.url_patterns, entry.url_patterns)
    record.schema_hints = _merge_lists(record.schema_hints, entry.schema_hints)
    record.updated_at = datetime.utcnow()
    return record


def save_taxonomy(store: TaxonomyStore, db: Session) -> int:
    """
    Persist every entry of the store.

    Returns:
        Number of entries written
    """
    count = 0
    for entry in store.entries():
        save_entry(db, entry)
        count += 1

    version = db.get(TaxonomyVersionRecord, 1)
    if version is None:
        db.add(TaxonomyVersionRecord(id=1, version=store.version))
    else:
        version.version = max(version.version, store.version)

    db.flush()
    logger.info(f"Saved {count} taxonomy entries (version {store.version})")
    return count


def _record_to_entry(record: TaxonomyEntryRecord) -> TaxonomyEntry:
    return TaxonomyEntry(
        category=record.category,
        subcategory=record.subcategory,
        bucket=TaxonomyBucket.from_dict(record.keywords or {}),
        uk_terms=list(record.uk_terms or []),
        url_patterns=list(record.url_patterns or []),
        schema_hints=list(record.schema_hints or []),
        confidence=record.confidence if record.confidence is not None else 1.0,
        source=TaxonomySource(record.source),
        created_at=record.created_at or datetime.utcnow(),
    )


def load_taxonomy_store(db: Session) -> TaxonomyStore:
    """Rebuild a TaxonomyStore from the database."""
    records = db.execute(
        select(TaxonomyEntryRecord).order_by(TaxonomyEntryRecord.id)
    ).scalars().all()

    version = db.get(TaxonomyVersionRecord, 1)
    store = TaxonomyStore(
        [_record_to_entry(r) for r in records],
        version=version.version if version else 1,
    )
    logger.info(f"Loaded {len(records)} taxonomy entries from database")
    return store
