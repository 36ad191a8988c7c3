"""
Taxonomy Store

Versioned, process-wide mapping of {category -> {subcategory -> TaxonomyEntry}}.

The store is seeded from a JSON dataset (bundled by default, swappable via
TAXONOMY_DATA_PATH) and only ever grows:
- add_entry() inserts a new (category, subcategory), never replaces one
- merge_keywords() appends to a bucket, never removes

Writes to the same (category, subcategory) are serialized with a per-key
lock; every successful write bumps the store version. Reads hand out deep
copies so callers can never mutate stored entries behind the lock.
"""

import copy
import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .models import (
    TaxonomyBucket,
    TaxonomyEntry,
    TaxonomyError,
    TaxonomySource,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent / "data" / "industry_keywords.json"


class TaxonomyStore:
    """In-memory, append-only industry keyword taxonomy."""

    def __init__(self, entries: Optional[List[TaxonomyEntry]] = None, version: int = 1):
        self._entries: Dict[str, Dict[str, TaxonomyEntry]] = {}
        self._lock = threading.RLock()
        self._key_locks: Dict[Tuple[str, str], threading.RLock] = {}
        self._version = version

        for entry in entries or []:
            self._entries.setdefault(entry.category, {})[entry.subcategory] = copy.deepcopy(entry)

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaxonomyStore":
        """
        Build a store from the dataset format:

            {"version": 1, "categories": {category: {
                "uk_terms": [...], "url_patterns": [...], "schema_hints": [...],
                "subcategories": {subcategory: {"primary": [...], ...}}}}}
        """
        categories = data.get("categories")
        if not isinstance(categories, dict):
            raise TaxonomyError("Taxonomy dataset has no 'categories' mapping")

        entries = []
        for category, cat_data in categories.items():
            for subcategory, keywords in (cat_data.get("subcategories") or {}).items():
                entries.append(TaxonomyEntry(
                    category=category,
                    subcategory=subcategory,
                    bucket=TaxonomyBucket.from_dict(keywords),
                    uk_terms=list(cat_data.get("uk_terms") or []),
                    url_patterns=list(cat_data.get("url_patterns") or []),
                    schema_hints=list(cat_data.get("schema_hints") or []),
                    confidence=1.0,
                    source=TaxonomySource.USER_INPUT,
                ))

        return cls(entries, version=int(data.get("version", 1)))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TaxonomyStore":
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TaxonomyError(f"Could not load taxonomy dataset {path}: {e}") from e

        store = cls.from_dict(data)
        logger.info(
            f"Loaded taxonomy from {path.name}: {len(store.categories())} categories, "
            f"{store.entry_count} entries"
        )
        return store

    @classmethod
    def load_default(cls, path: Optional[Union[str, Path]] = None) -> "TaxonomyStore":
        """Load from the given path, or the bundled dataset."""
        return cls.from_file(path or DEFAULT_DATA_PATH)

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def version(self) -> int:
        return self._version

    @property
    def entry_count(self) -> int:
        with self._lock:
            return sum(len(subs) for subs in self._entries.values())

    def categories(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def subcategories(self, category: str) -> List[str]:
        with self._lock:
            return list(self._entries.get(category, {}))

    def has_category(self, category: str) -> bool:
        with self._lock:
            return category in self._entries

    def has_entry(self, category: str, subcategory: str) -> bool:
        with self._lock:
            return subcategory in self._entries.get(category, {})

    def get(self, category: str, subcategory: str) -> Optional[TaxonomyEntry]:
        """Copy of the entry, or None."""
        with self._lock:
            entry = self._entries.get(category, {}).get(subcategory)
            return copy.deepcopy(entry) if entry else None

    def first_entry(self, category: str) -> Optional[TaxonomyEntry]:
        """Copy of the first entry of a category, used as a template."""
        with self._lock:
            subs = self._entries.get(category)
            if not subs:
                return None
            return copy.deepcopy(next(iter(subs.values())))

    def entries(self) -> Iterator[TaxonomyEntry]:
        with self._lock:
            snapshot = [
                copy.deepcopy(entry)
                for subs in self._entries.values()
                for entry in subs.values()
            ]
        return iter(snapshot)

    # =========================================================================
    # WRITES
    # =========================================================================

    @contextmanager
    def key_lock(self, category: str, subcategory: str):
        """Serialize read-modify-write sequences on one entry."""
        with self._lock:
            lock = self._key_locks.setdefault((category, subcategory), threading.RLock())
        with lock:
            yield

    def add_entry(self, entry: TaxonomyEntry) -> bool:
        """
        Insert a new entry.

        Returns False (and leaves the store untouched) if the
        (category, subcategory) already exists.
        """
        with self.key_lock(entry.category, entry.subcategory):
            with self._lock:
                subs = self._entries.setdefault(entry.category, {})
                if entry.subcategory in subs:
                    return False
                subs[entry.subcategory] = copy.deepcopy(entry)
                self._version += 1

        logger.info(
            f"Taxonomy entry added: {entry.category} / {entry.subcategory} "
            f"({entry.bucket.total} keywords, source={entry.source.value})"
        )
        return True

    def merge_keywords(
        self,
        category: str,
        subcategory: str,
        bucket_name: str,
        keywords: List[str],
    ) -> List[str]:
        """
        Append keywords to one bucket of an existing entry.

        Returns the keywords actually added (duplicates and overflow
        beyond the bucket cap are skipped).
        """
        with self.key_lock(category, subcategory):
            with self._lock:
                entry = self._entries.get(category, {}).get(subcategory)
                if entry is None:
                    raise TaxonomyError(f"No taxonomy entry for {category} / {subcategory}")
                added = entry.bucket.extend(bucket_name, keywords)
                if added:
                    self._version += 1

        if added:
            logger.info(f"Merged {len(added)} keywords into {category} / {subcategory} [{bucket_name}]")
        return added

    # =========================================================================
    # EXPORT
    # =========================================================================

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the whole store."""
        with self._lock:
            return {
                "version": self._version,
                "entries": [
                    entry.to_dict()
                    for subs in self._entries.values()
                    for entry in subs.values()
                ],
            }

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "version": self._version,
                "categories": {
                    category: list(subs) for category, subs in self._entries.items()
                },
                "entry_count": sum(len(subs) for subs in self._entries.values()),
            }
