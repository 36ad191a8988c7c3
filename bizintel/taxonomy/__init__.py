"""
Industry Keyword Taxonomy Package

Versioned, append-only store of industry keyword vocabularies and the
manager that grows it from analysis results.

Usage:
    from bizintel.taxonomy import TaxonomyStore, TaxonomyExpansionManager

    store = TaxonomyStore.load_default()
    manager = TaxonomyExpansionManager(store)
    expansion = manager.check_and_enhance(category, subcategory, signals, activities)
"""

from .models import (
    BUCKET_CAPS,
    BUCKET_NAMES,
    BusinessTypeExpansion,
    TaxonomyBucket,
    TaxonomyEntry,
    TaxonomyError,
    TaxonomySource,
    normalize_keyword,
)
from .store import DEFAULT_DATA_PATH, TaxonomyStore
from .expansion import TaxonomyExpansionManager, score_entry_confidence

__all__ = [
    "BUCKET_CAPS",
    "BUCKET_NAMES",
    "BusinessTypeExpansion",
    "TaxonomyBucket",
    "TaxonomyEntry",
    "TaxonomyError",
    "TaxonomySource",
    "normalize_keyword",
    "DEFAULT_DATA_PATH",
    "TaxonomyStore",
    "TaxonomyExpansionManager",
    "score_entry_confidence",
]
