"""
Database Package

Persists the taxonomy store with SQLAlchemy.

Usage:
    from bizintel.database import get_db_context, init_db, save_taxonomy

    init_db()
    with get_db_context() as db:
        save_taxonomy(store, db)
"""

from .models import Base, TaxonomyEntryRecord, TaxonomyVersionRecord
from .session import (
    check_db_connection,
    create_db_engine,
    get_database_url,
    get_db_context,
    get_engine,
    init_db,
)
from .repository import load_taxonomy_store, save_entry, save_taxonomy

__all__ = [
    "Base",
    "TaxonomyEntryRecord",
    "TaxonomyVersionRecord",
    "check_db_connection",
    "create_db_engine",
    "get_database_url",
    "get_db_context",
    "get_engine",
    "init_db",
    "load_taxonomy_store",
    "save_entry",
    "save_taxonomy",
]
