"""
Tests for Taxonomy Persistence

Uses an in-memory SQLite database.
"""

import pytest
from sqlalchemy.orm import sessionmaker

from bizintel.database import session
from bizintel.database.models import TaxonomyEntryRecord
from bizintel.database.repository import load_taxonomy_store, save_entry, save_taxonomy
from bizintel.database.session import create_db_engine, init_db
from bizintel.taxonomy.models import TaxonomyBucket, TaxonomyEntry, TaxonomySource
from bizintel.taxonomy.store import TaxonomyStore
from bizintel.utils.config import Settings


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


class TestSaveAndLoad:

    def test_round_trip(self, session_factory, store):
        with session_factory() as db:
            count = save_taxonomy(store, db)
            db.commit()

        with session_factory() as db:
            loaded = load_taxonomy_store(db)

        assert count == store.entry_count
        assert loaded.entry_count == store.entry_count
        assert loaded.version == store.version
        assert loaded.categories() == store.categories()

        original = store.get("Legal Services", "Family Law")
        restored = loaded.get("Legal Services", "Family Law")
        assert restored.bucket == original.bucket
        assert restored.schema_hints == original.schema_hints
        assert restored.source == TaxonomySource.USER_INPUT

    def test_learned_entry_survives(self, session_factory, store):
        store.add_entry(TaxonomyEntry(
            category="Pet Care",
            subcategory="Grooming",
            bucket=TaxonomyBucket(primary=["dog grooming"]),
            confidence=0.7,
            source=TaxonomySource.CONTENT_ANALYSIS,
        ))

        with session_factory() as db:
            save_taxonomy(store, db)
            db.commit()

        with session_factory() as db:
            entry = load_taxonomy_store(db).get("Pet Care", "Grooming")

        assert entry.bucket.primary == ["dog grooming"]
        assert entry.confidence == 0.7
        assert entry.source == TaxonomySource.CONTENT_ANALYSIS


class TestAppendOnlyMerge:
    """Saving never removes what is already stored."""

    def test_merge_keeps_existing_keywords(self, session_factory, store):
        with session_factory() as db:
            save_taxonomy(store, db)
            db.commit()

        other = TaxonomyStore([
            TaxonomyEntry(
                category="Legal Services",
                subcategory="Family Law",
                bucket=TaxonomyBucket(primary=["divorce", "collaborative law"]),
            )
        ])
        with session_factory() as db:
            save_taxonomy(other, db)
            db.commit()

        with session_factory() as db:
            loaded = load_taxonomy_store(db)

        primary = loaded.get("Legal Services", "Family Law").bucket.primary
        original = store.get("Legal Services", "Family Law").bucket.primary
        assert primary[:len(original)] == original
        assert primary[-1] == "collaborative law"
        assert primary.count("divorce") == 1
        # The stored version never goes backwards
        assert loaded.version == store.version

    def test_one_row_per_entry(self, session_factory):
        entry = TaxonomyEntry(category="Pet Care", subcategory="Grooming")

        with session_factory() as db:
            save_entry(db, entry)
            db.flush()
            save_entry(db, entry)
            db.commit()

        with session_factory() as db:
            assert db.query(TaxonomyEntryRecord).count() == 1


class TestDatabaseUrl:

    def test_postgres_scheme_rewritten(self, monkeypatch):
        monkeypatch.setattr(
            session, "get_settings", lambda: Settings(DATABASE_URL="postgres://user:pw@host/db")
        )
        assert session.get_database_url() == "postgresql://user:pw@host/db"

    def test_sqlite_fallback(self, monkeypatch):
        monkeypatch.setattr(session, "get_settings", lambda: Settings(DATABASE_URL=None))
        monkeypatch.delenv("POSTGRES_URL", raising=False)
        monkeypatch.setenv("SQLITE_PATH", "test.db")

        assert session.get_database_url() == "sqlite:///test.db"
