"""
Tests for Taxonomy Expansion
"""

import pytest

from bizintel.context.models import (
    FALLBACK_CATEGORY,
    FALLBACK_SUBCATEGORY,
    BusinessActivity,
    BusinessModel,
    ExtractedSignals,
)
from bizintel.taxonomy.expansion import (
    TaxonomyExpansionManager,
    score_entry_confidence,
)
from bizintel.taxonomy.models import BUCKET_CAPS, TaxonomyBucket, TaxonomyEntry, TaxonomySource


class TestNewCategory:
    """A category the store has never seen."""

    def test_creates_entry(self, store, grooming_signals, grooming_activities):
        manager = TaxonomyExpansionManager(store)

        expansion = manager.check_and_enhance(
            "Pet Grooming", "Dog Grooming", grooming_signals, grooming_activities
        )

        assert expansion.is_new_type
        assert not expansion.is_new_subcategory
        assert store.has_entry("Pet Grooming", "Dog Grooming")

        entry = expansion.enhanced_entry
        assert entry.bucket.primary[:2] == ["grooming", "pet spa"]
        assert "dog grooming services" in entry.bucket.secondary
        assert "personal dog grooming" in entry.bucket.secondary  # B2C modifier
        assert "dog grooming quote" in entry.bucket.commercial
        assert "how to choose dog grooming" in entry.bucket.informational
        assert "dog grooming in bristol" in entry.bucket.local
        assert "same day dog grooming" in entry.bucket.urgency
        assert "dog grooming for pet owners" in entry.bucket.long_tail
        assert "provide gentle dog grooming for nervous pets" in entry.bucket.long_tail
        assert entry.source == TaxonomySource.CONTENT_ANALYSIS
        assert entry.schema_hints == ["LocalBusiness", "Organization"]
        assert "/dog-grooming" in entry.url_patterns
        assert "/services/dog-grooming" in entry.url_patterns
        assert entry.uk_terms == ["ltd"]

    def test_added_keywords(self, store, grooming_signals, grooming_activities):
        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Pet Grooming", "Dog Grooming", grooming_signals, grooming_activities
        )

        entry = expansion.enhanced_entry
        expected = entry.bucket.primary + [
            k for k in entry.bucket.secondary[:10] if k not in entry.bucket.primary
        ]
        assert expansion.added_keywords == expected

    def test_caps_respected(self, store, grooming_activities):
        signals = ExtractedSignals(
            services=tuple(f"service {i}" for i in range(12)),
            location_indicators=("leeds", "york", "hull"),
            business_model=BusinessModel.B2B,
        )

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Widgets", "General", signals, grooming_activities
        )

        bucket = expansion.enhanced_entry.bucket
        for name, cap in BUCKET_CAPS.items():
            assert len(bucket.get(name)) <= cap

    def test_empty_signals_not_admitted(self, store):
        version = store.version

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Widgets", "General", ExtractedSignals(), []
        )

        assert expansion.is_new_type
        assert expansion.added_keywords == []
        assert expansion.enhanced_entry is None
        assert not store.has_category("Widgets")
        assert store.version == version

    def test_postcode_areas_not_used_as_places(self, store, grooming_signals, grooming_activities):
        signals = ExtractedSignals(
            services=grooming_signals.services,
            location_indicators=("bristol", "BS"),
        )

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Pet Grooming", "Dog Grooming", signals, grooming_activities
        )

        local = expansion.enhanced_entry.bucket.local
        assert "dog grooming in bristol" in local
        assert not any(k.endswith(" in bs") or k.startswith("bs ") for k in local)

    def test_registry_source(self, store, grooming_signals, grooming_activities):
        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Pet Grooming", "Dog Grooming", grooming_signals, grooming_activities,
            source=TaxonomySource.REGISTRY,
        )
        assert expansion.enhanced_entry.source == TaxonomySource.REGISTRY


class TestNewSubcategory:
    """A known category, unknown subcategory."""

    def test_uses_category_template(self, store, family_law_signals):
        activities = [BusinessActivity("Legal Services", 1.0, keywords=["divorce"])]

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Legal Services", "General Practice", family_law_signals, activities
        )

        assert expansion.is_new_subcategory
        assert not expansion.is_new_type
        entry = expansion.enhanced_entry
        assert entry.schema_hints == ["LegalService", "Attorney"]
        assert entry.url_patterns[:4] == ["/legal", "/solicitors", "/law", "/conveyancing"]

    def test_added_keywords_are_subcategory_specific(self, store, family_law_signals):
        activities = [BusinessActivity("Legal Services", 1.0, keywords=["divorce"])]

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Legal Services", "General Practice", family_law_signals, activities
        )

        assert expansion.added_keywords == [
            "general practice",
            "generalpractice",
            "general",
            "practice",
            "family law and divorce advice for individuals",
        ]


class TestFallbackType:
    """The catch-all type unidentified businesses resolve to."""

    def test_never_admitted(self, store, grooming_signals, grooming_activities):
        version = store.version

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            FALLBACK_CATEGORY, FALLBACK_SUBCATEGORY, grooming_signals, grooming_activities
        )

        assert expansion.is_new_type
        assert not expansion.is_new_subcategory
        assert expansion.added_keywords == []
        assert expansion.enhanced_entry is None
        assert not store.has_category(FALLBACK_CATEGORY)
        assert store.version == version

    def test_existing_entry_not_enhanced(self, store, grooming_signals, grooming_activities):
        store.add_entry(TaxonomyEntry(
            category=FALLBACK_CATEGORY,
            subcategory=FALLBACK_SUBCATEGORY,
            bucket=TaxonomyBucket(primary=["consulting"]),
        ))
        version = store.version

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            FALLBACK_CATEGORY, FALLBACK_SUBCATEGORY, grooming_signals, grooming_activities
        )

        assert not expansion.is_new_type
        assert not expansion.is_new_subcategory
        assert expansion.added_keywords == []
        assert expansion.enhanced_entry.bucket.primary == ["consulting"]
        assert expansion.enhanced_entry.bucket.secondary == []
        assert store.version == version


class TestExistingEntry:
    """Enhancing an entry the store already has."""

    def test_merges_unseen_keywords(self, store):
        signals = ExtractedSignals(
            services=("divorce", "pension sharing", "cohabitation agreements"),
            industry_terms=("mediation",),
        )
        activities = [BusinessActivity("Legal Services", 0.9, keywords=["divorce", "solicitor"])]
        before = store.get("Legal Services", "Family Law")

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Legal Services", "Family Law", signals, activities
        )

        assert not expansion.is_new_type
        assert not expansion.is_new_subcategory
        assert expansion.added_keywords == [
            "solicitor", "pension sharing", "cohabitation agreements", "mediation",
        ]
        after = expansion.enhanced_entry
        assert after.bucket.primary == before.bucket.primary
        assert after.bucket.secondary[:len(before.bucket.secondary)] == before.bucket.secondary
        assert "pension sharing" in after.bucket.secondary

    def test_at_most_five_merged_ten_reported(self, store):
        signals = ExtractedSignals(services=tuple(f"niche service {i}" for i in range(14)))
        before = len(store.get("Legal Services", "Commercial Law").bucket.secondary)

        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Legal Services", "Commercial Law", signals, []
        )

        after = len(expansion.enhanced_entry.bucket.secondary)
        assert after - before <= 5
        assert len(expansion.added_keywords) == 10

    def test_short_candidates_skipped(self, store):
        signals = ExtractedSignals(services=("ab", "tax"))
        expansion = TaxonomyExpansionManager(store).check_and_enhance(
            "Legal Services", "Family Law", signals, []
        )
        assert expansion.added_keywords == ["tax"]


class TestRepeatedExpansion:
    """Expanding the same novel type twice."""

    def test_second_pass_only_adds_difference(self, store, grooming_signals, grooming_activities):
        manager = TaxonomyExpansionManager(store)
        first = manager.check_and_enhance(
            "Pet Grooming", "Dog Grooming", grooming_signals, grooming_activities
        )

        richer = ExtractedSignals(
            services=grooming_signals.services + ("flea treatment",),
            location_indicators=grooming_signals.location_indicators,
        )
        second = manager.check_and_enhance(
            "Pet Grooming", "Dog Grooming", richer, grooming_activities
        )

        assert first.is_new_type
        assert not second.is_new_type
        assert not second.is_new_subcategory
        assert second.added_keywords == ["flea treatment"]

        bucket = second.enhanced_entry.bucket
        assert len(bucket.primary) <= BUCKET_CAPS["primary"]
        assert len(bucket.secondary) <= BUCKET_CAPS["secondary"]
        # Nothing from the first pass was lost
        for name in BUCKET_CAPS:
            original = first.enhanced_entry.bucket.get(name)
            assert bucket.get(name)[:len(original)] == original


class TestEntryConfidence:

    def test_full_score(self, grooming_signals, grooming_activities):
        assert score_entry_confidence(grooming_signals, grooming_activities) == pytest.approx(1.0)

    def test_empty(self):
        assert score_entry_confidence(ExtractedSignals(), []) == 0.0

    def test_partial(self):
        signals = ExtractedSignals(services=("a", "b", "c"))
        assert score_entry_confidence(signals, []) == 0.3
