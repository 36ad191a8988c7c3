"""
Tests for Business Type Resolution
"""

import pytest

from bizintel.context.business_resolver import (
    FALLBACK_CATEGORY,
    FALLBACK_SUBCATEGORY,
    BusinessTypeResolver,
)
from bizintel.context.models import (
    BusinessActivity,
    ConfirmationConfidence,
    ConfirmationSource,
    ContentBusinessType,
    ExtractedSignals,
    RegistryBusinessType,
    RegistryData,
)
from bizintel.context.registry import SIC_CODE_MAP, map_sic_code


def activity(name: str, confidence: float) -> BusinessActivity:
    return BusinessActivity(activity=name, confidence=confidence)


class TestRegistryResolution:
    """Registry data wins when its SIC code is mappable."""

    def test_mapped_sic_code(self, family_law_signals):
        registry = RegistryData(sic_codes=["69109"], company_name="SMITH & CO LTD")

        confirmed = BusinessTypeResolver().resolve(
            family_law_signals, [activity("Legal Services", 1.0)], registry
        )

        assert isinstance(confirmed, RegistryBusinessType)
        assert confirmed.category == "Legal Services"
        assert confirmed.subcategory == "Commercial Law"
        assert confirmed.confidence == ConfirmationConfidence.HIGH
        assert confirmed.source == ConfirmationSource.REGISTRY
        assert confirmed.sic_code == "69109"
        assert confirmed.registry_company_name == "SMITH & CO LTD"

    def test_first_mappable_code_used(self):
        registry = RegistryData(sic_codes=["99999", "93110"])
        confirmed = BusinessTypeResolver().resolve(ExtractedSignals(), [], registry)
        assert (confirmed.category, confirmed.subcategory) == ("Fitness & Sports", "Gym & Fitness")

    def test_unmappable_sic_falls_through(self, family_law_signals):
        registry = RegistryData(sic_codes=["99999"])

        confirmed = BusinessTypeResolver().resolve(
            family_law_signals, [activity("Legal Services", 0.9)], registry
        )

        assert confirmed.source == ConfirmationSource.CONTENT_ANALYSIS
        assert confirmed.category == "Legal Services"


class TestContentResolution:
    """Content analysis thresholds."""

    def test_high_confidence(self, family_law_signals):
        confirmed = BusinessTypeResolver().resolve(
            family_law_signals, [activity("Legal Services", 0.7)]
        )

        assert isinstance(confirmed, ContentBusinessType)
        assert confirmed.confidence == ConfirmationConfidence.HIGH
        assert confirmed.subcategory == "Family Law"
        assert confirmed.activity_confidence == 0.7

    def test_medium_confidence(self, family_law_signals):
        confirmed = BusinessTypeResolver().resolve(
            family_law_signals, [activity("Legal Services", 0.4)]
        )
        assert confirmed.confidence == ConfirmationConfidence.MEDIUM

    def test_below_medium_falls_back(self, family_law_signals):
        confirmed = BusinessTypeResolver().resolve(
            family_law_signals, [activity("Legal Services", 0.39)]
        )

        assert confirmed.category == FALLBACK_CATEGORY
        assert confirmed.subcategory == FALLBACK_SUBCATEGORY
        assert confirmed.confidence == ConfirmationConfidence.LOW
        assert confirmed.top_activity == "Legal Services"

    def test_no_activities(self):
        confirmed = BusinessTypeResolver().resolve(ExtractedSignals(), [])

        assert (confirmed.category, confirmed.subcategory) == ("Business Services", "General")
        assert confirmed.confidence == ConfirmationConfidence.LOW
        assert confirmed.source == ConfirmationSource.CONTENT_ANALYSIS

    def test_custom_thresholds(self, family_law_signals):
        resolver = BusinessTypeResolver(high_threshold=0.9, medium_threshold=0.5)
        confirmed = resolver.resolve(family_law_signals, [activity("Legal Services", 0.8)])
        assert confirmed.confidence == ConfirmationConfidence.MEDIUM


class TestSubcategoryRules:
    """Category-specific subcategory detection."""

    @pytest.mark.parametrize("category,services,expected", [
        ("Legal Services", ("divorce support",), "Family Law"),
        ("Legal Services", ("business contracts",), "Commercial Law"),
        ("Legal Services", ("conveyancing",), "Property Law"),
        ("Legal Services", ("wills",), "General Practice"),
        ("Fitness & Sports", ("personal training",), "Personal Training"),
        ("Fitness & Sports", ("sports club",), "Sports Clubs"),
        ("Fitness & Sports", ("yoga",), "Gym & Fitness"),
        ("Marketing & Digital", ("seo audits",), "SEO Agency"),
        ("Marketing & Digital", ("web design",), "Web Design"),
        ("Marketing & Digital", ("branding",), "Digital Marketing"),
        ("Food & Hospitality", ("wedding catering",), "Catering"),
    ])
    def test_rules(self, category, services, expected):
        signals = ExtractedSignals(services=services)
        assert BusinessTypeResolver().determine_subcategory(category, signals) == expected

    def test_navigation_counts(self):
        signals = ExtractedSignals(navigation_items=("Family Law", "Commercial Law"))
        assert BusinessTypeResolver().determine_subcategory("Legal Services", signals) == "Family Law"

    def test_store_subcategory_named_on_page(self, store):
        signals = ExtractedSignals(navigation_items=("MOT Testing",))
        resolver = BusinessTypeResolver(store)
        assert resolver.determine_subcategory("Automotive", signals) == "MOT Testing"

    def test_store_first_subcategory(self, store):
        resolver = BusinessTypeResolver(store)
        assert resolver.determine_subcategory("Automotive", ExtractedSignals()) == "Car Repair"

    def test_unknown_category(self, store):
        resolver = BusinessTypeResolver(store)
        assert resolver.determine_subcategory("Pet Grooming", ExtractedSignals()) == "General"


class TestSicMapping:

    def test_every_code_maps_to_pair(self):
        for code, (category, subcategory) in SIC_CODE_MAP.items():
            assert len(code) == 5
            assert category and subcategory

    def test_map_sic_code(self):
        assert map_sic_code(" 56101 ") == ("Food & Hospitality", "Restaurant")
        assert map_sic_code("00000") is None


class TestSerialization:

    def test_registry_type_to_dict(self):
        confirmed = BusinessTypeResolver().resolve(
            ExtractedSignals(), [], RegistryData(sic_codes=["86230"], company_name="BRIGHT SMILES LTD")
        )
        data = confirmed.to_dict()
        assert data["source"] == "registry"
        assert data["confidence"] == "high"
        assert data["sic_code"] == "86230"
