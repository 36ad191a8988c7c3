"""
Business Type Resolution

Settles on exactly one confirmed business type per analysis by walking a
fallback chain (first match wins):

1. Registry SIC code that maps to a known category  -> HIGH, registry
2. Top activity confidence >= 0.7                    -> HIGH, content analysis
3. Top activity confidence >= 0.4                    -> MEDIUM, content analysis
4. Nothing usable                                    -> LOW, "Business Services / General"

The resolver never raises and never returns None.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..taxonomy.store import TaxonomyStore
from .models import (
    FALLBACK_CATEGORY,
    FALLBACK_SUBCATEGORY,
    BusinessActivity,
    ConfirmationConfidence,
    ConfirmationSource,
    ConfirmedBusinessType,
    ContentBusinessType,
    ExtractedSignals,
    RegistryBusinessType,
    RegistryData,
)
from .registry import map_sic_code

logger = logging.getLogger(__name__)


HIGH_CONFIDENCE_THRESHOLD = 0.7
MEDIUM_CONFIDENCE_THRESHOLD = 0.4


# =============================================================================
# SUBCATEGORY RULES
# =============================================================================

# Ordered (trigger terms, subcategory) rules per category, checked against
# the services text plus navigation labels. First rule with a hit wins.
SUBCATEGORY_RULES: Dict[str, List[Tuple[List[str], str]]] = {
    "Fitness & Sports": [
        (["personal training"], "Personal Training"),
        (["gym", "fitness center", "fitness centre"], "Gym & Fitness"),
        (["sports", "club"], "Sports Clubs"),
    ],
    "Legal Services": [
        (["family", "divorce"], "Family Law"),
        (["commercial", "business"], "Commercial Law"),
        (["conveyancing", "property"], "Property Law"),
        (["injury", "accident"], "Personal Injury"),
    ],
    "Marketing & Digital": [
        (["seo"], "SEO Agency"),
        (["web design"], "Web Design"),
        (["social media"], "Social Media"),
    ],
    "Food & Hospitality": [
        (["catering"], "Catering"),
        (["hotel", "rooms"], "Hotel"),
        (["restaurant", "dining", "menu"], "Restaurant"),
    ],
    "Architecture & Design": [
        (["commercial"], "Commercial Architecture"),
        (["residential", "extension", "house"], "Residential Architecture"),
    ],
    "Financial Services": [
        (["accountant", "accounting", "accountancy", "bookkeeping"], "Accountancy"),
        (["insurance"], "Insurance Services"),
        (["financial planning", "pension", "investment"], "Financial Planning"),
    ],
}

SUBCATEGORY_DEFAULTS: Dict[str, str] = {
    "Fitness & Sports": "Gym & Fitness",
    "Legal Services": "General Practice",
    "Marketing & Digital": "Digital Marketing",
}


class BusinessTypeResolver:
    """
    Merges classifier output with optional registry data.

    Usage:
        resolver = BusinessTypeResolver(store)
        confirmed = resolver.resolve(signals, activities, registry_data)
    """

    def __init__(
        self,
        store: Optional[TaxonomyStore] = None,
        high_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
        medium_threshold: float = MEDIUM_CONFIDENCE_THRESHOLD,
    ):
        self.store = store
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold

    def resolve(
        self,
        signals: ExtractedSignals,
        activities: List[BusinessActivity],
        registry_data: Optional[RegistryData] = None,
    ) -> ConfirmedBusinessType:
        # Step 1: Registry
        if registry_data is not None:
            for sic_code in registry_data.sic_codes:
                mapped = map_sic_code(sic_code)
                if mapped:
                    category, subcategory = mapped
                    logger.info(f"Resolved from registry SIC {sic_code}: {category} / {subcategory}")
                    return RegistryBusinessType(
                        category=category,
                        subcategory=subcategory,
                        confidence=ConfirmationConfidence.HIGH,
                        source=ConfirmationSource.REGISTRY,
                        sic_code=sic_code,
                        registry_company_name=registry_data.company_name,
                    )
            logger.info(f"Registry SIC codes {registry_data.sic_codes} not mappable, using content")

        top = activities[0] if activities else None

        # Steps 2-3: Content analysis
        if top is not None:
            if top.confidence >= self.high_threshold:
                confidence = ConfirmationConfidence.HIGH
            elif top.confidence >= self.medium_threshold:
                confidence = ConfirmationConfidence.MEDIUM
            else:
                confidence = None

            if confidence is not None:
                subcategory = self.determine_subcategory(top.activity, signals)
                logger.info(
                    f"Resolved from content: {top.activity} / {subcategory} "
                    f"({confidence.value}, {top.confidence:.0%})"
                )
                return ContentBusinessType(
                    category=top.activity,
                    subcategory=subcategory,
                    confidence=confidence,
                    source=ConfirmationSource.CONTENT_ANALYSIS,
                    top_activity=top.activity,
                    activity_confidence=top.confidence,
                )

        # Step 4: Fallback
        logger.info("No confident business type, falling back to Business Services / General")
        return ContentBusinessType(
            category=FALLBACK_CATEGORY,
            subcategory=FALLBACK_SUBCATEGORY,
            confidence=ConfirmationConfidence.LOW,
            source=ConfirmationSource.CONTENT_ANALYSIS,
            top_activity=top.activity if top else None,
            activity_confidence=top.confidence if top else 0.0,
        )

    def determine_subcategory(self, category: str, signals: ExtractedSignals) -> str:
        """
        Pick a subcategory for a category from services and navigation.

        Order: category rules, category default, a known store subcategory
        named on the page, the category's first store subcategory, "General".
        """
        haystack = " ".join(
            [s.lower() for s in signals.services]
            + [n.lower() for n in signals.navigation_items]
        )

        for terms, subcategory in SUBCATEGORY_RULES.get(category, []):
            if any(term in haystack for term in terms):
                return subcategory

        if category in SUBCATEGORY_DEFAULTS:
            return SUBCATEGORY_DEFAULTS[category]

        if self.store is not None:
            known = self.store.subcategories(category)
            for subcategory in known:
                if subcategory.lower() in haystack:
                    return subcategory
            if known:
                return known[0]

        return FALLBACK_SUBCATEGORY
