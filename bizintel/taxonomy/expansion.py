"""
Taxonomy Expansion

Grows the taxonomy store when an analysis lands on a business type the
store does not fully know yet. Exactly one of three paths runs per call:

1. New category     -> synthesize a full entry from the page signals
2. New subcategory  -> synthesize an entry, reusing the category's
                       schema hints and URL conventions as a template
3. Existing entry   -> merge up to 5 unseen keywords into "secondary"

Entries are only admitted when they carry at least one keyword, and the
store never loses or rewrites keywords. The fallback "Business Services /
General" type is reported but never created or enhanced.
"""

import logging
import re
from typing import Dict, List, Optional

from ..context.models import (
    FALLBACK_CATEGORY,
    FALLBACK_SUBCATEGORY,
    BusinessActivity,
    BusinessModel,
    ExtractedSignals,
)
from .models import (
    BusinessTypeExpansion,
    TaxonomyBucket,
    TaxonomyEntry,
    TaxonomySource,
    normalize_keyword,
)
from .store import TaxonomyStore

logger = logging.getLogger(__name__)


# =============================================================================
# EXPANSION CONFIGURATION
# =============================================================================

MAX_MERGED_KEYWORDS = 5
MAX_REPORTED_KEYWORDS = 10
MAX_URL_PATTERNS = 10

B2B_MODIFIERS = ["commercial", "business", "corporate"]
B2C_MODIFIERS = ["personal", "individual", "family"]

LONG_TAIL_MARKERS = ["we ", "our ", "providing"]

UK_TERM_INDICATORS = [
    "ltd", "limited", "uk", "british", "england", "scotland", "wales",
    "vat", "hmrc", "companies house", "high street", "city centre",
    "enquiry", "enquiries", "colour", "favour", "centre",
]

BASE_SCHEMA_HINTS = ["LocalBusiness", "Organization"]

CATEGORY_SCHEMA_HINTS: Dict[str, List[str]] = {
    "Legal Services": ["LegalService", "Attorney"],
    "Fitness & Sports": ["ExerciseGym", "SportsActivityLocation"],
    "Food & Hospitality": ["Restaurant", "FoodEstablishment"],
    "Healthcare & Medical": ["MedicalBusiness", "Physician"],
    "Automotive": ["AutoRepair", "AutomotiveBusiness"],
    "Entertainment & Recreation": ["EntertainmentBusiness", "AmusementPark"],
    "Financial Services": ["FinancialService", "AccountingService"],
    "Architecture & Design": ["ProfessionalService"],
    "Marketing & Digital": ["ProfessionalService"],
}


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _unique(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        key = normalize_keyword(item)
        if key and key not in seen:
            seen.add(key)
            result.append(key)
    return result


def score_entry_confidence(signals: ExtractedSignals, activities: List[BusinessActivity]) -> float:
    """
    Confidence of a synthesized entry.

    +0.4 top activity above 0.8, +0.3 three or more services,
    +0.2 four or more navigation items, +0.1 three or more service
    descriptions. Capped at 1.0.
    """
    confidence = 0.0
    if activities and activities[0].confidence > 0.8:
        confidence += 0.4
    if len(signals.services) >= 3:
        confidence += 0.3
    if len(signals.navigation_items) >= 4:
        confidence += 0.2
    if len(signals.service_descriptions) >= 3:
        confidence += 0.1
    return min(confidence, 1.0)


class TaxonomyExpansionManager:
    """
    Creates, extends or enhances taxonomy entries from analysis results.

    Usage:
        manager = TaxonomyExpansionManager(store)
        expansion = manager.check_and_enhance(category, subcategory, signals, activities)
    """

    def __init__(self, store: TaxonomyStore):
        self.store = store

    def check_and_enhance(
        self,
        category: str,
        subcategory: str,
        signals: ExtractedSignals,
        activities: List[BusinessActivity],
        source: TaxonomySource = TaxonomySource.CONTENT_ANALYSIS,
    ) -> BusinessTypeExpansion:
        if (category, subcategory) == (FALLBACK_CATEGORY, FALLBACK_SUBCATEGORY):
            return self._report_fallback(category, subcategory)

        with self.store.key_lock(category, subcategory):
            if not self.store.has_category(category):
                return self._create_category(category, subcategory, signals, activities, source)

            if not self.store.has_entry(category, subcategory):
                return self._create_subcategory(category, subcategory, signals, activities, source)

            return self._enhance_existing(category, subcategory, signals, activities)

    # =========================================================================
    # PATHS
    # =========================================================================

    def _report_fallback(self, category: str, subcategory: str) -> BusinessTypeExpansion:
        # Shared by every unidentified business, so it never gains keywords
        logger.info(f"Fallback type {category} / {subcategory} is never learned")
        has_category = self.store.has_category(category)
        entry = self.store.get(category, subcategory)
        return BusinessTypeExpansion(
            is_new_type=not has_category,
            is_new_subcategory=has_category and entry is None,
            enhanced_entry=entry,
        )

    def _create_category(
        self,
        category: str,
        subcategory: str,
        signals: ExtractedSignals,
        activities: List[BusinessActivity],
        source: TaxonomySource,
    ) -> BusinessTypeExpansion:
        logger.info(f"New business type detected: {category} / {subcategory}")

        entry = self.build_entry(category, subcategory, signals, activities, source)
        if not self._admit(entry):
            return BusinessTypeExpansion(is_new_type=True)

        added = _unique(
            entry.bucket.primary
            + entry.bucket.secondary[:10]
            + list(signals.industry_terms[:5])
        )
        return BusinessTypeExpansion(
            is_new_type=True,
            added_keywords=added,
            enhanced_entry=self.store.get(category, subcategory),
        )

    def _create_subcategory(
        self,
        category: str,
        subcategory: str,
        signals: ExtractedSignals,
        activities: List[BusinessActivity],
        source: TaxonomySource,
    ) -> BusinessTypeExpansion:
        logger.info(f"New subcategory detected: {category} / {subcategory}")

        template = self.store.first_entry(category)
        entry = self.build_entry(category, subcategory, signals, activities, source, template)
        if not self._admit(entry):
            return BusinessTypeExpansion(is_new_subcategory=True)

        name = subcategory.lower()
        added = _unique(
            [name, name.replace(" ", "")]
            + [word for word in name.split() if len(word) > 2]
            + list(signals.services[:5])
        )
        return BusinessTypeExpansion(
            is_new_subcategory=True,
            added_keywords=added,
            enhanced_entry=self.store.get(category, subcategory),
        )

    def _enhance_existing(
        self,
        category: str,
        subcategory: str,
        signals: ExtractedSignals,
        activities: List[BusinessActivity],
    ) -> BusinessTypeExpansion:
        entry = self.store.get(category, subcategory)
        known = {
            normalize_keyword(k) for k in entry.bucket.primary + entry.bucket.secondary
        }

        candidates = [
            k for k in _unique(
                [kw for a in activities for kw in a.keywords]
                + list(signals.services)
                + list(signals.industry_terms)
            )
            if len(k) > 2 and k not in known
        ]

        if candidates:
            self.store.merge_keywords(
                category, subcategory, "secondary", candidates[:MAX_MERGED_KEYWORDS]
            )

        logger.info(f"Existing entry {category} / {subcategory}: {len(candidates)} new candidate keywords")

        return BusinessTypeExpansion(
            added_keywords=candidates[:MAX_REPORTED_KEYWORDS],
            enhanced_entry=self.store.get(category, subcategory),
        )

    def _admit(self, entry: TaxonomyEntry) -> bool:
        if entry.bucket.is_empty:
            logger.info(f"Not enough signals to add {entry.category} / {entry.subcategory} to taxonomy")
            return False
        return self.store.add_entry(entry)

    # =========================================================================
    # ENTRY SYNTHESIS
    # =========================================================================

    def build_entry(
        self,
        category: str,
        subcategory: str,
        signals: ExtractedSignals,
        activities: List[BusinessActivity],
        source: TaxonomySource,
        template: Optional[TaxonomyEntry] = None,
    ) -> TaxonomyEntry:
        """Synthesize a taxonomy entry from page signals."""
        if template is not None:
            schema_hints = list(template.schema_hints)
            url_patterns = list(template.url_patterns)
        else:
            schema_hints = BASE_SCHEMA_HINTS + CATEGORY_SCHEMA_HINTS.get(category, [])
            url_patterns = []

        return TaxonomyEntry(
            category=category,
            subcategory=subcategory,
            bucket=self.build_bucket(signals, activities),
            uk_terms=[t for t in UK_TERM_INDICATORS if re.search(r"\b" + re.escape(t) + r"\b", signals.content_text)],
            url_patterns=_unique(url_patterns + self._url_patterns(signals))[:MAX_URL_PATTERNS],
            schema_hints=schema_hints,
            confidence=score_entry_confidence(signals, activities),
            source=source,
        )

    def build_bucket(self, signals: ExtractedSignals, activities: List[BusinessActivity]) -> TaxonomyBucket:
        """Fill the seven buckets; caps are enforced by the bucket itself."""
        bucket = TaxonomyBucket()

        services = _unique(list(signals.services))
        activity_keywords = _unique([kw for a in activities for kw in a.keywords])
        # Pages without explicit services fall back to what the classifier matched
        terms = services or activity_keywords[:3]

        bucket.extend("primary", activity_keywords + services[:5])

        secondary = []
        for s in terms:
            secondary += [f"{s} services", f"professional {s}", f"{s} provider"]
        if signals.business_model == BusinessModel.B2B:
            modifiers = B2B_MODIFIERS
        elif signals.business_model == BusinessModel.B2C:
            modifiers = B2C_MODIFIERS
        else:
            modifiers = []
        for modifier in modifiers:
            for s in terms[:2]:
                secondary.append(f"{modifier} {s}")
        bucket.extend("secondary", secondary)

        long_tail = []
        for description in signals.service_descriptions:
            for phrase in re.split(r"[,.]", description):
                phrase = phrase.strip()
                if not 20 < len(phrase) < 80:
                    continue
                if not any(marker in phrase for marker in LONG_TAIL_MARKERS):
                    continue
                phrase = re.sub(r"^(?:we|our)\s+", "", phrase)
                if len(phrase) > 10:
                    long_tail.append(phrase)
        if signals.target_market:
            market = signals.target_market[0]
            long_tail += [f"{s} for {market}" for s in terms[:3]]
        bucket.extend("long_tail", long_tail)

        commercial = []
        for s in terms:
            commercial += [f"{s} cost", f"{s} price", f"{s} quote", f"hire {s}", f"book {s}"]
        bucket.extend("commercial", commercial)

        informational = []
        for s in terms:
            informational += [f"what is {s}", f"how to choose {s}", f"{s} guide", f"{s} tips"]
        bucket.extend("informational", informational)

        local = []
        for s in terms[:3]:
            local += [f"{s} near me", f"local {s}"]
        for location in signals.places:
            for s in terms[:2]:
                local += [f"{s} in {location}", f"{location} {s}"]
        bucket.extend("local", local)

        urgency = []
        for s in terms[:3]:
            urgency += [f"urgent {s}", f"emergency {s}", f"same day {s}"]
        bucket.extend("urgency", urgency)

        return bucket

    def _url_patterns(self, signals: ExtractedSignals) -> List[str]:
        patterns = []
        for item in signals.navigation_items:
            slug = slugify(item)
            if slug:
                patterns.append(f"/{slug}")
        for service in signals.services:
            slug = slugify(service)
            if slug:
                patterns += [f"/{slug}", f"/services/{slug}"]
        return patterns
