"""
Business Analysis Orchestrator

Runs the full pipeline for one domain + HTML:

1. Signal extraction
2. Registry lookup (optional, bounded by a timeout, failures ignored)
3. Activity classification
4. Business type resolution
5. Taxonomy expansion
6. Keyword generation
7. Summary, recommendations and metadata

Stages run sequentially; the registry lookup is the only await point.
Every degraded input (no registry, no match, no location, no services)
has a fallback, so a complete result always comes back.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from ..context.activity_classifier import BusinessActivityClassifier
from ..context.business_resolver import BusinessTypeResolver
from ..context.content_extractor import UK_CITIES, extract_signals
from ..context.models import (
    BusinessActivity,
    ConfirmationConfidence,
    ConfirmationSource,
    ConfirmedBusinessType,
    ExtractedSignals,
    RegistryData,
)
from ..context.registry import clean_company_name
from ..keywords.generator import KeywordGenerationEngine
from ..keywords.models import BusinessContext, GeneratedKeywordSet
from ..taxonomy.expansion import TaxonomyExpansionManager
from ..taxonomy.models import BusinessTypeExpansion, TaxonomySource, normalize_keyword
from ..taxonomy.store import TaxonomyStore
from ..utils.config import Settings, get_settings
from .models import (
    AnalysisInvariantError,
    AnalysisMetadata,
    AnalysisSummary,
    BusinessConfidence,
    ComprehensiveBusinessAnalysis,
    DataQuality,
    IntelligentAnalysis,
    KeywordQuality,
)

logger = logging.getLogger(__name__)

RegistryLookup = Callable[[str], Awaitable[Optional[RegistryData]]]


# =============================================================================
# SUMMARY SCORING
# =============================================================================

RESOLUTION_WEIGHTS = {
    ConfirmationConfidence.HIGH: 0.4,
    ConfirmationConfidence.MEDIUM: 0.2,
    ConfirmationConfidence.LOW: 0.0,
}
ACTIVITY_WEIGHT = 0.3
KNOWN_TYPE_BONUS = 0.2
SERVICES_BONUS = 0.1

# (min keywords, min populated categories, quality), best first
KEYWORD_QUALITY_THRESHOLDS = [
    (80, 6, KeywordQuality.EXCELLENT),
    (50, 5, KeywordQuality.GOOD),
    (25, 4, KeywordQuality.FAIR),
]

KEYWORD_RELEVANCE = {
    ConfirmationConfidence.HIGH: 0.9,
    ConfirmationConfidence.MEDIUM: 0.7,
    ConfirmationConfidence.LOW: 0.4,
}

MIN_LONG_TAIL = 5

MIN_TARGET_LOCATIONS = 3
UK_TOP_UP_CITIES = 5


class BusinessAnalysisOrchestrator:
    """
    Orchestrates one comprehensive business analysis.

    The taxonomy store is shared and long-lived; everything else is
    created fresh per call.
    """

    def __init__(
        self,
        store: TaxonomyStore,
        registry_lookup: Optional[RegistryLookup] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.registry_lookup = registry_lookup
        self.registry_timeout = self.settings.REGISTRY_TIMEOUT

        self.classifier = BusinessActivityClassifier(store)
        self.resolver = BusinessTypeResolver(
            store,
            high_threshold=self.settings.HIGH_CONFIDENCE_THRESHOLD,
            medium_threshold=self.settings.MEDIUM_CONFIDENCE_THRESHOLD,
        )
        self.expansion_manager = TaxonomyExpansionManager(store)

    async def analyze(self, domain: str, html: Optional[str]) -> ComprehensiveBusinessAnalysis:
        """
        Analyze one business website.

        Args:
            domain: Business domain, e.g. "smith-solicitors.co.uk"
            html: Raw homepage HTML (may be empty)

        Returns:
            ComprehensiveBusinessAnalysis
        """
        start_time = time.time()
        logger.info(f"Starting business analysis for: {domain}")

        # Phase 1: Signals
        logger.info("Phase 1: Extracting content signals...")
        signals = extract_signals(html)

        # Phase 2: Registry
        company_name = signals.company_name or clean_company_name(domain)
        registry_data = await self._lookup_registry(domain, company_name)

        # Phase 3: Activities
        logger.info("Phase 3: Classifying business activities...")
        activities = self.classifier.classify(signals)

        # Phase 4: Resolution
        logger.info("Phase 4: Resolving business type...")
        confirmed = self.resolver.resolve(signals, activities, registry_data)
        if confirmed is None:
            raise AnalysisInvariantError(f"No business type resolved for {domain}")

        # Phase 5: Taxonomy expansion
        logger.info("Phase 5: Checking taxonomy coverage...")
        source = (
            TaxonomySource.REGISTRY
            if confirmed.source == ConfirmationSource.REGISTRY
            else TaxonomySource.CONTENT_ANALYSIS
        )
        expansion = self.expansion_manager.check_and_enhance(
            confirmed.category, confirmed.subcategory, signals, activities, source
        )

        # Phase 6: Keywords
        logger.info("Phase 6: Generating keywords...")
        context = build_business_context(domain, signals, confirmed)
        entry = self.store.get(confirmed.category, confirmed.subcategory)
        keyword_set = KeywordGenerationEngine(
            context,
            entry.bucket if entry else None,
            content_hints(signals, expansion),
        ).generate()

        # Phase 7: Summary
        business_analysis = IntelligentAnalysis(
            domain=domain,
            signals=signals,
            activities=activities,
            registry_data=registry_data,
            confirmed_type=confirmed,
            recommended_keywords=recommend_keywords(signals, confirmed),
        )
        summary = summarize(signals, activities, confirmed, expansion, keyword_set)
        metadata = AnalysisMetadata(
            analysis_version=self.settings.ANALYSIS_VERSION,
            processing_time_ms=int((time.time() - start_time) * 1000),
            taxonomy_version=self.store.version,
            data_quality=assess_data_quality(signals, activities, confirmed),
        )

        logger.info(
            f"Business analysis complete for {domain}: "
            f"{confirmed.category} / {confirmed.subcategory} ({confirmed.confidence.value}), "
            f"{keyword_set.total_generated} keywords, quality={summary.keyword_quality.value}, "
            f"{metadata.processing_time_ms}ms"
        )

        return ComprehensiveBusinessAnalysis(
            business_analysis=business_analysis,
            expansion=expansion,
            keywords=keyword_set,
            summary=summary,
            metadata=metadata,
        )

    async def _lookup_registry(self, domain: str, company_name: str) -> Optional[RegistryData]:
        """Registry data for the company name guess, or None on absence, error or timeout."""
        if self.registry_lookup is None:
            return None

        logger.info("Phase 2: Looking up company registry...")
        try:
            return await asyncio.wait_for(self.registry_lookup(company_name), timeout=self.registry_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Registry lookup timed out after {self.registry_timeout}s for {domain}")
        except Exception as e:
            logger.warning(f"Registry lookup failed for {domain}: {e}")
        return None


# =============================================================================
# STAGE HELPERS
# =============================================================================


def build_business_context(
    domain: str,
    signals: ExtractedSignals,
    confirmed: ConfirmedBusinessType,
) -> BusinessContext:
    """
    Keyword generation context for one analysis.

    Only named places become keyword locations; a postcode area alone
    still marks the business as local. Local businesses with fewer than
    three places are topped up with the largest UK cities.
    """
    places = list(signals.places)
    is_local = bool(signals.location_indicators)

    target_locations = places[:MIN_TARGET_LOCATIONS]
    if is_local and len(target_locations) < MIN_TARGET_LOCATIONS:
        for city in UK_CITIES[:UK_TOP_UP_CITIES]:
            if city not in target_locations:
                target_locations.append(city)

    return BusinessContext(
        category=confirmed.category,
        subcategory=confirmed.subcategory,
        business_name=signals.company_name or clean_company_name(domain),
        services=list(signals.services),
        is_local_business=is_local,
        detected_location=places[0] if places else None,
        target_locations=target_locations,
    )


def content_hints(signals: ExtractedSignals, expansion: BusinessTypeExpansion) -> List[str]:
    """Keywords newly learned by the taxonomy, else the page's industry terms."""
    if (expansion.is_new_type or expansion.is_new_subcategory) and expansion.added_keywords:
        return list(expansion.added_keywords)
    return list(signals.industry_terms)


def recommend_keywords(signals: ExtractedSignals, confirmed: ConfirmedBusinessType) -> List[str]:
    """Short list of targeted keywords for the analysis overview."""
    candidates = list(signals.services[:5])
    for service in signals.services[:3]:
        candidates += [f"{service} services", f"professional {service}"]
    for location in signals.places[:2]:
        candidates += [
            f"{confirmed.subcategory} {location}",
            f"{confirmed.category} {location}",
        ]
    candidates += list(signals.industry_terms[:5])

    seen = set()
    keywords = []
    for candidate in candidates:
        keyword = normalize_keyword(candidate)
        if keyword and keyword not in seen:
            seen.add(keyword)
            keywords.append(keyword)
    return keywords


def score_business_confidence(
    signals: ExtractedSignals,
    activities: List[BusinessActivity],
    confirmed: ConfirmedBusinessType,
    expansion: BusinessTypeExpansion,
) -> BusinessConfidence:
    score = RESOLUTION_WEIGHTS[confirmed.confidence]
    if activities:
        score += activities[0].confidence * ACTIVITY_WEIGHT
    if not expansion.is_new_type:
        score += KNOWN_TYPE_BONUS
    if len(signals.services) >= 3:
        score += SERVICES_BONUS

    if score >= 0.7:
        return BusinessConfidence.HIGH
    if score >= 0.4:
        return BusinessConfidence.MEDIUM
    return BusinessConfidence.LOW


def grade_keywords(keyword_set: GeneratedKeywordSet) -> KeywordQuality:
    for min_total, min_categories, quality in KEYWORD_QUALITY_THRESHOLDS:
        if keyword_set.total_generated >= min_total and keyword_set.populated_categories >= min_categories:
            return quality
    return KeywordQuality.POOR


def summarize(
    signals: ExtractedSignals,
    activities: List[BusinessActivity],
    confirmed: ConfirmedBusinessType,
    expansion: BusinessTypeExpansion,
    keyword_set: GeneratedKeywordSet,
) -> AnalysisSummary:
    business_confidence = score_business_confidence(signals, activities, confirmed, expansion)

    actions = []
    if expansion.is_new_type:
        actions.append(
            f'New business type "{confirmed.category}" detected - consider creating '
            f'industry-specific content to establish authority'
        )
    if expansion.is_new_subcategory:
        actions.append(
            f'Subcategory "{confirmed.subcategory}" identified - focus on specialized '
            f'service pages to capture niche traffic'
        )
    if keyword_set.local:
        actions.append(
            "Strong local keyword opportunities found - optimize for local SEO and Google My Business"
        )
    if len(keyword_set.commercial) > len(keyword_set.informational):
        actions.append(
            "High commercial intent detected - focus on conversion-optimized service pages"
        )
    else:
        actions.append(
            "Strong informational keyword potential - develop content marketing strategy "
            "with helpful guides and resources"
        )
    if len(signals.services) >= 5:
        actions.append("Multiple services identified - create dedicated landing pages for each service")
    if business_confidence == BusinessConfidence.LOW:
        actions.append(
            "Consider clarifying your service offerings and business focus on your website "
            "to improve SEO targeting"
        )

    gaps = []
    if len(keyword_set.long_tail) < MIN_LONG_TAIL:
        gaps.append("Limited long-tail keyword coverage - missing opportunities for specific customer queries")
    if signals.location_indicators and not keyword_set.local:
        gaps.append(
            "Local business detected but no local keywords generated - location targeting needs improvement"
        )
    if not keyword_set.urgency:
        gaps.append("No urgency keywords found - missing emergency/immediate service opportunities")

    generated = [kw.keyword for kw in keyword_set.all_keywords()]
    uncovered = [
        service for service in signals.services
        if not any(normalize_keyword(service) in keyword for keyword in generated)
    ]
    if uncovered:
        gaps.append(f"Services not covered by keywords: {', '.join(uncovered[:3])}")

    return AnalysisSummary(
        business_confidence=business_confidence,
        keyword_quality=grade_keywords(keyword_set),
        recommended_actions=actions,
        coverage_gaps=gaps,
    )


def assess_data_quality(
    signals: ExtractedSignals,
    activities: List[BusinessActivity],
    confirmed: ConfirmedBusinessType,
) -> DataQuality:
    richness = (
        len(signals.service_descriptions) * 0.2
        + len(signals.navigation_items) * 0.1
        + len(signals.services) * 0.1
    )
    return DataQuality(
        content_richness=min(richness, 1.0),
        business_clarity=activities[0].confidence if activities else 0.0,
        keyword_relevance=KEYWORD_RELEVANCE[confirmed.confidence],
    )


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================


async def analyze_business(
    domain: str,
    html: Optional[str],
    store: Optional[TaxonomyStore] = None,
    registry_lookup: Optional[RegistryLookup] = None,
    settings: Optional[Settings] = None,
) -> ComprehensiveBusinessAnalysis:
    """
    Convenience function to run one comprehensive business analysis.

    Args:
        domain: Business domain
        html: Raw homepage HTML
        store: Shared taxonomy store (a fresh default store when omitted)
        registry_lookup: Optional async company registry lookup, called with
            the page company name (or the cleaned domain when the page has none)
        settings: Settings override

    Returns:
        ComprehensiveBusinessAnalysis
    """
    settings = settings or get_settings()
    if store is None:
        store = TaxonomyStore.load_default(settings.TAXONOMY_DATA_PATH)

    orchestrator = BusinessAnalysisOrchestrator(store, registry_lookup, settings)
    return await orchestrator.analyze(domain, html)
