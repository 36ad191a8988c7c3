"""
Business Activity Classification

Scores candidate business categories against extracted signals.

Scoring (per category pattern):
- +2 for every word-bounded occurrence of a pattern keyword in page text
- +10 for every navigation term found in a navigation label
- +8 for every headline term found in a headline

confidence = min(score / 20, 1.0). Only categories with a positive score
are returned, best first, at most three.

Patterns come from a fixed seed table, followed by patterns derived from
every other category in the taxonomy store, so newly learned categories
become classifiable without code changes.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..taxonomy.store import TaxonomyStore
from .models import BusinessActivity, ExtractedSignals

logger = logging.getLogger(__name__)


# =============================================================================
# SCORING CONSTANTS
# =============================================================================

KEYWORD_WEIGHT = 2
NAVIGATION_WEIGHT = 10
HEADLINE_WEIGHT = 8
SCORE_NORMALISER = 20.0
MAX_ACTIVITIES = 3
MAX_DERIVED_KEYWORDS = 20


@dataclass
class ActivityPattern:
    """Lexical pattern for one business category."""
    category: str
    keywords: List[str] = field(default_factory=list)
    navigation_terms: List[str] = field(default_factory=list)
    headline_terms: List[str] = field(default_factory=list)


SEED_PATTERNS: List[ActivityPattern] = [
    ActivityPattern(
        category="Legal Services",
        keywords=[
            "solicitor", "lawyer", "legal advice", "law firm", "litigation",
            "conveyancing", "will writing", "divorce", "employment law",
        ],
        navigation_terms=["legal services", "practice areas", "our lawyers", "solicitors"],
        headline_terms=["legal", "law", "solicitor", "lawyer"],
    ),
    ActivityPattern(
        category="Fitness & Sports",
        keywords=[
            "gym", "fitness", "workout", "exercise", "personal training",
            "fitness classes", "membership", "health club", "sports",
        ],
        navigation_terms=["membership", "classes", "personal training", "facilities", "join"],
        headline_terms=["fitness", "gym", "workout", "training", "exercise"],
    ),
    ActivityPattern(
        category="Food & Hospitality",
        keywords=[
            "restaurant", "dining", "menu", "booking", "table reservation",
            "chef", "cuisine", "catering", "hotel",
        ],
        navigation_terms=["menu", "booking", "reservations", "rooms", "dining"],
        headline_terms=["restaurant", "dining", "menu", "chef", "cuisine"],
    ),
    ActivityPattern(
        category="Architecture & Design",
        keywords=[
            "architect", "design", "planning permission", "building",
            "extension", "renovation", "architectural",
        ],
        navigation_terms=["portfolio", "projects", "services", "planning"],
        headline_terms=["architect", "design", "planning", "building"],
    ),
    ActivityPattern(
        category="Marketing & Digital",
        keywords=[
            "seo", "digital marketing", "web design", "social media",
            "ppc", "advertising", "marketing agency",
        ],
        navigation_terms=["services", "portfolio", "case studies", "digital"],
        headline_terms=["marketing", "digital", "seo", "web design"],
    ),
    ActivityPattern(
        category="Financial Services",
        keywords=[
            "accountant", "financial advisor", "investment", "pension",
            "tax", "accounting", "financial planning",
        ],
        navigation_terms=["services", "advice", "planning", "tax"],
        headline_terms=["financial", "accounting", "investment", "tax"],
    ),
]


def derive_patterns(store: TaxonomyStore, exclude: List[str]) -> List[ActivityPattern]:
    """
    Build patterns for store categories without a seed pattern.

    keywords: primary keywords across the category's subcategories
    navigation terms: subcategory names
    headline terms: words of the category name
    """
    patterns = []
    for category in store.categories():
        if category in exclude:
            continue

        keywords: List[str] = []
        navigation_terms: List[str] = []
        for subcategory in store.subcategories(category):
            navigation_terms.append(subcategory.lower())
            entry = store.get(category, subcategory)
            if entry is None:
                continue
            for keyword in entry.bucket.primary:
                if keyword not in keywords:
                    keywords.append(keyword)

        headline_terms = [
            word for word in re.findall(r"[a-z]+", category.lower()) if len(word) > 3
        ]

        patterns.append(ActivityPattern(
            category=category,
            keywords=keywords[:MAX_DERIVED_KEYWORDS],
            navigation_terms=navigation_terms,
            headline_terms=headline_terms,
        ))
    return patterns


class BusinessActivityClassifier:
    """
    Scores categories against signals and returns the top activities.

    Usage:
        classifier = BusinessActivityClassifier(store)
        activities = classifier.classify(signals)
    """

    def __init__(
        self,
        store: Optional[TaxonomyStore] = None,
        seed_patterns: Optional[List[ActivityPattern]] = None,
        max_activities: int = MAX_ACTIVITIES,
    ):
        self.store = store
        self.seed_patterns = seed_patterns if seed_patterns is not None else SEED_PATTERNS
        self.max_activities = max_activities

    def patterns(self) -> List[ActivityPattern]:
        """Seed patterns first, then store-derived ones, in store order."""
        patterns = list(self.seed_patterns)
        if self.store is not None:
            patterns += derive_patterns(self.store, [p.category for p in patterns])
        return patterns

    def classify(self, signals: ExtractedSignals) -> List[BusinessActivity]:
        activities = []
        for pattern in self.patterns():
            activity = self.score(pattern, signals)
            if activity is not None:
                activities.append(activity)

        # sorted() is stable: ties keep pattern order
        activities = sorted(activities, key=lambda a: a.confidence, reverse=True)
        activities = activities[:self.max_activities]

        if activities:
            logger.info(
                "Classified activities: "
                + ", ".join(f"{a.activity} ({a.confidence:.0%})" for a in activities)
            )
        else:
            logger.info("No business activity matched the page content")

        return activities

    def score(self, pattern: ActivityPattern, signals: ExtractedSignals) -> Optional[BusinessActivity]:
        score = 0
        evidence: List[str] = []
        matched: List[str] = []

        text = signals.content_text
        for keyword in pattern.keywords:
            count = len(re.findall(r"\b" + re.escape(keyword) + r"\b", text))
            if count:
                score += count * KEYWORD_WEIGHT
                evidence.append(f'Found "{keyword}" {count} times in content')
                if keyword not in matched:
                    matched.append(keyword)

        navigation = [item.lower() for item in signals.navigation_items]
        for term in pattern.navigation_terms:
            if any(term in item for item in navigation):
                score += NAVIGATION_WEIGHT
                evidence.append(f'Found "{term}" in navigation')

        headlines = [h.lower() for h in signals.headlines]
        for term in pattern.headline_terms:
            if any(term in h for h in headlines):
                score += HEADLINE_WEIGHT
                evidence.append(f'Found "{term}" in headlines')

        if score <= 0:
            return None

        return BusinessActivity(
            activity=pattern.category,
            confidence=min(score / SCORE_NORMALISER, 1.0),
            evidence=evidence,
            keywords=matched,
        )


def classify_activities(
    signals: ExtractedSignals,
    store: Optional[TaxonomyStore] = None,
) -> List[BusinessActivity]:
    """Convenience wrapper around BusinessActivityClassifier."""
    return BusinessActivityClassifier(store).classify(signals)
