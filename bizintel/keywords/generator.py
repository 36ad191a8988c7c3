"""
Keyword Generation Engine

Builds a GeneratedKeywordSet for one business from its taxonomy bucket,
its business context and content-derived hints.

Per category, keywords come from (in order):
1. Literal taxonomy entries for the category
2. Business context literals (primary only: name, "<name> services", services)
3. Template expansions over the bucket's primary keywords
4. Business-relevant content phrases (secondary and long-tail only)

Each category is de-duplicated on its own, then the whole set is
de-duplicated in generation order so the first category to produce a
keyword keeps it. Local keywords are skipped for non-local businesses.

When there is no taxonomy bucket (or it is empty) the engine falls back
to a small content-based primary set.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from ..taxonomy.models import TaxonomyBucket, normalize_keyword
from .models import (
    BusinessContext,
    GeneratedKeywordSet,
    KeywordCategory,
    KeywordDifficulty,
    KeywordIntent,
    KeywordWithMetadata,
    SearchVolumeTier,
)
from .templates import TEMPLATES, KeywordTemplate

logger = logging.getLogger(__name__)


GENERATION_ORDER: List[KeywordCategory] = [
    KeywordCategory.PRIMARY,
    KeywordCategory.SECONDARY,
    KeywordCategory.LONG_TAIL,
    KeywordCategory.LOCAL,
    KeywordCategory.COMMERCIAL,
    KeywordCategory.INFORMATIONAL,
    KeywordCategory.URGENCY,
]

# category -> (bucket name, intent, difficulty, relevance) for literal entries
LITERAL_SPECS: Dict[KeywordCategory, Tuple[str, KeywordIntent, KeywordDifficulty, float]] = {
    KeywordCategory.PRIMARY: ("primary", KeywordIntent.NAVIGATIONAL, KeywordDifficulty.HIGH, 0.9),
    KeywordCategory.SECONDARY: ("secondary", KeywordIntent.COMMERCIAL, KeywordDifficulty.MEDIUM, 0.7),
    KeywordCategory.LONG_TAIL: ("long_tail", KeywordIntent.INFORMATIONAL, KeywordDifficulty.LOW, 0.8),
    KeywordCategory.LOCAL: ("local", KeywordIntent.NAVIGATIONAL, KeywordDifficulty.MEDIUM, 0.8),
    KeywordCategory.COMMERCIAL: ("commercial", KeywordIntent.COMMERCIAL, KeywordDifficulty.MEDIUM, 0.8),
    KeywordCategory.INFORMATIONAL: ("informational", KeywordIntent.INFORMATIONAL, KeywordDifficulty.LOW, 0.7),
    KeywordCategory.URGENCY: ("urgency", KeywordIntent.TRANSACTIONAL, KeywordDifficulty.HIGH, 0.8),
}

BUSINESS_NAME_RELEVANCE = 0.9
SERVICE_RELEVANCE = 0.8
CONTENT_RELEVANCE = 0.6
FALLBACK_RELEVANCE = 0.5
MAX_CONTENT_PHRASES = 20
MAX_FALLBACK_HINTS = 10

DYNAMIC_METHOD = "dynamic_industry_specific"
FALLBACK_METHOD = "fallback_content_based"


def estimate_volume(keyword: str, category: KeywordCategory) -> SearchVolumeTier:
    """Heuristic search volume tier from keyword shape."""
    words = len(keyword.split())
    if category == KeywordCategory.PRIMARY and words <= 2:
        return SearchVolumeTier.HIGH
    if category == KeywordCategory.LOCAL and "near me" in keyword:
        return SearchVolumeTier.HIGH
    if category == KeywordCategory.LONG_TAIL and words >= 4:
        return SearchVolumeTier.LOW
    return SearchVolumeTier.MEDIUM


def adjust_difficulty(keyword: str, category: KeywordCategory, difficulty: KeywordDifficulty) -> KeywordDifficulty:
    """Short primary keywords are hard, long long-tail keywords are easy."""
    words = len(keyword.split())
    if category == KeywordCategory.PRIMARY:
        return KeywordDifficulty.HIGH if words <= 2 else KeywordDifficulty.MEDIUM
    if category == KeywordCategory.LONG_TAIL:
        return KeywordDifficulty.LOW if words >= 4 else KeywordDifficulty.MEDIUM
    return difficulty


def dedupe(keywords: List[KeywordWithMetadata], seen: Optional[Set[str]] = None) -> List[KeywordWithMetadata]:
    """Drop repeats (case-insensitive); ``seen`` is updated in place."""
    seen = seen if seen is not None else set()
    result = []
    for kw in keywords:
        key = normalize_keyword(kw.keyword)
        if key and key not in seen:
            seen.add(key)
            result.append(kw)
    return result


class KeywordGenerationEngine:
    """
    Generates the seven-category keyword set for one business.

    Usage:
        engine = KeywordGenerationEngine(context, bucket, content_keywords)
        keyword_set = engine.generate()
    """

    def __init__(
        self,
        context: BusinessContext,
        bucket: Optional[TaxonomyBucket] = None,
        content_keywords: Optional[List[str]] = None,
        templates: Optional[Dict[KeywordCategory, List[KeywordTemplate]]] = None,
    ):
        self.context = context
        self.bucket = bucket
        self.content_keywords = [k for k in (content_keywords or []) if k and k.strip()]
        self.templates = templates if templates is not None else TEMPLATES

    def generate(self) -> GeneratedKeywordSet:
        if self.bucket is None or self.bucket.is_empty:
            logger.info(
                f"No taxonomy keywords for {self.context.category} / {self.context.subcategory}, "
                f"using content-based fallback"
            )
            return self.generate_fallback()

        content_phrases = self._content_phrases()

        keyword_set = GeneratedKeywordSet(
            industry_specific=True,
            generation_method=DYNAMIC_METHOD,
        )
        seen: Set[str] = set()
        for category in GENERATION_ORDER:
            if category == KeywordCategory.LOCAL and not self.context.is_local_business:
                continue
            keywords = dedupe(self.generate_category(category, content_phrases))
            keyword_set.get(category).extend(dedupe(keywords, seen))

        keyword_set.total_generated = len(keyword_set.all_keywords())

        logger.info(
            f"Generated {keyword_set.total_generated} keywords for "
            f"{self.context.category} / {self.context.subcategory}: {keyword_set.category_breakdown()}"
        )
        return keyword_set

    def generate_category(
        self,
        category: KeywordCategory,
        content_phrases: Optional[List[str]] = None,
    ) -> List[KeywordWithMetadata]:
        """All candidate keywords for one category, before de-duplication."""
        bucket_name, intent, difficulty, relevance = LITERAL_SPECS[category]
        keywords = [
            self._keyword(k, category, intent, difficulty, relevance)
            for k in self.bucket.get(bucket_name)
        ]

        if category == KeywordCategory.PRIMARY:
            keywords += self._context_literals()

        services = list(self.bucket.primary)
        for template in self.templates.get(category, []):
            for rendered in template.expand(services, self.context):
                keywords.append(self._keyword(
                    rendered, category, template.intent, template.difficulty,
                    template.relevance, generated=True, template=template.name,
                ))

        for phrase in content_phrases or []:
            words = len(phrase.split())
            if category == KeywordCategory.SECONDARY and words == 2:
                keywords.append(self._keyword(
                    phrase, category, KeywordIntent.COMMERCIAL, KeywordDifficulty.MEDIUM,
                    CONTENT_RELEVANCE, generated=True,
                ))
            elif category == KeywordCategory.LONG_TAIL and words >= 3:
                keywords.append(self._keyword(
                    phrase, category, KeywordIntent.INFORMATIONAL, KeywordDifficulty.LOW,
                    CONTENT_RELEVANCE, generated=True,
                ))

        return [kw for kw in keywords if kw.keyword]

    def generate_fallback(self) -> GeneratedKeywordSet:
        """Primary-only keyword set built from name, services and content hints."""
        candidates: List[str] = []
        name = self.context.business_name.strip()
        if name:
            candidates += [name, f"{name} services"]
        candidates += list(self.context.services)
        candidates += [k for k in self.content_keywords[:MAX_FALLBACK_HINTS] if len(k.strip()) > 2]

        primary = dedupe([
            self._keyword(
                k, KeywordCategory.PRIMARY, KeywordIntent.COMMERCIAL,
                KeywordDifficulty.MEDIUM, FALLBACK_RELEVANCE, adjust=False,
            )
            for k in candidates
        ])

        return GeneratedKeywordSet(
            primary=primary,
            total_generated=len(primary),
            industry_specific=False,
            generation_method=FALLBACK_METHOD,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _context_literals(self) -> List[KeywordWithMetadata]:
        keywords = []
        name = self.context.business_name.strip()
        if name:
            for k in (name, f"{name} services"):
                keywords.append(self._keyword(
                    k, KeywordCategory.PRIMARY, KeywordIntent.NAVIGATIONAL,
                    KeywordDifficulty.HIGH, BUSINESS_NAME_RELEVANCE,
                ))
        for service in self.context.services:
            keywords.append(self._keyword(
                service, KeywordCategory.PRIMARY, KeywordIntent.NAVIGATIONAL,
                KeywordDifficulty.HIGH, SERVICE_RELEVANCE,
            ))
        return keywords

    def _content_phrases(self) -> List[str]:
        """2-4 word content hints that mention the business or its services."""
        terms = [
            self.context.category.lower(),
            self.context.subcategory.lower(),
        ] + [s.lower() for s in self.context.services]
        terms = [t for t in terms if t]

        phrases = []
        for hint in self.content_keywords:
            phrase = normalize_keyword(hint)
            if not 2 <= len(phrase.split()) <= 4:
                continue
            if any(term in phrase or phrase in term for term in terms):
                phrases.append(phrase)
        return phrases[:MAX_CONTENT_PHRASES]

    def _keyword(
        self,
        keyword: str,
        category: KeywordCategory,
        intent: KeywordIntent,
        difficulty: KeywordDifficulty,
        relevance: float,
        generated: bool = False,
        template: Optional[str] = None,
        adjust: bool = True,
    ) -> KeywordWithMetadata:
        keyword = normalize_keyword(keyword)
        return KeywordWithMetadata(
            keyword=keyword,
            category=category,
            intent=intent,
            difficulty=adjust_difficulty(keyword, category, difficulty) if adjust else difficulty,
            business_relevance=relevance,
            search_volume_tier=estimate_volume(keyword, category),
            generated=generated,
            template=template,
        )


def generate_business_keywords(
    context: BusinessContext,
    bucket: Optional[TaxonomyBucket] = None,
    content_keywords: Optional[List[str]] = None,
) -> GeneratedKeywordSet:
    """Convenience wrapper around KeywordGenerationEngine."""
    return KeywordGenerationEngine(context, bucket, content_keywords).generate()
