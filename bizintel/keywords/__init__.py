"""
Keyword Generation Package

Usage:
    from bizintel.keywords import BusinessContext, KeywordGenerationEngine

    context = BusinessContext(category="Legal Services", subcategory="Family Law",
                              business_name="smith & co", services=["divorce"])
    keyword_set = KeywordGenerationEngine(context, entry.bucket).generate()
"""

from .models import (
    BusinessContext,
    CATEGORY_FIELDS,
    GeneratedKeywordSet,
    KeywordCategory,
    KeywordDifficulty,
    KeywordIntent,
    KeywordWithMetadata,
    SearchVolumeTier,
)
from .templates import (
    KeywordTemplate,
    TEMPLATES,
    all_templates,
    get_templates,
)
from .generator import (
    DYNAMIC_METHOD,
    FALLBACK_METHOD,
    GENERATION_ORDER,
    KeywordGenerationEngine,
    estimate_volume,
    generate_business_keywords,
)

__all__ = [
    "BusinessContext",
    "CATEGORY_FIELDS",
    "GeneratedKeywordSet",
    "KeywordCategory",
    "KeywordDifficulty",
    "KeywordIntent",
    "KeywordWithMetadata",
    "SearchVolumeTier",
    "KeywordTemplate",
    "TEMPLATES",
    "all_templates",
    "get_templates",
    "DYNAMIC_METHOD",
    "FALLBACK_METHOD",
    "GENERATION_ORDER",
    "KeywordGenerationEngine",
    "estimate_volume",
    "generate_business_keywords",
]
