"""
Keyword Templates

Every template-generated keyword comes from a KeywordTemplate: a pattern
with "{service}", "{location}" and "{problem}" placeholders, rendered as a
pure function of (service, context). Templates are registered per
category in a fixed order so generation is deterministic and the full set
of templates can be listed and tested.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import BusinessContext, KeywordCategory, KeywordDifficulty, KeywordIntent


# =============================================================================
# MODIFIER VOCABULARIES
# =============================================================================

QUALITY_INDICATORS = [
    "professional", "expert", "specialist", "experienced",
    "qualified", "certified", "licensed", "insured",
]
BUSINESS_MODIFIERS = [
    "commercial", "residential", "domestic", "business",
    "corporate", "private", "personal",
]
PRICE_MODIFIERS = ["cost", "price", "rates", "fees", "quote", "pricing"]
ACTION_VERBS = ["hire", "book", "get", "find", "choose"]
URGENCY_MODIFIERS = ["urgent", "emergency", "immediate", "same day"]
PROXIMITY_TERMS = ["near me", "nearby", "close to me"]

PROBLEM_TEMPLATES = [
    "how to find {service}",
    "best {service} for {problem}",
    "{service} {location} specialist",
    "affordable {service} solutions",
    "{service} expert advice",
]
USE_CASE_TEMPLATES = [
    "{service} for small business",
    "emergency {service} service",
    "{service} cost calculator",
    "{service} consultation booking",
]
HOW_TO_TEMPLATES = [
    "how to choose {service}",
    "what is {service}",
    "{service} explained",
    "{service} guide",
    "{service} tips",
]
LOCATION_TEMPLATES = ["{service} in {location}", "{location} {service}"]

DEFAULT_PROBLEM = "your needs"


@dataclass(frozen=True)
class KeywordTemplate:
    """A keyword pattern and the metadata its keywords carry."""
    pattern: str
    category: KeywordCategory
    intent: KeywordIntent
    difficulty: KeywordDifficulty
    relevance: float
    service_limit: int  # How many primary keywords the template expands
    per_location: bool = False  # Expand once per target location

    @property
    def name(self) -> str:
        return self.pattern

    def render(self, service: str, context: BusinessContext, location: Optional[str] = None) -> str:
        return self.pattern.format(
            service=service,
            location=location or context.target_location,
            problem=DEFAULT_PROBLEM,
        )

    def expand(self, services: List[str], context: BusinessContext) -> List[str]:
        """Render against the first ``service_limit`` services."""
        services = services[:self.service_limit]
        if self.per_location:
            return [
                self.render(service, context, location)
                for location in context.all_locations()
                for service in services
            ]
        return [self.render(service, context) for service in services]


def _templates(
    patterns: List[str],
    category: KeywordCategory,
    intent: KeywordIntent,
    difficulty: KeywordDifficulty,
    relevance: float,
    service_limit: int,
    per_location: bool = False,
) -> List[KeywordTemplate]:
    return [
        KeywordTemplate(pattern, category, intent, difficulty, relevance, service_limit, per_location)
        for pattern in patterns
    ]


# =============================================================================
# TEMPLATE REGISTRY
# =============================================================================

TEMPLATES: Dict[KeywordCategory, List[KeywordTemplate]] = {
    KeywordCategory.PRIMARY: [],
    KeywordCategory.SECONDARY: (
        _templates(
            [f"{q} {{service}}" for q in QUALITY_INDICATORS[:4]],
            KeywordCategory.SECONDARY, KeywordIntent.COMMERCIAL, KeywordDifficulty.MEDIUM, 0.6, 3,
        )
        + _templates(
            [f"{m} {{service}}" for m in BUSINESS_MODIFIERS[:3]],
            KeywordCategory.SECONDARY, KeywordIntent.COMMERCIAL, KeywordDifficulty.MEDIUM, 0.6, 2,
        )
    ),
    KeywordCategory.LONG_TAIL: (
        _templates(
            PROBLEM_TEMPLATES,
            KeywordCategory.LONG_TAIL, KeywordIntent.INFORMATIONAL, KeywordDifficulty.LOW, 0.7, 2,
        )
        + _templates(
            USE_CASE_TEMPLATES,
            KeywordCategory.LONG_TAIL, KeywordIntent.COMMERCIAL, KeywordDifficulty.LOW, 0.6, 2,
        )
    ),
    KeywordCategory.LOCAL: (
        _templates(
            LOCATION_TEMPLATES,
            KeywordCategory.LOCAL, KeywordIntent.NAVIGATIONAL, KeywordDifficulty.MEDIUM, 0.7, 3,
            per_location=True,
        )
        + _templates(
            [f"{{service}} {p}" for p in PROXIMITY_TERMS],
            KeywordCategory.LOCAL, KeywordIntent.NAVIGATIONAL, KeywordDifficulty.HIGH, 0.9, 2,
        )
    ),
    KeywordCategory.COMMERCIAL: (
        _templates(
            [f"{{service}} {p}" for p in PRICE_MODIFIERS],
            KeywordCategory.COMMERCIAL, KeywordIntent.COMMERCIAL, KeywordDifficulty.MEDIUM, 0.7, 3,
        )
        + _templates(
            [f"{a} {{service}}" for a in ACTION_VERBS],
            KeywordCategory.COMMERCIAL, KeywordIntent.TRANSACTIONAL, KeywordDifficulty.MEDIUM, 0.6, 2,
        )
    ),
    KeywordCategory.INFORMATIONAL: _templates(
        HOW_TO_TEMPLATES,
        KeywordCategory.INFORMATIONAL, KeywordIntent.INFORMATIONAL, KeywordDifficulty.LOW, 0.6, 2,
    ),
    KeywordCategory.URGENCY: _templates(
        [f"{u} {{service}}" for u in URGENCY_MODIFIERS],
        KeywordCategory.URGENCY, KeywordIntent.TRANSACTIONAL, KeywordDifficulty.HIGH, 0.7, 2,
    ),
}


def get_templates(category: KeywordCategory) -> List[KeywordTemplate]:
    return list(TEMPLATES.get(category, []))


def all_templates() -> List[KeywordTemplate]:
    return [t for category in KeywordCategory for t in TEMPLATES.get(category, [])]
