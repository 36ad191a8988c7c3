"""
Keyword Generation Data Models
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class KeywordCategory(str, Enum):
    """The seven intent categories of a keyword set, in generation order."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    LONG_TAIL = "long-tail"
    LOCAL = "local"
    COMMERCIAL = "commercial"
    INFORMATIONAL = "informational"
    URGENCY = "urgency"


class KeywordIntent(str, Enum):
    COMMERCIAL = "commercial"
    INFORMATIONAL = "informational"
    NAVIGATIONAL = "navigational"
    TRANSACTIONAL = "transactional"


class KeywordDifficulty(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SearchVolumeTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Attribute name on GeneratedKeywordSet for each category
CATEGORY_FIELDS: Dict[KeywordCategory, str] = {
    KeywordCategory.PRIMARY: "primary",
    KeywordCategory.SECONDARY: "secondary",
    KeywordCategory.LONG_TAIL: "long_tail",
    KeywordCategory.LOCAL: "local",
    KeywordCategory.COMMERCIAL: "commercial",
    KeywordCategory.INFORMATIONAL: "informational",
    KeywordCategory.URGENCY: "urgency",
}


@dataclass
class KeywordWithMetadata:
    """A single generated keyword."""
    keyword: str  # Lower-cased, trimmed
    category: KeywordCategory
    intent: KeywordIntent
    difficulty: KeywordDifficulty
    business_relevance: float  # 0-1
    search_volume_tier: SearchVolumeTier = SearchVolumeTier.MEDIUM
    generated: bool = False  # True when produced by a template or content phrase
    template: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword": self.keyword,
            "category": self.category.value,
            "intent": self.intent.value,
            "difficulty": self.difficulty.value,
            "business_relevance": self.business_relevance,
            "search_volume_tier": self.search_volume_tier.value,
            "generated": self.generated,
            "template": self.template,
        }


@dataclass
class BusinessContext:
    """What the keyword generator knows about the business."""
    category: str
    subcategory: str
    business_name: str = ""
    services: List[str] = field(default_factory=list)
    is_local_business: bool = False
    detected_location: Optional[str] = None
    target_locations: List[str] = field(default_factory=list)

    @property
    def target_location(self) -> str:
        """Single location for templates, "your area" when unknown."""
        if self.detected_location:
            return self.detected_location
        if self.target_locations:
            return self.target_locations[0]
        return "your area"

    def all_locations(self) -> List[str]:
        locations = []
        for location in [self.detected_location] + list(self.target_locations):
            if location and location not in locations:
                locations.append(location)
        return locations


@dataclass
class GeneratedKeywordSet:
    """
    Keywords for one business across seven intent categories.

    No keyword appears twice anywhere in the set (case-insensitive).
    """
    primary: List[KeywordWithMetadata] = field(default_factory=list)
    secondary: List[KeywordWithMetadata] = field(default_factory=list)
    long_tail: List[KeywordWithMetadata] = field(default_factory=list)
    local: List[KeywordWithMetadata] = field(default_factory=list)
    commercial: List[KeywordWithMetadata] = field(default_factory=list)
    informational: List[KeywordWithMetadata] = field(default_factory=list)
    urgency: List[KeywordWithMetadata] = field(default_factory=list)

    total_generated: int = 0
    industry_specific: bool = True
    generation_method: str = "dynamic_industry_specific"

    def get(self, category: KeywordCategory) -> List[KeywordWithMetadata]:
        return getattr(self, CATEGORY_FIELDS[category])

    def all_keywords(self) -> List[KeywordWithMetadata]:
        return [kw for category in KeywordCategory for kw in self.get(category)]

    def category_breakdown(self) -> Dict[str, int]:
        return {category.value: len(self.get(category)) for category in KeywordCategory}

    @property
    def populated_categories(self) -> int:
        return sum(1 for category in KeywordCategory if self.get(category))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            field_name: [kw.to_dict() for kw in getattr(self, field_name)]
            for field_name in CATEGORY_FIELDS.values()
        }
        data["total_generated"] = self.total_generated
        data["industry_specific"] = self.industry_specific
        data["generation_method"] = self.generation_method
        return data
