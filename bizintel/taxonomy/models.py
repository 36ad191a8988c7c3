"""
Taxonomy Data Models

A taxonomy entry is the keyword vocabulary for one (category, subcategory)
pair, split into seven intent buckets. Buckets are ordered, capped and
append-only: keywords are added, never removed or rewritten.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class TaxonomyError(Exception):
    """Invalid taxonomy data or operation."""
    pass


class TaxonomySource(str, Enum):
    """Where a taxonomy entry came from."""
    CONTENT_ANALYSIS = "content_analysis"
    REGISTRY = "registry"
    USER_INPUT = "user_input"  # Curated dataset


# Insertion caps per bucket, in canonical bucket order
BUCKET_CAPS: Dict[str, int] = {
    "primary": 10,
    "secondary": 15,
    "long_tail": 12,
    "commercial": 15,
    "informational": 12,
    "local": 15,
    "urgency": 10,
}

BUCKET_NAMES: List[str] = list(BUCKET_CAPS)


def normalize_keyword(keyword: str) -> str:
    """Case-insensitive, whitespace-trimmed form used for membership."""
    return " ".join(keyword.lower().split())


@dataclass
class TaxonomyBucket:
    """The seven keyword buckets for one taxonomy entry."""
    primary: List[str] = field(default_factory=list)
    secondary: List[str] = field(default_factory=list)
    long_tail: List[str] = field(default_factory=list)
    commercial: List[str] = field(default_factory=list)
    informational: List[str] = field(default_factory=list)
    local: List[str] = field(default_factory=list)
    urgency: List[str] = field(default_factory=list)

    def get(self, name: str) -> List[str]:
        if name not in BUCKET_CAPS:
            raise TaxonomyError(f"Unknown keyword bucket: {name}")
        return getattr(self, name)

    def contains(self, name: str, keyword: str) -> bool:
        target = normalize_keyword(keyword)
        return any(normalize_keyword(k) == target for k in self.get(name))

    def add(self, name: str, keyword: str) -> bool:
        """
        Add one keyword to a bucket.

        Returns False when the keyword is blank, already present
        (case-insensitively) or the bucket is at its cap.
        """
        bucket = self.get(name)
        keyword = normalize_keyword(keyword)
        if not keyword or len(bucket) >= BUCKET_CAPS[name]:
            return False
        if self.contains(name, keyword):
            return False
        bucket.append(keyword)
        return True

    def extend(self, name: str, keywords: Iterable[str]) -> List[str]:
        """Add keywords in order; returns the ones actually added."""
        return [k for k in keywords if self.add(name, k)]

    @property
    def is_empty(self) -> bool:
        return all(not getattr(self, name) for name in BUCKET_NAMES)

    @property
    def total(self) -> int:
        return sum(len(getattr(self, name)) for name in BUCKET_NAMES)

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(getattr(self, name)) for name in BUCKET_NAMES}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaxonomyBucket":
        """Build a bucket, applying normalization and caps to the input."""
        bucket = cls()
        for name in BUCKET_NAMES:
            bucket.extend(name, data.get(name) or [])
        return bucket


@dataclass
class TaxonomyEntry:
    """Keyword vocabulary for one (category, subcategory)."""
    category: str
    subcategory: str
    bucket: TaxonomyBucket = field(default_factory=TaxonomyBucket)
    uk_terms: List[str] = field(default_factory=list)
    url_patterns: List[str] = field(default_factory=list)
    schema_hints: List[str] = field(default_factory=list)
    confidence: float = 1.0  # 0-1
    source: TaxonomySource = TaxonomySource.USER_INPUT
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def key(self) -> tuple:
        return (self.category, self.subcategory)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "subcategory": self.subcategory,
            "keywords": self.bucket.to_dict(),
            "uk_terms": self.uk_terms,
            "url_patterns": self.url_patterns,
            "schema_hints": self.schema_hints,
            "confidence": round(self.confidence, 3),
            "source": self.source.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaxonomyEntry":
        created_at = data.get("created_at")
        return cls(
            category=data["category"],
            subcategory=data["subcategory"],
            bucket=TaxonomyBucket.from_dict(data.get("keywords") or {}),
            uk_terms=list(data.get("uk_terms") or []),
            url_patterns=list(data.get("url_patterns") or []),
            schema_hints=list(data.get("schema_hints") or []),
            confidence=float(data.get("confidence", 1.0)),
            source=TaxonomySource(data.get("source", TaxonomySource.USER_INPUT.value)),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.utcnow(),
        )


@dataclass
class BusinessTypeExpansion:
    """What one expansion call did to the taxonomy."""
    is_new_type: bool = False
    is_new_subcategory: bool = False
    added_keywords: List[str] = field(default_factory=list)
    enhanced_entry: Optional[TaxonomyEntry] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_new_type": self.is_new_type,
            "is_new_subcategory": self.is_new_subcategory,
            "added_keywords": self.added_keywords,
            "enhanced_entry": self.enhanced_entry.to_dict() if self.enhanced_entry else None,
        }
