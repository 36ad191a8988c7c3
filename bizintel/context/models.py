"""
Business Context Data Models

Defines the types shared by the business understanding layer:
- Signals extracted from raw website content
- Scored business activities
- Company registry records
- The single confirmed business type produced per analysis
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# =============================================================================
# ENUMS
# =============================================================================


class BusinessModel(str, Enum):
    """Who the business sells to, inferred from lexical indicators."""
    B2B = "B2B"
    B2C = "B2C"
    B2B2C = "B2B2C"  # Mixed or undecided
    MARKETPLACE = "marketplace"


class ConfirmationConfidence(str, Enum):
    """Confidence in the confirmed business type."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ConfirmationSource(str, Enum):
    """Where the confirmed business type came from."""
    EXISTING_DATABASE = "existing_database"
    REGISTRY = "registry"                  # Company registry SIC code
    CONTENT_ANALYSIS = "content_analysis"  # Website content heuristics
    HYBRID = "hybrid"


# =============================================================================
# EXTRACTED SIGNALS
# =============================================================================


@dataclass(frozen=True)
class ExtractedSignals:
    """
    Structured signals extracted from one page of raw HTML.

    Collections are order-preserving, de-duplicated tuples so that the
    same HTML always produces the same signals.
    """
    company_name: str = ""
    navigation_items: Tuple[str, ...] = ()
    headlines: Tuple[str, ...] = ()
    service_descriptions: Tuple[str, ...] = ()  # 20-200 chars, service-like
    about_text: str = ""
    services: Tuple[str, ...] = ()
    industry_terms: Tuple[str, ...] = ()
    business_model: BusinessModel = BusinessModel.B2B2C
    target_market: Tuple[str, ...] = ()
    location_indicators: Tuple[str, ...] = ()
    content_text: str = ""  # Lower-cased plain text of the page

    @property
    def places(self) -> Tuple[str, ...]:
        """Location indicators that name a place (postcode areas are stored upper-cased)."""
        return tuple(loc for loc in self.location_indicators if not loc.isupper())

    @property
    def is_empty(self) -> bool:
        return not (
            self.company_name
            or self.navigation_items
            or self.headlines
            or self.services
            or self.content_text
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company_name": self.company_name,
            "navigation_items": list(self.navigation_items),
            "headlines": list(self.headlines),
            "service_descriptions": list(self.service_descriptions),
            "about_text": self.about_text,
            "services": list(self.services),
            "industry_terms": list(self.industry_terms),
            "business_model": self.business_model.value,
            "target_market": list(self.target_market),
            "location_indicators": list(self.location_indicators),
        }


# =============================================================================
# ACTIVITIES
# =============================================================================


@dataclass
class BusinessActivity:
    """A candidate business category scored against the page."""
    activity: str
    confidence: float  # 0-1
    evidence: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)  # Matched seed keywords

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activity": self.activity,
            "confidence": round(self.confidence, 3),
            "evidence": self.evidence,
            "keywords": self.keywords,
        }


# =============================================================================
# REGISTRY
# =============================================================================


@dataclass
class RegistryData:
    """Company record from an external business registry."""
    sic_codes: List[str] = field(default_factory=list)
    company_name: str = ""
    company_type: str = ""
    status: str = ""
    description: str = ""
    company_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sic_codes": self.sic_codes,
            "company_name": self.company_name,
            "company_type": self.company_type,
            "status": self.status,
            "description": self.description,
            "company_number": self.company_number,
        }


# =============================================================================
# CONFIRMED BUSINESS TYPE
# =============================================================================


# Resolved when nothing on the page or in the registry identifies the business
FALLBACK_CATEGORY = "Business Services"
FALLBACK_SUBCATEGORY = "General"


@dataclass
class ConfirmedBusinessType:
    """
    The one business type an analysis run settles on.

    Concrete variants carry the fields specific to their source;
    use ``source`` to tell them apart.
    """
    category: str
    subcategory: str
    confidence: ConfirmationConfidence
    source: ConfirmationSource

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "subcategory": self.subcategory,
            "confidence": self.confidence.value,
            "source": self.source.value,
        }


@dataclass
class RegistryBusinessType(ConfirmedBusinessType):
    """Business type confirmed by a registry SIC code."""
    sic_code: str = ""
    registry_company_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["sic_code"] = self.sic_code
        data["registry_company_name"] = self.registry_company_name
        return data


@dataclass
class ContentBusinessType(ConfirmedBusinessType):
    """Business type inferred from website content."""
    top_activity: Optional[str] = None
    activity_confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["top_activity"] = self.top_activity
        data["activity_confidence"] = round(self.activity_confidence, 3)
        return data
