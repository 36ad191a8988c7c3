"""
Business Context Package

Understands what a business does from its website:
- Signal extraction from raw HTML
- Activity classification against category patterns
- Business type resolution (registry -> content -> fallback)
- Optional Companies House confirmation

Usage:
    from bizintel.context import extract_signals, BusinessActivityClassifier, BusinessTypeResolver

    signals = extract_signals(html)
    activities = BusinessActivityClassifier(store).classify(signals)
    confirmed = BusinessTypeResolver(store).resolve(signals, activities)
"""

# Core models (imported first: the taxonomy package depends on them)
from .models import (
    BusinessModel,
    ConfirmationConfidence,
    ConfirmationSource,
    ExtractedSignals,
    BusinessActivity,
    RegistryData,
    ConfirmedBusinessType,
    RegistryBusinessType,
    ContentBusinessType,
)

from .content_extractor import extract_signals, extract_text
from .activity_classifier import (
    ActivityPattern,
    BusinessActivityClassifier,
    SEED_PATTERNS,
    classify_activities,
)
from .business_resolver import (
    BusinessTypeResolver,
    SUBCATEGORY_RULES,
    FALLBACK_CATEGORY,
    FALLBACK_SUBCATEGORY,
)
from .registry import (
    CompaniesHouseClient,
    RegistryError,
    SIC_CODE_MAP,
    clean_company_name,
    map_sic_code,
    name_similarity,
)

__all__ = [
    # Models
    "BusinessModel",
    "ConfirmationConfidence",
    "ConfirmationSource",
    "ExtractedSignals",
    "BusinessActivity",
    "RegistryData",
    "ConfirmedBusinessType",
    "RegistryBusinessType",
    "ContentBusinessType",
    # Extraction
    "extract_signals",
    "extract_text",
    # Classification
    "ActivityPattern",
    "BusinessActivityClassifier",
    "SEED_PATTERNS",
    "classify_activities",
    # Resolution
    "BusinessTypeResolver",
    "SUBCATEGORY_RULES",
    "FALLBACK_CATEGORY",
    "FALLBACK_SUBCATEGORY",
    # Registry
    "CompaniesHouseClient",
    "RegistryError",
    "SIC_CODE_MAP",
    "clean_company_name",
    "map_sic_code",
    "name_similarity",
]
