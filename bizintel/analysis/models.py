"""
Comprehensive Analysis Data Models

The full result of one business analysis run: what the business is,
how the taxonomy changed, which keywords were generated, and a summary
with recommendations for the site owner.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..context.models import (
    BusinessActivity,
    ConfirmedBusinessType,
    ExtractedSignals,
    RegistryData,
)
from ..keywords.models import GeneratedKeywordSet
from ..taxonomy.models import BusinessTypeExpansion


class AnalysisInvariantError(RuntimeError):
    """The pipeline produced a result that breaks its own guarantees."""
    pass


class BusinessConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class KeywordQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass
class IntelligentAnalysis:
    """What the business is, and the evidence behind it."""
    domain: str
    signals: ExtractedSignals
    activities: List[BusinessActivity]
    confirmed_type: ConfirmedBusinessType
    registry_data: Optional[RegistryData] = None
    recommended_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "signals": self.signals.to_dict(),
            "activities": [a.to_dict() for a in self.activities],
            "registry_data": self.registry_data.to_dict() if self.registry_data else None,
            "confirmed_type": self.confirmed_type.to_dict(),
            "recommended_keywords": self.recommended_keywords,
        }


@dataclass
class AnalysisSummary:
    business_confidence: BusinessConfidence = BusinessConfidence.LOW
    keyword_quality: KeywordQuality = KeywordQuality.POOR
    recommended_actions: List[str] = field(default_factory=list)
    coverage_gaps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "business_confidence": self.business_confidence.value,
            "keyword_quality": self.keyword_quality.value,
            "recommended_actions": self.recommended_actions,
            "coverage_gaps": self.coverage_gaps,
        }


@dataclass
class DataQuality:
    content_richness: float = 0.0   # 0-1
    business_clarity: float = 0.0   # 0-1
    keyword_relevance: float = 0.0  # 0-1

    def to_dict(self) -> Dict[str, float]:
        return {
            "content_richness": round(self.content_richness, 3),
            "business_clarity": round(self.business_clarity, 3),
            "keyword_relevance": round(self.keyword_relevance, 3),
        }


@dataclass
class AnalysisMetadata:
    analysis_version: str
    processing_time_ms: int = 0
    taxonomy_version: int = 0
    data_quality: DataQuality = field(default_factory=DataQuality)
    processed_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed_at": self.processed_at.isoformat(),
            "analysis_version": self.analysis_version,
            "processing_time_ms": self.processing_time_ms,
            "taxonomy_version": self.taxonomy_version,
            "data_quality": self.data_quality.to_dict(),
        }


@dataclass
class ComprehensiveBusinessAnalysis:
    """Everything one analysis run produced."""
    business_analysis: IntelligentAnalysis
    expansion: BusinessTypeExpansion
    keywords: GeneratedKeywordSet
    summary: AnalysisSummary
    metadata: AnalysisMetadata

    @property
    def category_breakdown(self) -> Dict[str, int]:
        return self.keywords.category_breakdown()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "business_analysis": self.business_analysis.to_dict(),
            "business_type_expansion": self.expansion.to_dict(),
            "keywords": self.keywords.to_dict(),
            "category_breakdown": self.category_breakdown,
            "summary": self.summary.to_dict(),
            "metadata": self.metadata.to_dict(),
        }
