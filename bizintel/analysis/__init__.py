"""
Business Analysis Package

Runs the complete pipeline: signals -> activities -> confirmed type ->
taxonomy expansion -> keywords -> summary.

Usage:
    from bizintel.analysis import analyze_business

    result = await analyze_business("smith-solicitors.co.uk", html)
    print(result.business_analysis.confirmed_type.category)
    print(result.summary.keyword_quality.value)
"""

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
from .orchestrator import (
    BusinessAnalysisOrchestrator,
    RegistryLookup,
    analyze_business,
)

__all__ = [
    "AnalysisInvariantError",
    "AnalysisMetadata",
    "AnalysisSummary",
    "BusinessConfidence",
    "ComprehensiveBusinessAnalysis",
    "DataQuality",
    "IntelligentAnalysis",
    "KeywordQuality",
    "BusinessAnalysisOrchestrator",
    "RegistryLookup",
    "analyze_business",
]
