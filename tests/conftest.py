"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import pytest

from bizintel.context.content_extractor import extract_signals
from bizintel.context.models import BusinessActivity, BusinessModel, ExtractedSignals
from bizintel.taxonomy.store import TaxonomyStore
from bizintel.utils.config import Settings


# ============================================================================
# Sample Pages
# ============================================================================

FAMILY_LAW_HTML = """
<html>
<head>
  <title>Smith &amp; Co Solicitors | Family Law Specialists</title>
  <script>var tracking = "divorce divorce divorce";</script>
</head>
<body>
  <nav>
    <ul>
      <li><a href="/family-law">Family Law</a></li>
      <li><a href="/commercial-law">Commercial Law</a></li>
    </ul>
  </nav>
  <h1>Family Law Solicitors in Manchester</h1>
  <h2>Divorce and separation advice</h2>
  <p>We offer family law and divorce advice for individuals.</p>
  <p>Divorce can be difficult. Our team guides you through divorce, divorce finances and divorce mediation.</p>
  <p>Visit us at 12 King Street, Manchester M1 1AE.</p>
</body>
</html>
"""

GYM_HTML = """
<html>
<head><title>Iron Works Gym - Fitness Centre</title></head>
<body>
  <nav>
    <a href="/membership">Membership</a>
    <a href="/classes">Classes</a>
    <a href="/personal-training">Personal Training</a>
    <a href="/our-services">Our Services</a>
  </nav>
  <h1>Your local gym in Leeds</h1>
  <h2>Fitness classes for every level</h2>
  <p>We provide personal training, fitness classes and gym membership.</p>
  <p>Our gym is open to every customer and family member.</p>
</body>
</html>
"""


@pytest.fixture
def family_law_html() -> str:
    return FAMILY_LAW_HTML


@pytest.fixture
def gym_html() -> str:
    return GYM_HTML


@pytest.fixture
def family_law_signals() -> ExtractedSignals:
    return extract_signals(FAMILY_LAW_HTML)


# ============================================================================
# Taxonomy
# ============================================================================

@pytest.fixture
def store() -> TaxonomyStore:
    """Fresh store loaded from the bundled dataset (tests may mutate it)."""
    return TaxonomyStore.load_default()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        COMPANIES_HOUSE_API_KEY=None,
        REGISTRY_TIMEOUT=0.05,
        TAXONOMY_DATA_PATH=None,
        DATABASE_URL=None,
    )


# ============================================================================
# Novel Business Type
# ============================================================================

@pytest.fixture
def grooming_signals() -> ExtractedSignals:
    """Signals for a business type the bundled taxonomy does not know."""
    return ExtractedSignals(
        company_name="Happy Paws",
        navigation_items=("Dog Grooming", "Cat Grooming", "Prices", "Contact"),
        headlines=("Pet grooming in Bristol",),
        service_descriptions=(
            "we provide gentle dog grooming for nervous pets",
            "our cat grooming service is calm and quiet",
            "we offer nail clipping, ear cleaning and more",
        ),
        services=("dog grooming", "cat grooming", "nail clipping"),
        industry_terms=(),
        business_model=BusinessModel.B2C,
        target_market=("pet owners",),
        location_indicators=("bristol",),
        content_text="we provide gentle dog grooming for nervous pets in bristol ltd",
    )


@pytest.fixture
def grooming_activities():
    return [
        BusinessActivity(
            activity="Pet Grooming",
            confidence=0.9,
            evidence=['Found "grooming" 3 times in content'],
            keywords=["grooming", "pet spa"],
        )
    ]
