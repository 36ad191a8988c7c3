"""
Content Signal Extraction

Turns one page of raw HTML into structured ExtractedSignals.

Everything here is regex-based and pure: the same HTML always yields the
same signals, and malformed or empty HTML yields empty signals rather than
an error.

Signals extracted:
1. Company name (<title>, falling back to the first <h1>)
2. Navigation labels (<nav> blocks and "menu" lists)
3. Headlines (<h1>-<h3>)
4. Service-like sentences and service phrases
5. About text
6. Industry terms (nominal suffixes)
7. Business model (B2B / B2C / B2B2C / marketplace)
8. Target market phrases
9. UK location indicators (gazetteer + postcode areas)
"""

import html as html_lib
import logging
import re
from typing import Iterable, List, Optional, Tuple

from .models import BusinessModel, ExtractedSignals

logger = logging.getLogger(__name__)


# =============================================================================
# LEXICONS
# =============================================================================

SERVICE_SENTENCE_MARKERS = ["we ", "our ", "service", "offer", "provide"]

# Navigation labels made only of these words name a page, not a service
GENERIC_NAV_WORDS = {
    "service", "services", "team", "story", "people", "work", "approach",
    "history", "clients", "company", "values", "mission", "news", "blog",
}

SERVICE_PHRASE_PATTERN = re.compile(
    r"\b(?:we offer|our services include|we provide|speciali[sz]ing in)\s+([^.!?]{10,120})"
)

ABOUT_PATTERNS = [
    re.compile(r"about us[^.]{50,500}\."),
    re.compile(r"who we are[^.]{50,500}\."),
    re.compile(r"our company[^.]{50,500}\."),
]

INDUSTRY_TERM_PATTERN = re.compile(r"(?:ing|tion|ment|ance|ence|ology|ics)$")
MAX_INDUSTRY_TERMS = 20

B2B_INDICATORS = ["enterprise", "business", "corporate", "commercial", "professional services"]
B2C_INDICATORS = ["customer", "client", "individual", "personal", "family", "home"]
MARKETPLACE_INDICATORS = ["marketplace", "sellers", "vendors", "buy and sell", "list your"]
BUSINESS_MODEL_RATIO = 1.5

TARGET_MARKET_PATTERN = re.compile(r"\b(?:for|serving|helping)\s+([^.,;!?]{4,60})")
MAX_TARGET_MARKETS = 10

UK_CITIES = [
    "london", "manchester", "birmingham", "glasgow", "liverpool",
    "bristol", "sheffield", "edinburgh", "leeds", "cardiff",
]
UK_REGIONS = ["north london", "south london", "west midlands", "greater manchester"]

# Outward code + inward code, e.g. "M1 1AE", "SW1A 1AA"
UK_POSTCODE_PATTERN = re.compile(r"\b([a-z]{1,2})\d[a-z\d]?\s?\d[a-z]{2}\b")


# =============================================================================
# TEXT HELPERS
# =============================================================================


def _unique(items: Iterable[str]) -> Tuple[str, ...]:
    """Order-preserving de-duplication."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return tuple(result)


def _clean_fragment(fragment: str) -> str:
    """Strip tags and entities from an HTML fragment."""
    text = re.sub(r"<[^>]+>", " ", fragment)
    text = html_lib.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def extract_text(html: str) -> str:
    """Extract readable, lower-cased text from HTML."""
    # Remove script and style elements
    html = re.sub(r"<script[^>]*>.*?</script>", "", html, flags=re.DOTALL | re.IGNORECASE)
    html = re.sub(r"<style[^>]*>.*?</style>", "", html, flags=re.DOTALL | re.IGNORECASE)
    html = re.sub(r"<noscript[^>]*>.*?</noscript>", "", html, flags=re.DOTALL | re.IGNORECASE)

    return _clean_fragment(html).lower()


# =============================================================================
# STRUCTURAL EXTRACTORS (work on HTML)
# =============================================================================


def extract_company_name(html: str) -> str:
    """
    Company name from the <title> tag.

    "Smith & Co | Family Law - Manchester" -> "Smith & Co".
    Falls back to the first <h1> when there is no usable title.
    """
    match = re.search(r"<title[^>]*>(.*?)</title>", html, re.IGNORECASE | re.DOTALL)
    if match:
        title = _clean_fragment(match.group(1))
        name = re.split(r"\s*\|\s*", title)[0]
        name = re.split(r"\s+-\s+", name)[0].strip()
        if name:
            return name

    match = re.search(r"<h1[^>]*>(.*?)</h1>", html, re.IGNORECASE | re.DOTALL)
    if match:
        return _clean_fragment(match.group(1))

    return ""


def extract_navigation(html: str) -> Tuple[str, ...]:
    """Anchor labels inside <nav> blocks and menu lists."""
    blocks = re.findall(r"<nav[^>]*>(.*?)</nav>", html, re.IGNORECASE | re.DOTALL)
    blocks += re.findall(
        r"<ul[^>]*class=[\"'][^\"']*menu[^\"']*[\"'][^>]*>(.*?)</ul>",
        html,
        re.IGNORECASE | re.DOTALL,
    )

    items = []
    for block in blocks:
        for link in re.findall(r"<a[^>]*>(.*?)</a>", block, re.IGNORECASE | re.DOTALL):
            label = _clean_fragment(link)
            if 1 < len(label) < 50:
                items.append(label)

    return _unique(items)


def extract_headlines(html: str) -> Tuple[str, ...]:
    """Text of <h1>, <h2> and <h3> elements."""
    headlines = []
    for _, inner in re.findall(r"<h([1-3])[^>]*>(.*?)</h\1>", html, re.IGNORECASE | re.DOTALL):
        text = _clean_fragment(inner)
        if len(text) > 2:
            headlines.append(text)
    return _unique(headlines)


# =============================================================================
# TEXTUAL EXTRACTORS (work on lower-cased plain text)
# =============================================================================


def extract_service_descriptions(text: str) -> Tuple[str, ...]:
    """Sentences that read like a service offer."""
    descriptions = []
    for sentence in re.split(r"[.!?]+", text):
        sentence = sentence.strip()
        if not 20 < len(sentence) < 200:
            continue
        if any(marker in sentence for marker in SERVICE_SENTENCE_MARKERS):
            descriptions.append(sentence)
    return _unique(descriptions)


def extract_about_text(text: str) -> str:
    for pattern in ABOUT_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return ""


def extract_services(text: str, navigation_items: Iterable[str]) -> Tuple[str, ...]:
    """
    Service names from navigation labels and offer phrases.

    Navigation labels mentioning "service" or "our ..." count as services
    ("Our Conveyancing" -> "conveyancing"), except generic labels such as
    "Our Services" or "Our Team". Phrases after "we offer",
    "we provide" and similar are cut at the first comma.
    """
    services = []

    for item in navigation_items:
        lowered = item.lower()
        if "service" in lowered or "our " in lowered:
            name = lowered.replace("our ", "").strip()
            if name and not set(name.split()) <= GENERIC_NAV_WORDS:
                services.append(name)

    for match in SERVICE_PHRASE_PATTERN.finditer(text):
        phrase = re.split(r"[,;:]", match.group(1))[0].strip()
        if 5 < len(phrase) < 50:
            services.append(phrase)

    return _unique(services)


def extract_industry_terms(text: str) -> Tuple[str, ...]:
    terms = []
    for word in re.findall(r"[a-z]+", text):
        if 6 <= len(word) <= 20 and INDUSTRY_TERM_PATTERN.search(word):
            terms.append(word)
    return _unique(terms)[:MAX_INDUSTRY_TERMS]


def detect_business_model(text: str) -> BusinessModel:
    """
    Classify the business model from indicator words.

    One side must outweigh the other by 1.5x to commit; otherwise the
    business is treated as mixed (B2B2C).
    """
    marketplace = sum(1 for term in MARKETPLACE_INDICATORS if term in text)
    if marketplace >= 2:
        return BusinessModel.MARKETPLACE

    b2b = sum(1 for term in B2B_INDICATORS if term in text)
    b2c = sum(1 for term in B2C_INDICATORS if term in text)

    if b2b > b2c * BUSINESS_MODEL_RATIO:
        return BusinessModel.B2B
    if b2c > b2b * BUSINESS_MODEL_RATIO:
        return BusinessModel.B2C
    return BusinessModel.B2B2C


def extract_target_market(text: str) -> Tuple[str, ...]:
    markets = []
    for match in TARGET_MARKET_PATTERN.finditer(text):
        phrase = match.group(1).strip()
        if 3 < len(phrase) < 30:
            markets.append(phrase)
    return _unique(markets)[:MAX_TARGET_MARKETS]


def extract_locations(text: str) -> Tuple[str, ...]:
    """UK cities and regions mentioned on the page, then postcode areas."""
    locations = []

    for place in UK_CITIES + UK_REGIONS:
        if re.search(r"\b" + re.escape(place) + r"\b", text):
            locations.append(place)

    for area in UK_POSTCODE_PATTERN.findall(text):
        locations.append(area.upper())

    return _unique(locations)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def extract_signals(html: Optional[str]) -> ExtractedSignals:
    """
    Extract all business signals from raw HTML.

    Args:
        html: Raw page HTML. None or empty input gives empty signals.

    Returns:
        ExtractedSignals
    """
    if not html or not html.strip():
        return ExtractedSignals()

    text = extract_text(html)
    navigation = extract_navigation(html)

    signals = ExtractedSignals(
        company_name=extract_company_name(html),
        navigation_items=navigation,
        headlines=extract_headlines(html),
        service_descriptions=extract_service_descriptions(text),
        about_text=extract_about_text(text),
        services=extract_services(text, navigation),
        industry_terms=extract_industry_terms(text),
        business_model=detect_business_model(text),
        target_market=extract_target_market(text),
        location_indicators=extract_locations(text),
        content_text=text,
    )

    logger.debug(
        f"Extracted signals: {len(signals.navigation_items)} nav items, "
        f"{len(signals.services)} services, {len(signals.location_indicators)} locations"
    )

    return signals
