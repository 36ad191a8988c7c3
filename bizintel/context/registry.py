"""
Company Registry Lookup

Optional confirmation of a business type from the UK Companies House
register. A company's first SIC code maps to a (category, subcategory)
pair through SIC_CODE_MAP.

API: https://developer.company-information.service.gov.uk
Auth: HTTP basic, API key as username, empty password
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

import httpx

from .models import RegistryData

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Custom exception for registry API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


# =============================================================================
# SIC CODE MAPPING
# =============================================================================

SIC_CODE_MAP: Dict[str, Tuple[str, str]] = {
    # Legal
    "69101": ("Legal Services", "Family Law"),
    "69102": ("Legal Services", "General Practice"),
    "69109": ("Legal Services", "Commercial Law"),

    # Fitness & sports
    "93110": ("Fitness & Sports", "Gym & Fitness"),
    "93199": ("Fitness & Sports", "Sports Clubs"),

    # Entertainment
    "93290": ("Entertainment & Recreation", "Entertainment Centers"),
    "93211": ("Entertainment & Recreation", "Adventure Parks"),

    # Food & hospitality
    "56101": ("Food & Hospitality", "Restaurant"),
    "56102": ("Food & Hospitality", "Cafe"),
    "55100": ("Food & Hospitality", "Hotel"),

    # Architecture
    "71111": ("Architecture & Design", "Residential Architecture"),
    "71112": ("Architecture & Design", "Commercial Architecture"),

    # Marketing
    "73110": ("Marketing & Digital", "Digital Marketing"),
    "73120": ("Marketing & Digital", "Advertising"),
    "62012": ("Marketing & Digital", "Web Design"),

    # Financial
    "69201": ("Financial Services", "Accountancy"),
    "66110": ("Financial Services", "Financial Planning"),

    # Healthcare
    "86210": ("Healthcare & Medical", "General Practice"),
    "86230": ("Healthcare & Medical", "Dental"),
}

HIGH_MATCH_SIMILARITY = 0.8
MIN_MATCH_SIMILARITY = 0.6


def map_sic_code(sic_code: str) -> Optional[Tuple[str, str]]:
    return SIC_CODE_MAP.get(sic_code.strip())


def clean_company_name(name: str) -> str:
    """
    Turn a domain into a searchable company name.

    "www.smith-solicitors.co.uk" -> "smith solicitors"
    """
    name = name.lower().strip()
    name = re.sub(r"\.(co\.uk|com|uk|org|net)$", "", name)
    name = re.sub(r"^www\.", "", name)
    name = re.sub(r"[-.]", " ", name)
    return " ".join(name.split())


def name_similarity(a: str, b: str) -> float:
    """
    Rough similarity between two company names.

    1.0 for an exact match, 0.8 when one contains the other, otherwise
    the share of distinct characters the two names have in common.
    """
    a = " ".join(a.lower().split())
    b = " ".join(b.lower().split())
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return HIGH_MATCH_SIMILARITY

    chars_a = set(a.replace(" ", ""))
    chars_b = set(b.replace(" ", ""))
    return len(chars_a & chars_b) / max(len(chars_a), len(chars_b))


def _strip_company_suffix(name: str) -> str:
    return re.sub(r"\b(ltd|limited|llp|plc)\.?$", "", name.lower()).strip()


class CompaniesHouseClient:
    """
    Async client for the Companies House public data API.

    Usage:
        client = CompaniesHouseClient(api_key="your_api_key")

        data = await client.lookup("smith-solicitors.co.uk")
        # data = RegistryData(sic_codes=["69101"], company_name="SMITH SOLICITORS LTD", ...)

        await client.close()
    """

    BASE_URL = "https://api.company-information.service.gov.uk"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Companies House client.

        Args:
            api_key: Companies House REST API key
            base_url: Override for the API base URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url or self.BASE_URL,
            auth=(api_key, ""),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._closed = False

    async def search_companies(self, query: str, items_per_page: int = 5) -> Dict[str, Any]:
        return await self._get(
            "/search/companies",
            params={"q": query, "items_per_page": items_per_page},
        )

    async def get_company(self, company_number: str) -> Dict[str, Any]:
        return await self._get(f"/company/{company_number}")

    async def lookup(self, company_name_guess: str) -> Optional[RegistryData]:
        """
        Find the registered company behind a name or domain.

        Searches by the cleaned name, picks the best match and fetches
        its profile. Matches with similarity <= 0.6 are rejected.

        Returns:
            RegistryData, or None when nothing credible matched
        """
        query = clean_company_name(company_name_guess)
        if not query:
            return None

        results = await self.search_companies(query)
        items = results.get("items") or []
        if not items:
            logger.info(f"Companies House: no results for '{query}'")
            return None

        best, best_score = None, 0.0
        for item in items:
            score = name_similarity(query, _strip_company_suffix(item.get("title", "")))
            if score > best_score:
                best, best_score = item, score

        if best is None or best_score <= MIN_MATCH_SIMILARITY:
            logger.info(f"Companies House: no credible match for '{query}' (best {best_score:.2f})")
            return None

        company_number = best.get("company_number")
        profile = await self.get_company(company_number) if company_number else {}

        match_quality = "high" if best_score > HIGH_MATCH_SIMILARITY else "medium"
        logger.info(
            f"Companies House: matched '{query}' to {best.get('title')} "
            f"({company_number}, {match_quality} match)"
        )

        return RegistryData(
            sic_codes=list(profile.get("sic_codes") or []),
            company_name=profile.get("company_name") or best.get("title", ""),
            company_type=profile.get("type") or best.get("company_type", ""),
            status=profile.get("company_status") or best.get("company_status", ""),
            description=best.get("description", ""),
            company_number=company_number,
        )

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._closed:
            raise RegistryError("Client has been closed")

        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise RegistryError(f"Companies House request failed: {e}") from e

        if response.status_code == 404:
            return {}
        if response.status_code >= 400:
            raise RegistryError(
                f"Companies House error {response.status_code}",
                status_code=response.status_code,
                response={"body": response.text[:500]},
            )
        return response.json()

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
