#!/usr/bin/env python3
"""
Business Analysis Runner

Runs the business classification & keyword generation pipeline on a
saved HTML page and prints the result.

Usage:
    # Analyze a saved homepage:
    python scripts/analyze_html.py smith-solicitors.co.uk homepage.html

    # With Companies House confirmation (needs COMPANIES_HOUSE_API_KEY):
    python scripts/analyze_html.py smith-solicitors.co.uk homepage.html --registry

    # Full JSON output, and save the grown taxonomy to the database:
    python scripts/analyze_html.py smith-solicitors.co.uk homepage.html --json --persist
"""

import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run_analysis(
    domain: str,
    html_path: str,
    use_registry: bool = False,
    persist: bool = False,
    as_json: bool = False,
) -> int:
    """Run the pipeline on one HTML file."""

    load_dotenv()

    from bizintel.analysis import BusinessAnalysisOrchestrator
    from bizintel.context import CompaniesHouseClient
    from bizintel.database import check_db_connection, get_db_context, init_db, save_taxonomy
    from bizintel.taxonomy import TaxonomyStore
    from bizintel.utils.config import get_settings

    settings = get_settings()

    path = Path(html_path)
    if not path.exists():
        print(f"ERROR: HTML file not found: {html_path}")
        return 1
    html = path.read_text(encoding="utf-8", errors="replace")

    client = None
    if use_registry:
        if settings.registry_configured:
            client = CompaniesHouseClient(
                api_key=settings.COMPANIES_HOUSE_API_KEY,
                base_url=settings.COMPANIES_HOUSE_BASE_URL,
                timeout=settings.REGISTRY_TIMEOUT,
            )
        else:
            print("WARNING: COMPANIES_HOUSE_API_KEY not set, skipping registry lookup")

    store = TaxonomyStore.load_default(settings.TAXONOMY_DATA_PATH)
    try:
        orchestrator = BusinessAnalysisOrchestrator(
            store,
            registry_lookup=client.lookup if client else None,
            settings=settings,
        )
        result = await orchestrator.analyze(domain, html)
    finally:
        if client is not None:
            await client.close()

    if persist:
        if not check_db_connection():
            print("ERROR: Database not reachable, taxonomy not saved")
            return 1
        init_db()
        with get_db_context() as db:
            saved = save_taxonomy(store, db)
        logger.info(f"Saved {saved} taxonomy entries (version {store.version})")

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    confirmed = result.business_analysis.confirmed_type
    print(f"\n{'='*70}")
    print("BUSINESS ANALYSIS")
    print(f"{'='*70}")
    print(f"Domain:       {domain}")
    print(f"Business:     {confirmed.category} / {confirmed.subcategory}")
    print(f"Confidence:   {confirmed.confidence.value} ({confirmed.source.value})")
    print(f"Keywords:     {result.keywords.total_generated} ({result.keywords.generation_method})")
    print(f"Quality:      {result.summary.keyword_quality.value}")
    print(f"{'='*70}")

    for category, count in result.category_breakdown.items():
        print(f"  {category:<15} {count}")

    if result.summary.recommended_actions:
        print("\nRecommended actions:")
        for action in result.summary.recommended_actions:
            print(f"  - {action}")

    if result.summary.coverage_gaps:
        print("\nCoverage gaps:")
        for gap in result.summary.coverage_gaps:
            print(f"  - {gap}")

    return 0


def main():
    parser = argparse.ArgumentParser(description="Analyze a business website from saved HTML")
    parser.add_argument("domain", help="Business domain, e.g. smith-solicitors.co.uk")
    parser.add_argument("html_file", help="Path to the saved homepage HTML")
    parser.add_argument("--registry", action="store_true", help="Confirm with Companies House")
    parser.add_argument("--persist", action="store_true", help="Save the taxonomy to the database")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args()

    sys.exit(asyncio.run(run_analysis(
        domain=args.domain,
        html_path=args.html_file,
        use_registry=args.registry,
        persist=args.persist,
        as_json=args.json,
    )))


if __name__ == "__main__":
    main()
