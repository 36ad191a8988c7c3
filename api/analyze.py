"""
API Endpoint for Business Analysis

FastAPI app that:
1. Receives a domain and its homepage HTML
2. Optionally confirms the business with Companies House
3. Runs the business classification & keyword generation pipeline
4. Returns the comprehensive analysis as JSON

The taxonomy store is process-wide: every analysis may grow it, and
later analyses see what earlier ones learned.
"""

import logging
import sys
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from bizintel.analysis import BusinessAnalysisOrchestrator
from bizintel.context import CompaniesHouseClient
from bizintel.database import get_db_context, init_db, save_taxonomy
from bizintel.taxonomy import TaxonomyStore
from bizintel.utils.config import get_settings

# Configure logging to stdout
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="Business Intelligence Analyzer",
    description="Business classification and SEO keyword generation from website content",
    version="2.0.0",
)


# ============================================================================
# TAXONOMY STORE
# ============================================================================

_store: Optional[TaxonomyStore] = None


def get_store() -> TaxonomyStore:
    """Process-wide taxonomy store (loaded on first use)."""
    global _store
    if _store is None:
        _store = TaxonomyStore.load_default(get_settings().TAXONOMY_DATA_PATH)
    return _store


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class BusinessAnalysisRequest(BaseModel):
    """Request to analyze one business website."""
    domain: str = Field(..., description="Business domain, e.g. smith-solicitors.co.uk")
    html: str = Field(default="", description="Raw homepage HTML")
    use_registry: bool = Field(
        default=True,
        description="Confirm the business with Companies House when an API key is configured",
    )
    persist: bool = Field(
        default=False,
        description="Save the taxonomy to the database after the analysis",
    )


class HealthResponse(BaseModel):
    status: str
    taxonomy_version: int
    taxonomy_entries: int
    registry_configured: bool


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health(store: TaxonomyStore = Depends(get_store)):
    return HealthResponse(
        status="ok",
        taxonomy_version=store.version,
        taxonomy_entries=store.entry_count,
        registry_configured=get_settings().registry_configured,
    )


@app.post("/api/business-analysis")
async def business_analysis(
    request: BusinessAnalysisRequest,
    store: TaxonomyStore = Depends(get_store),
):
    """Run the comprehensive business analysis for one website."""
    domain = request.domain.strip().lower()
    if not domain:
        raise HTTPException(status_code=400, detail="domain is required")

    settings = get_settings()
    client = None
    if request.use_registry and settings.registry_configured:
        client = CompaniesHouseClient(
            api_key=settings.COMPANIES_HOUSE_API_KEY,
            base_url=settings.COMPANIES_HOUSE_BASE_URL,
            timeout=settings.REGISTRY_TIMEOUT,
        )

    try:
        orchestrator = BusinessAnalysisOrchestrator(
            store,
            registry_lookup=client.lookup if client else None,
            settings=settings,
        )
        result = await orchestrator.analyze(domain, request.html)
    except Exception as e:
        logger.exception(f"Business analysis failed for {domain}: {e}")
        raise HTTPException(status_code=500, detail=f"Business analysis failed: {e}")
    finally:
        if client is not None:
            await client.close()

    if request.persist:
        try:
            init_db()
            with get_db_context() as db:
                save_taxonomy(store, db)
        except Exception as e:
            logger.error(f"Failed to persist taxonomy: {e}")

    return result.to_dict()


@app.get("/api/taxonomy")
async def taxonomy_summary(store: TaxonomyStore = Depends(get_store)):
    return store.summary()


@app.get("/api/taxonomy/{category}/{subcategory}")
async def taxonomy_entry(category: str, subcategory: str, store: TaxonomyStore = Depends(get_store)):
    entry = store.get(category, subcategory)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No taxonomy entry for {category} / {subcategory}")
    return entry.to_dict()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.analyze:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
