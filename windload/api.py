"""FastAPI application for windload.

Run with: uvicorn windload.api:app --reload
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from windload import __version__
from windload.engine import calculate
from windload.region_lookup import lookup_region
from windload.schemas import (
    SiteRequest,
    SiteResult,
    TerrainRequest,
    TerrainResponse,
    WindLoadRequest,
    WindLoadResult,
)
from windload.settings import get_settings
from windload.terrain import detect_terrain_category

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@router.post("/calculate", response_model=WindLoadResult)
def calculate_endpoint(request: WindLoadRequest):
    """
    Calculate the site wind load for a known region and terrain.

    Args:
        request: WindLoadRequest with region, building parameters and overrides

    Returns:
        WindLoadResult with every intermediate quantity

    Raises:
        HTTPException: 500 for unexpected errors
    """
    try:
        return calculate(request)
    except Exception:
        logger.exception("Calculation failed")
        raise HTTPException(
            status_code=500, detail="An unexpected error occurred during calculation"
        )


@router.post("/terrain", response_model=TerrainResponse)
def terrain_endpoint(request: TerrainRequest):
    """Detect the terrain category around a point."""
    terrain = detect_terrain_category(request.lat, request.lon)
    return TerrainResponse(lat=request.lat, lon=request.lon, terrain=terrain)


@router.post("/site", response_model=SiteResult)
def site_endpoint(request: SiteRequest):
    """
    Look up region and terrain for a location, then calculate.

    An explicit ``terrain_override`` wins over the detected category.
    """
    try:
        raw_region = lookup_region(request.lat, request.lon)
        terrain_auto = detect_terrain_category(request.lat, request.lon)
        calc_request = WindLoadRequest(
            **request.model_dump(exclude={"lat", "lon"}),
            region=raw_region,
            terrain=terrain_auto,
        )
        result = calculate(calc_request)
    except (OSError, ValueError) as e:
        logger.exception("Site calculation failed")
        raise HTTPException(status_code=500, detail=f"Site lookup error: {e}")

    return SiteResult(
        lat=request.lat,
        lon=request.lon,
        raw_region=raw_region,
        terrain_auto=terrain_auto,
        terrain_used=request.terrain_override or terrain_auto,
        result=result,
    )


app = FastAPI(
    title="Windload API",
    description="Site wind load calculator (AS/NZS 1170.2)",
    version=__version__,
)

# CORS - configurable via WINDLOAD_CORS_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Windload API",
        "version": __version__,
        "endpoints": ["/api/calculate", "/api/site", "/api/terrain", "/api/health"],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
