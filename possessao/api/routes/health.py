"""
Health check and system info routes
"""
from fastapi import APIRouter, Depends

from possessao.api.dependencies import get_catalog_dependency, get_entity_repository_dependency
from possessao.api.schemas.response import HealthResponse
from possessao.core.catalog import EntityCatalog
from possessao.infrastructure.database import EntityRepository
from possessao.utils.exceptions import CatalogError
from possessao.utils.config import settings
from possessao.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    catalog: EntityCatalog = Depends(get_catalog_dependency),
    repository: EntityRepository = Depends(get_entity_repository_dependency)
):
    """
    Health check endpoint
    Degraded when the catalog is empty or its store cannot be read;
    missing overlays only change the look
    """
    try:
        stored = repository.count()
    except CatalogError as e:
        logger.warning(f"Catalog store unavailable: {e.message}")
        stored = None

    return HealthResponse(
        status="healthy" if len(catalog) > 0 and stored is not None else "degraded",
        version=settings.APP_VERSION,
        catalog_size=len(catalog),
        stored_entities=stored,
        overlays_available=settings.overlay_path.is_dir(),
        remove_bg_configured=settings.remove_bg_available,
    )


@router.get("/info")
async def get_api_info():
    """Get API information"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "docs_url": "/docs",
        "openapi_url": "/openapi.json"
    }
