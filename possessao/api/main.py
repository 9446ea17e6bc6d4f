"""
FastAPI Main Application
Possessão entity assessment and photo compositing API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from possessao.api.routes import health, entities, assess
from possessao.api.middleware.logging import LoggingMiddleware
from possessao.api.middleware.error_handler import (
    possessao_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    generic_exception_handler
)
from possessao.core.catalog import get_catalog
from possessao.infrastructure.database import get_entity_repository
from possessao.utils.config import settings
from possessao.utils.logger import get_logger
from possessao.utils.exceptions import PossessaoException, CatalogError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager
    Handles startup and shutdown events
    """
    logger.info("=" * 70)
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("=" * 70)

    # Keep the catalog store seeded; scoring always uses the in-memory seed list
    try:
        repository = get_entity_repository()
        repository.seed_if_empty()
        repository.replace_with_sample_if_below(settings.CATALOG_MIN_COUNT)
        logger.info(f"✓ Catalog store ready ({repository.count()} records)")
    except CatalogError as e:
        logger.error(f"✗ Catalog store unavailable: {e.message}")
        if settings.is_production:
            raise

    catalog = get_catalog()
    logger.info(f"✓ Catalog loaded: {len(catalog)} entities")

    if not settings.overlay_path.is_dir():
        logger.warning(f"Overlay directory not found ({settings.overlay_path}), horror tone will be used")
    if not settings.remove_bg_available:
        logger.info("Remote background removal disabled, using local silhouette extraction")

    logger.info("=" * 70)
    logger.info(f"API ready at http://{settings.HOST}:{settings.PORT}")
    logger.info(f"Docs available at http://{settings.HOST}:{settings.PORT}/docs")
    logger.info("=" * 70)

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
# Possessão API

Answer a short set of yes/no questions and find out which folkloric entity
matches you best, then get your photo composited with the entity's artwork.

## API Endpoints
- `GET /api/v1/questions`: Draw a random set of questions
- `POST /api/v1/assess`: Score answers and choose an entity
- `POST /api/v1/compose`: Composite a photo with an entity overlay
- `GET /api/v1/entities`: List the catalog
- `GET /api/v1/health`: Health check

## Important Notice
⚠️ Entertainment only. Results carry no medical, psychological or religious meaning.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    debug=settings.DEBUG
)

# CORS Middleware - Allow all origins in development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.CORS_ORIGINS,
    allow_credentials=False if settings.is_development else settings.CORS_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)

# Exception Handlers
app.add_exception_handler(PossessaoException, possessao_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include Routers
app.include_router(health.router, prefix=settings.API_V1_PREFIX)
app.include_router(entities.router, prefix=settings.API_V1_PREFIX)
app.include_router(assess.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """API info"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": f"{settings.API_V1_PREFIX}/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "possessao.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        workers=settings.WORKERS
    )
