"""
FastAPI dependencies
"""
from functools import lru_cache

from possessao.core.catalog import EntityCatalog, get_catalog
from possessao.core.scoring_engine import ScoringEngine
from possessao.services.compositor_service import ImageCompositor, get_compositor
from possessao.infrastructure.database import EntityRepository, get_entity_repository


# Catalog (singleton)
def get_catalog_dependency() -> EntityCatalog:
    """Get entity catalog instance"""
    return get_catalog()


# Scoring Engine
@lru_cache()
def get_scoring_engine_cached() -> ScoringEngine:
    """Get cached scoring engine built over the catalog"""
    return ScoringEngine(get_catalog())


def get_scoring_engine() -> ScoringEngine:
    """Get scoring engine instance"""
    return get_scoring_engine_cached()


# Compositing
def get_compositor_dependency() -> ImageCompositor:
    """Get image compositor instance"""
    return get_compositor()


# Infrastructure
def get_entity_repository_dependency() -> EntityRepository:
    """Get entity repository instance"""
    return get_entity_repository()
