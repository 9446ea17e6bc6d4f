"""
Catalog and question routes
"""
import random

from fastapi import APIRouter, Depends

from possessao.api.dependencies import get_catalog_dependency
from possessao.api.schemas.request import QuestionsParams
from possessao.api.schemas.response import (
    EntityListResponse,
    EntityResponse,
    QuestionItem,
    QuestionsResponse,
)
from possessao.core.catalog import EntityCatalog
from possessao.core.questions import random_questions
from possessao.utils.exceptions import EntityNotFoundError

router = APIRouter(tags=["Catalog"])


@router.get("/entities", response_model=EntityListResponse)
async def list_entities(
    catalog: EntityCatalog = Depends(get_catalog_dependency)
):
    """List all entities in catalog order"""
    entities = [EntityResponse(**e.to_dict()) for e in catalog]
    return EntityListResponse(total=len(entities), entities=entities)


@router.get("/entities/{entity_id}", response_model=EntityResponse)
async def get_entity(
    entity_id: str,
    catalog: EntityCatalog = Depends(get_catalog_dependency)
):
    """Get a single entity with its traditions and references"""
    entity = catalog.get(entity_id)
    if entity is None:
        raise EntityNotFoundError(entity_id)
    return EntityResponse(**entity.to_dict())


@router.get("/questions", response_model=QuestionsResponse)
async def get_questions(params: QuestionsParams = Depends()):
    """
    Draw a random set of yes/no questions

    Use perspective=third when answering on behalf of someone else.
    """
    rng = random.Random(params.seed) if params.seed is not None else None
    questions = random_questions(params.quantity, rng)
    return QuestionsResponse(
        perspective=params.perspective,
        questions=[QuestionItem(trait=q.trait, text=q.text(params.perspective)) for q in questions]
    )
