"""
Assessment routes

Scores a set of yes/no answers against the entity catalog. The top list is
fully deterministic; the chosen entity is drawn at random among candidates
tied on the best score (pass `seed` to make the draw reproducible).
"""
import asyncio
import random
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from possessao.api.dependencies import (
    get_catalog_dependency,
    get_compositor_dependency,
    get_scoring_engine,
)
from possessao.api.schemas.request import AssessRequest
from possessao.api.schemas.response import AssessResponse, CandidateResponse
from possessao.core.catalog import EntityCatalog
from possessao.core.entities import CAMERA_ORIENTATIONS, ScoredCandidate
from possessao.core.scoring_engine import ScoringEngine
from possessao.services.compositor_service import ImageCompositor, decode_photo
from possessao.utils.config import settings
from possessao.utils.logger import get_logger
from possessao.utils.exceptions import (
    CompositionError,
    EntityNotFoundError,
    FileSizeExceededError,
    UnsupportedFileTypeError,
)

logger = get_logger(__name__)
router = APIRouter(tags=["Assessment"])


def _candidate(candidate: ScoredCandidate, catalog: EntityCatalog) -> CandidateResponse:
    entity = catalog.get(candidate.entity_id)
    return CandidateResponse(
        **candidate.to_dict(),
        name=entity.name if entity else None
    )


def validate_upload_file(file: UploadFile) -> None:
    """
    Validate uploaded photo by extension

    Raises:
        UnsupportedFileTypeError: If the extension is not an allowed image type
    """
    if not file.filename:
        raise UnsupportedFileTypeError("", [], message="Filename is required")

    ext = Path(file.filename).suffix.lower()
    allowed_extensions = settings.ALLOWED_IMAGE_EXTENSIONS
    if ext not in allowed_extensions:
        raise UnsupportedFileTypeError(ext, allowed_extensions)


@router.post("/assess", response_model=AssessResponse)
async def assess(
    request: AssessRequest,
    engine: ScoringEngine = Depends(get_scoring_engine),
    catalog: EntityCatalog = Depends(get_catalog_dependency)
):
    """
    Rank the catalog against the answers and choose one entity

    Unknown trait tags in `answers` are ignored. With no positive answers at
    all, the whole catalog is ranked and every confidence is 0.18.
    """
    assessment = request.to_input()
    rng = random.Random(request.seed) if request.seed is not None else None

    top = engine.rank(assessment, request.top_n)
    chosen = engine.choose(assessment, rng)

    logger.info(
        f"Assessment: chosen={chosen.entity_id} ({chosen.confidence:.2f})",
        extra={"top": [c.entity_id for c in top], "answered": len(request.answers)}
    )

    return AssessResponse(
        chosen=_candidate(chosen, catalog),
        top_results=[_candidate(c, catalog) for c in top],
        metadata={
            "catalog_size": len(catalog),
            "positive_answers": sum(1 for v in request.answers.values() if v),
        }
    )


@router.post("/compose")
async def compose(
    file: UploadFile = File(..., description="User photo (JPEG/PNG)"),
    entity_id: str = Form(..., description="Entity to composite with"),
    camera_orientation: str = Form(default=settings.DEFAULT_CAMERA_ORIENTATION, description="frontal or traseira"),
    compositor: ImageCompositor = Depends(get_compositor_dependency),
    catalog: EntityCatalog = Depends(get_catalog_dependency)
):
    """
    Composite an uploaded photo with the overlay of an entity

    Returns the resulting JPEG. Missing overlay art falls back to the
    procedural horror tone; background removal falls back to the local
    silhouette extractor.
    """
    validate_upload_file(file)
    if entity_id not in catalog:
        raise EntityNotFoundError(entity_id)
    if camera_orientation not in CAMERA_ORIENTATIONS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"camera_orientation must be one of {list(CAMERA_ORIENTATIONS)}"
        )

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise FileSizeExceededError(settings.MAX_UPLOAD_SIZE)

    # Reject undecodable uploads up front instead of echoing them back
    await asyncio.to_thread(decode_photo, content)

    logger.info(f"Compose request: {file.filename} -> {entity_id} ({camera_orientation})")
    output = await compositor.compose_async(content, entity_id, camera_orientation)
    if not isinstance(output, str):
        raise CompositionError("Composition failed", details={"entity_id": entity_id})

    # The stored JPEG only lives until it has been streamed back
    return FileResponse(
        output,
        media_type="image/jpeg",
        filename=Path(output).name,
        background=BackgroundTask(compositor.storage.delete_file, output)
    )
