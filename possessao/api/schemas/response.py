"""
API response schemas
"""
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    """Health check response schema"""

    status: str = Field(description="Health status (healthy/degraded)")
    version: str = Field(description="API version")
    catalog_size: int = Field(description="Number of entities loaded")
    stored_entities: Optional[int] = Field(default=None, description="Entities in the catalog store, None if unreadable")
    overlays_available: bool = Field(description="Whether the overlay directory exists")
    remove_bg_configured: bool = Field(description="Whether remote background removal is configured")
    timestamp: datetime = Field(default_factory=_utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "catalog_size": 11,
                "stored_entities": 11,
                "overlays_available": True,
                "remove_bg_configured": False,
                "timestamp": "2025-01-15T10:30:00Z"
            }
        }


class EntityResponse(BaseModel):
    """A catalog entity"""

    id: str
    name: str
    culture: str
    traits: List[str]
    description: str
    traditions: List[str] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)
    affected_genders: List[str] = Field(default_factory=list)
    affected_age_groups: List[str] = Field(default_factory=list)


class EntityListResponse(BaseModel):
    total: int
    entities: List[EntityResponse]


class QuestionItem(BaseModel):
    trait: str = Field(description="Trait tag the answer is stored under")
    text: str = Field(description="Question wording")


class QuestionsResponse(BaseModel):
    perspective: str
    questions: List[QuestionItem]


class CandidateResponse(BaseModel):
    """A ranked candidate; ranking internals are not exposed"""

    entity_id: str
    confidence: float = Field(ge=0.0, le=1.0)
    matched_traits: List[str] = Field(default_factory=list)
    name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "entity_id": "lamashtu",
                "confidence": 0.65,
                "matched_traits": ["mood_swings", "unexplained_fatigue"],
                "name": "Lamashtu"
            }
        }


class AssessResponse(BaseModel):
    """Assessment result"""

    success: bool = True
    chosen: CandidateResponse
    top_results: List[CandidateResponse]
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response schema"""

    success: bool = False
    error: str
    error_type: str
    details: Optional[Dict[str, Any]] = None
