"""
Assessment session
Holds the answers of one user and turns them into a result and a picture
"""
import random
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from possessao.core.catalog import EntityCatalog, get_catalog
from possessao.core.entities import (
    AGE_ADULT,
    CAMERA_REAR,
    AssessmentInput,
    ScoredCandidate,
    manual_selection,
)
from possessao.core.scoring_engine import ScoringEngine
from possessao.services.compositor_service import ImageCompositor, get_compositor
from possessao.utils.config import settings
from possessao.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SessionState:
    """Everything the user has entered so far plus the computed outcome"""
    sex: Optional[str] = None
    age_group: str = AGE_ADULT
    answers: Dict[str, bool] = field(default_factory=dict)
    photo_reference: Optional[str] = None
    camera_orientation: str = CAMERA_REAR
    top_results: List[ScoredCandidate] = field(default_factory=list)
    result: Optional[ScoredCandidate] = None
    result_image: Optional[str] = None
    processing_image: bool = False

    def to_input(self) -> AssessmentInput:
        return AssessmentInput(
            sex=self.sex,
            age_group=self.age_group,
            answers=dict(self.answers),
            photo_reference=self.photo_reference,
        )


class SessionController:
    """
    Drives one assessment session
    At most one composition runs at a time; a reset while a composition is
    in flight causes its output to be thrown away
    """

    def __init__(
        self,
        catalog: Optional[EntityCatalog] = None,
        compositor: Optional[ImageCompositor] = None,
        rng: Optional[random.Random] = None,
        state: Optional[SessionState] = None
    ):
        self.catalog = catalog or get_catalog()
        self.engine = ScoringEngine(self.catalog)
        self._compositor = compositor
        self.rng = rng
        self.state = state or SessionState()

        self._compose_lock = threading.Lock()
        self._generation = 0

    @property
    def compositor(self) -> ImageCompositor:
        if self._compositor is None:
            self._compositor = get_compositor()
        return self._compositor

    def set_sex(self, value: Optional[str]) -> None:
        self.state.sex = value

    def set_age_group(self, value: str) -> None:
        self.state.age_group = value

    def set_answer(self, trait: str, value: bool) -> None:
        self.state.answers[trait] = value

    def set_photo(self, reference: Optional[str], camera_orientation: str = CAMERA_REAR) -> None:
        self.state.photo_reference = reference
        self.state.camera_orientation = camera_orientation

    def _compose_for(self, entity_id: str) -> None:
        """Composite the session photo, if any, for the given entity"""
        photo = self.state.photo_reference
        if not photo or not photo.strip():
            return

        with self._compose_lock:
            generation = self._generation
            self.state.processing_image = True
            try:
                output = self.compositor.compose(photo, entity_id, self.state.camera_orientation)
            finally:
                if generation == self._generation:
                    self.state.processing_image = False

            if generation != self._generation:
                logger.info("Session reset during composition, discarding result")
                if output != photo:
                    self.compositor.storage.delete_file(output)
                return

            if output:
                self.state.result_image = output

    def generate_result(self) -> ScoredCandidate:
        """
        Rank the catalog, choose the result and composite the photo

        Returns:
            The chosen candidate
        """
        assessment = self.state.to_input()
        top = self.engine.rank(assessment, settings.TOP_N_RESULTS)
        self.state.top_results = top

        chosen = self.engine.choose(assessment, self.rng)
        self.state.result = chosen

        self._compose_for(chosen.entity_id)

        logger.info(
            "Result generated",
            extra={
                "top": [f"{c.entity_id}({int(c.confidence * 100)}%)" for c in top],
                "chosen": chosen.entity_id,
                "confidence": chosen.confidence,
                "catalog_size": len(self.catalog),
            }
        )
        return chosen

    def select_result(self, entity_id: str) -> ScoredCandidate:
        """Pick one of the top results; unknown ids get a zero-confidence placeholder"""
        selected = next((c for c in self.state.top_results if c.entity_id == entity_id), None)
        if selected is None:
            selected = ScoredCandidate(entity_id=entity_id, confidence=0.0)
        self.state.result = selected
        return selected

    def select_manual_entity(self, entity_id: str) -> ScoredCandidate:
        """Force an entity (confidence 1.0) and composite the photo for it"""
        selected = manual_selection(entity_id)
        self.state.result = selected
        self._compose_for(entity_id)
        return selected

    def reset(self) -> None:
        """Back to a blank session; an in-flight composition is discarded"""
        self._generation += 1
        self.state = SessionState()
        logger.info("Session reset")
