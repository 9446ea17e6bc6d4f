"""
Entity scoring and selection

Ranks catalog entities against a set of yes/no trait answers, weighting
rare traits higher and gating by declared sex and age group.
"""
import random
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from possessao.core.entities import (
    AssessmentInput,
    EntityDefinition,
    ScoredCandidate,
    NO_ENTITY,
    AGE_CHILD,
    LEGACY_YOUTH_TRAIT,
)
from possessao.utils.logger import get_logger

logger = get_logger(__name__)


class ScoringEngine:
    """Deterministic ranking with a random tie-break on selection"""

    # Score weights
    RATIO_WEIGHT = 100.0
    MATCH_WEIGHT = 6.0
    RARITY_WEIGHT = 12.0
    LEGACY_YOUTH_WEIGHT = 4.0

    GENDER_MATCH = 10.0
    GENDER_MISMATCH = -8.0
    AGE_MATCH = 10.0
    AGE_MISMATCH = -6.0

    # Confidence transform
    NO_EVIDENCE_CONFIDENCE = 0.18
    CONFIDENCE_BASE = 0.35
    CONFIDENCE_RATIO_WEIGHT = 0.55
    CONFIDENCE_MATCH_WEIGHT = 0.03
    CONFIDENCE_MIN = 0.35
    CONFIDENCE_MAX = 0.95

    def __init__(self, entities: Iterable[EntityDefinition]):
        """
        Initialize scoring engine

        Args:
            entities: Catalog entities, in the order used to break exact ranking ties
        """
        self.entities: List[EntityDefinition] = list(entities)
        self.trait_frequency = self._trait_frequency(self.entities)

    @staticmethod
    def _trait_frequency(entities: List[EntityDefinition]) -> Dict[str, int]:
        """Count how many entity trait lists contain each trait"""
        frequency: Dict[str, int] = {}
        for entity in entities:
            for trait in entity.traits:
                frequency[trait] = frequency.get(trait, 0) + 1
        return frequency

    @classmethod
    def gender_factor(cls, entity: EntityDefinition, assessment: AssessmentInput) -> float:
        if not entity.affected_genders:
            return 0.0
        sex = assessment.disclosed_sex
        if sex is None:
            return 0.0
        if any(g.casefold() == sex.casefold() for g in entity.affected_genders):
            return cls.GENDER_MATCH
        return cls.GENDER_MISMATCH

    @classmethod
    def age_factor(cls, entity: EntityDefinition, assessment: AssessmentInput) -> float:
        if not entity.affected_age_groups:
            return 0.0
        age_group = assessment.age_group or ""
        if not age_group.strip():
            return 0.0
        if any(a.casefold() == age_group.casefold() for a in entity.affected_age_groups):
            return cls.AGE_MATCH
        return cls.AGE_MISMATCH

    @classmethod
    def confidence_for(cls, match_count: int, match_ratio: float) -> float:
        """User-facing confidence; never the raw score"""
        if match_count == 0:
            return cls.NO_EVIDENCE_CONFIDENCE
        value = (
            cls.CONFIDENCE_BASE
            + match_ratio * cls.CONFIDENCE_RATIO_WEIGHT
            + match_count * cls.CONFIDENCE_MATCH_WEIGHT
        )
        return min(cls.CONFIDENCE_MAX, max(cls.CONFIDENCE_MIN, value))

    def score_entity(self, entity: EntityDefinition, assessment: AssessmentInput) -> ScoredCandidate:
        """Score one entity; confidence is filled in by rank()"""
        trait_count = max(1, len(entity.traits))
        matched = tuple(t for t in entity.traits if assessment.answers.get(t) is True)
        match_count = len(matched)
        match_ratio = match_count / trait_count

        rarity_bonus = sum(1.0 / self.trait_frequency[t] for t in matched)

        legacy_bonus = 0.0
        if assessment.age_group == AGE_CHILD and LEGACY_YOUTH_TRAIT in entity.traits:
            legacy_bonus = 1.0

        gender_factor = self.gender_factor(entity, assessment)
        age_factor = self.age_factor(entity, assessment)

        score = (
            match_ratio * self.RATIO_WEIGHT
            + match_count * self.MATCH_WEIGHT
            + rarity_bonus * self.RARITY_WEIGHT
            + legacy_bonus * self.LEGACY_YOUTH_WEIGHT
            + gender_factor
            + age_factor
        )

        logger.debug(
            f"Entity={entity.id} matched={match_count} matchedTraits={list(matched)} "
            f"matchRatio={match_ratio:.2f} rarityBonus={rarity_bonus:.2f} "
            f"genderFactor={gender_factor:.2f} ageFactor={age_factor:.2f} score={score:.2f}"
        )

        return ScoredCandidate(
            entity_id=entity.id,
            confidence=0.0,
            matched_traits=matched,
            score=score,
            match_count=match_count,
            match_ratio=match_ratio,
            rarity_bonus=rarity_bonus,
            gender_factor=gender_factor,
            age_factor=age_factor,
        )

    def rank(self, assessment: AssessmentInput, top_n: int = 3) -> List[ScoredCandidate]:
        """
        Rank entities for an assessment

        Args:
            assessment: Answers and demographics
            top_n: Maximum number of candidates to return

        Returns:
            Up to top_n candidates, best first. Entities with at least one
            matched trait are preferred; when none match, the full ranking is used.
        """
        if not self.entities or top_n <= 0:
            return []

        scored = [self.score_entity(e, assessment) for e in self.entities]

        # sorted() is stable, so exact ties keep catalog order
        ranked = sorted(
            scored,
            key=lambda c: (c.score, c.match_count, c.match_ratio),
            reverse=True
        )

        positive = [c for c in ranked if c.match_count > 0]
        selected = (positive or ranked)[:top_n]

        logger.debug("Ranking (selected list): " + " | ".join(
            f"{c.entity_id}:score={c.score:.2f} matches={c.match_count} "
            f"gf={c.gender_factor:.2f} af={c.age_factor:.2f}"
            for c in selected
        ))

        return [
            replace(c, confidence=self.confidence_for(c.match_count, c.match_ratio))
            for c in selected
        ]

    def choose(
        self,
        assessment: AssessmentInput,
        rng: Optional[random.Random] = None
    ) -> ScoredCandidate:
        """
        Pick a single entity from the top 3

        Args:
            assessment: Answers and demographics
            rng: Random source for the tie-break (module-level random if None)

        Returns:
            The chosen candidate, or NO_ENTITY for an empty catalog
        """
        top = self.rank(assessment, 3)
        if not top:
            return NO_ENTITY

        best_score = max(c.score for c in top)
        tied = [c for c in top if c.score == best_score]

        if len(tied) == 1:
            chosen = tied[0]
        else:
            chooser = rng if rng is not None else random
            chosen = tied[chooser.randrange(len(tied))]

        logger.debug(f"Chosen: {chosen.entity_id} with confidence {chosen.confidence:.2f}")
        return chosen
