"""
Domain records shared by scoring, compositing and the API
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Tuple


# Closed vocabularies for user-facing inputs
SEX_MALE = "Masculino"
SEX_FEMALE = "Feminino"
SEX_UNDISCLOSED = "Não informar"
SEX_OPTIONS = (SEX_MALE, SEX_FEMALE, SEX_UNDISCLOSED)

AGE_CHILD = "Criança"
AGE_TEEN = "Adolescente"
AGE_ADULT = "Adulto"
AGE_ELDER = "Idoso"
AGE_GROUPS = (AGE_CHILD, AGE_TEEN, AGE_ADULT, AGE_ELDER)

CAMERA_FRONT = "frontal"
CAMERA_REAR = "traseira"
CAMERA_ORIENTATIONS = (CAMERA_FRONT, CAMERA_REAR)

# Trait never present in the shipped catalog; still honoured by scoring
LEGACY_YOUTH_TRAIT = "affects_youth"


@dataclass(frozen=True)
class EntityDefinition:
    """A folkloric entity with its traits and demographic gating"""
    id: str
    name: str
    culture: str
    traits: Tuple[str, ...]
    description: str
    traditions: Tuple[str, ...] = ()
    references: Tuple[str, ...] = ()
    affected_genders: FrozenSet[str] = frozenset()  # empty = any
    affected_age_groups: FrozenSet[str] = frozenset()  # empty = any

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "culture": self.culture,
            "traits": list(self.traits),
            "description": self.description,
            "traditions": list(self.traditions),
            "references": list(self.references),
            "affected_genders": sorted(self.affected_genders),
            "affected_age_groups": sorted(self.affected_age_groups),
        }


@dataclass(frozen=True)
class AssessmentInput:
    """Answers and demographics for one scoring run"""
    sex: Optional[str] = None
    age_group: str = AGE_ADULT
    answers: Mapping[str, bool] = field(default_factory=dict)
    photo_reference: Optional[str] = None

    @property
    def disclosed_sex(self) -> Optional[str]:
        """Sex value usable for gating, or None when unset or undisclosed"""
        if self.sex is None or not self.sex.strip():
            return None
        if self.sex.casefold() == SEX_UNDISCLOSED.casefold():
            return None
        return self.sex


@dataclass(frozen=True)
class ScoredCandidate:
    """Ranked candidate entity for a given input"""
    entity_id: str
    confidence: float
    matched_traits: Tuple[str, ...] = ()
    score: float = 0.0
    match_count: int = 0
    match_ratio: float = 0.0
    rarity_bonus: float = 0.0
    gender_factor: float = 0.0
    age_factor: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.entity_id == ""

    def to_dict(self) -> Dict:
        """User-facing fields only; ranking internals stay private"""
        return {
            "entity_id": self.entity_id,
            "confidence": self.confidence,
            "matched_traits": list(self.matched_traits),
        }


NO_ENTITY = ScoredCandidate(entity_id="", confidence=0.0)


def manual_selection(entity_id: str) -> ScoredCandidate:
    """Result for an entity picked by hand rather than scored"""
    return ScoredCandidate(entity_id=entity_id, confidence=1.0)
