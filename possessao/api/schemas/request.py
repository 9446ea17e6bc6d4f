"""
API request schemas
"""
from typing import Dict, Optional, Literal
from pydantic import BaseModel, Field, field_validator

from possessao.core.entities import AGE_ADULT, AGE_GROUPS, SEX_OPTIONS, AssessmentInput


class AssessRequest(BaseModel):
    """Answers and demographics to score against the catalog"""

    sex: Optional[str] = Field(
        default=None,
        description="Masculino, Feminino, Não informar, or null"
    )
    age_group: str = Field(
        default=AGE_ADULT,
        description="Criança, Adolescente, Adulto or Idoso"
    )
    answers: Dict[str, bool] = Field(
        default_factory=dict,
        description="Trait tag -> answer; missing traits count as not matched"
    )
    top_n: int = Field(default=3, ge=1, le=20, description="Number of ranked candidates to return")
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the tie-break draw (random when omitted)"
    )

    @field_validator("sex")
    @classmethod
    def validate_sex(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if v not in SEX_OPTIONS:
            raise ValueError(f"sex must be one of {list(SEX_OPTIONS)}")
        return v

    @field_validator("age_group")
    @classmethod
    def validate_age_group(cls, v: str) -> str:
        if v not in AGE_GROUPS:
            raise ValueError(f"age_group must be one of {list(AGE_GROUPS)}")
        return v

    def to_input(self) -> AssessmentInput:
        return AssessmentInput(sex=self.sex, age_group=self.age_group, answers=dict(self.answers))

    class Config:
        json_schema_extra = {
            "example": {
                "sex": "Feminino",
                "age_group": "Adulto",
                "answers": {"mood_swings": True, "unexplained_fatigue": True},
                "top_n": 3
            }
        }


class QuestionsParams(BaseModel):
    """Query parameters for the question endpoint"""

    quantity: int = Field(default=7, ge=1, le=16, description="Number of questions")
    perspective: Literal["first", "third"] = Field(
        default="first",
        description="'first' when answering about yourself, 'third' about someone else"
    )
    seed: Optional[int] = Field(default=None, description="Seed for the shuffle")
