"""
Scoring Schemas

Metric scores, computed composites and the manual scoring request/response models.
"""
import enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class Recommendation(str, enum.Enum):
    INVEST = "invest"
    KEEP = "keep"
    PIVOT = "pivot"
    PAUSE = "pause"
    DROP = "drop"


MetricScore = Optional[int]


class Scores(BaseModel):
    """Flat 1-10 metric ratings. Any metric may be missing."""
    # Product
    usability: MetricScore = Field(default=None, ge=1, le=10)
    value: MetricScore = Field(default=None, ge=1, le=10)
    features: MetricScore = Field(default=None, ge=1, le=10)
    polish: MetricScore = Field(default=None, ge=1, le=10)
    competition: MetricScore = Field(default=None, ge=1, le=10)

    # Business (maintenance is a cost: lower is better)
    market: MetricScore = Field(default=None, ge=1, le=10)
    monetization: MetricScore = Field(default=None, ge=1, le=10)
    maintenance: MetricScore = Field(default=None, ge=1, le=10)
    growth: MetricScore = Field(default=None, ge=1, le=10)

    # Personal
    passion: MetricScore = Field(default=None, ge=1, le=10)
    learning: MetricScore = Field(default=None, ge=1, le=10)
    pride: MetricScore = Field(default=None, ge=1, le=10)

    @field_validator("*", mode="before")
    @classmethod
    def reject_non_numeric(cls, value):
        if isinstance(value, (bool, str)):
            raise ValueError("score must be an integer between 1 and 10")
        return value

    def as_map(self) -> Dict[str, Optional[int]]:
        return self.model_dump()


class PersonalScores(BaseModel):
    """User-entered personal metrics merged into an AI evaluation."""
    passion: MetricScore = Field(default=None, ge=1, le=10)
    learning: MetricScore = Field(default=None, ge=1, le=10)
    pride: MetricScore = Field(default=None, ge=1, le=10)


class ComputedScores(BaseModel):
    """Derived composites; always recomputed from the scores that produced them."""
    product_score: Optional[float] = None
    business_score: Optional[float] = None
    personal_score: Optional[float] = None
    overall_score: Optional[float] = None
    recommendation: Recommendation


class ManualEvaluationRequest(BaseModel):
    """Scores entered by a human; bypasses the AI pipeline."""
    scores: Scores
    notes: Dict[str, str] = Field(default_factory=dict)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, notes: Dict[str, str]) -> Dict[str, str]:
        unknown = set(notes) - set(Scores.model_fields)
        if unknown:
            raise ValueError(f"Unknown metric(s) in notes: {', '.join(sorted(unknown))}")
        for key, note in notes.items():
            if len(note) > 500:
                raise ValueError(f"Note for '{key}' must be 500 characters or less")
        return notes

    class Config:
        json_schema_extra = {
            "example": {
                "scores": {"usability": 8, "value": 6, "maintenance": 3, "passion": 9},
                "notes": {"usability": "Onboarding is clear"},
            }
        }


class ManualEvaluationResponse(BaseModel):
    scores: Dict[str, Optional[int]]
    notes: Dict[str, str]
    computed: ComputedScores
