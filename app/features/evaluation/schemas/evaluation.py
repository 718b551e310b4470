"""
Evaluation Schemas

Pipeline input, the validated generation-service response and the final result.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from app.features.evaluation.schemas.content import ExtractedContent
from app.features.evaluation.schemas.performance import PerformanceReport, PerformanceSummary
from app.features.evaluation.schemas.scoring import ComputedScores, PersonalScores, Scores


# ============================================================================
# Pipeline Input
# ============================================================================

class Competitor(BaseModel):
    name: str = Field(min_length=1)
    url: Optional[str] = None
    notes: Optional[str] = None


class ProjectInput(BaseModel):
    """Project record supplied by the persistence layer."""
    name: str = Field(min_length=1, max_length=100)
    url: HttpUrl
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = None
    target_audience: Optional[str] = None
    competitors: List[Competitor] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Invoicing",
                "url": "https://acme.example.com",
                "description": "Invoicing for freelancers",
                "category": "SaaS",
                "target_audience": "Freelance designers",
                "competitors": [{"name": "FreshBooks", "url": "https://www.freshbooks.com"}],
            }
        }


class EvaluationInput(BaseModel):
    """Everything the prompt is built from. Built once per run."""
    model_config = ConfigDict(frozen=True)

    project_name: str
    url: str
    description: Optional[str] = None
    category: Optional[str] = None
    target_audience: Optional[str] = None
    competitors: List[Competitor] = Field(default_factory=list)
    performance: PerformanceReport
    content: ExtractedContent


# ============================================================================
# Generation Response
# ============================================================================

class MetricAssessment(BaseModel):
    score: int = Field(ge=1, le=10)
    reason: str

    @field_validator("score", mode="before")
    @classmethod
    def score_must_be_number(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("score must be a number")
        return value

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("reason must not be empty")
        return value


class ProductAssessment(BaseModel):
    usability: MetricAssessment
    value: MetricAssessment
    features: MetricAssessment
    polish: MetricAssessment
    competition: MetricAssessment


class BusinessAssessment(BaseModel):
    market: MetricAssessment
    monetization: MetricAssessment
    maintenance: MetricAssessment
    growth: MetricAssessment


class FirstImpressions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    what_it_does: str = Field(alias="whatItDoes")
    target_user: str = Field(alias="targetUser")
    trust_level: Literal["low", "medium", "high"] = Field(alias="trustLevel")


class GeneratedEvaluation(BaseModel):
    """Structurally validated evaluation returned by the generation service."""
    model_config = ConfigDict(populate_by_name=True)

    product: ProductAssessment
    business: BusinessAssessment
    summary: str
    first_impressions: Optional[FirstImpressions] = Field(default=None, alias="firstImpressions")
    recommendations: Optional[List[str]] = Field(default=None, min_length=1)

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("summary must not be empty")
        return value

    def metrics(self) -> Dict[str, MetricAssessment]:
        """Flat metric key -> assessment map in rubric order."""
        flat = {}
        for group in (self.product, self.business):
            for key in type(group).model_fields:
                flat[key] = getattr(group, key)
        return flat


# ============================================================================
# Result
# ============================================================================

class TokenUsage(BaseModel):
    input: int
    output: int


class EvaluationResult(BaseModel):
    """Outcome of one pipeline run. On failure only `error` is populated."""
    success: bool
    scores: Optional[Dict[str, Optional[int]]] = None
    reasoning: Optional[Dict[str, str]] = None
    first_impressions: Optional[FirstImpressions] = None
    recommendations: Optional[List[str]] = None
    performance_summary: Optional[PerformanceSummary] = None
    computed: Optional[ComputedScores] = None
    error: Optional[str] = None
    token_usage: Optional[TokenUsage] = None
    estimated_cost: Optional[float] = None

    @classmethod
    def failure(cls, error: str) -> "EvaluationResult":
        return cls(success=False, error=error)


# ============================================================================
# API Requests
# ============================================================================

class AIEvaluationRequest(BaseModel):
    project: ProjectInput
    personal_scores: Optional[PersonalScores] = None


class EvaluationReportRequest(BaseModel):
    project: ProjectInput
    scores: Scores
    notes: Dict[str, str] = Field(default_factory=dict)


class EvaluationReportResponse(BaseModel):
    markdown: str
    computed: ComputedScores
