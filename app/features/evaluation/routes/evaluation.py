import logging

from fastapi import APIRouter, Depends, status

from app.features.evaluation.dependencies.evaluation import get_orchestrator
from app.features.evaluation.schemas.evaluation import (
    AIEvaluationRequest,
    EvaluationReportRequest,
    EvaluationReportResponse,
)
from app.features.evaluation.schemas.scoring import (
    ManualEvaluationRequest,
    ManualEvaluationResponse,
)
from app.features.evaluation.services.orchestration.evaluator import EvaluationOrchestrator
from app.features.evaluation.services.reporting.evaluation_report import (
    format_evaluation_markdown,
)
from app.features.evaluation.services.scoring.scoring_engine import (
    RecommendationPolicy,
    compute_all_scores,
)
from app.platform.config import settings
from app.platform.response import api_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


def _policy() -> RecommendationPolicy:
    return RecommendationPolicy(pivot_includes_value_five=settings.PIVOT_INCLUDES_VALUE_FIVE)


@router.post("/ai", summary="Run the AI evaluation pipeline for a project")
async def run_ai_evaluation(
    data: AIEvaluationRequest,
    orchestrator: EvaluationOrchestrator = Depends(get_orchestrator),
):
    """
    Extracts page content, runs PageSpeed audits and asks the generation
    service to score the product, then computes composites and a recommendation.

    ⚠️ Takes tens of seconds: PageSpeed and the generation call dominate.
    The run is idempotent; on failure the client can simply retry.
    """
    result = await orchestrator.evaluate(data.project, data.personal_scores)

    if not result.success:
        return api_response(
            message=result.error or "AI evaluation failed",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return api_response(
        data=result,
        message="AI evaluation completed",
        status_code=status.HTTP_200_OK,
    )


@router.post("/score", summary="Compute scores from manually entered metrics")
async def score_manual_evaluation(data: ManualEvaluationRequest):
    scores = data.scores.as_map()
    computed = compute_all_scores(scores, _policy())

    logger.info(f"Manual evaluation scored: {computed.recommendation.value}")
    return api_response(
        data=ManualEvaluationResponse(scores=scores, notes=data.notes, computed=computed),
        message="Scores computed",
        status_code=status.HTTP_200_OK,
    )


@router.post("/report", summary="Export an evaluation as Markdown")
async def export_evaluation_report(data: EvaluationReportRequest):
    scores = data.scores.as_map()
    computed = compute_all_scores(scores, _policy())
    markdown = format_evaluation_markdown(data.project, scores, computed, data.notes)

    return api_response(
        data=EvaluationReportResponse(markdown=markdown, computed=computed),
        message="Report generated",
        status_code=status.HTTP_200_OK,
    )
