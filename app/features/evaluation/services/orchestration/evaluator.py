import asyncio
from typing import Dict, Optional

from app.features.evaluation.exceptions import EvaluationError
from app.features.evaluation.schemas.content import ExtractedContent
from app.features.evaluation.schemas.evaluation import (
    EvaluationInput,
    EvaluationResult,
    GeneratedEvaluation,
    ProjectInput,
    TokenUsage,
)
from app.features.evaluation.schemas.performance import PerformanceReport, PerformanceSummary
from app.features.evaluation.schemas.scoring import PersonalScores
from app.features.evaluation.services.audit.performance_auditor import PerformanceAuditor
from app.features.evaluation.services.extraction.content_extractor import ContentExtractor
from app.features.evaluation.services.generation.generation_client import GenerationClient
from app.features.evaluation.services.generation.prompt_builder import (
    SYSTEM_PROMPT,
    build_evaluation_prompt,
)
from app.features.evaluation.services.generation.response_validator import (
    parse_evaluation_response,
)
from app.features.evaluation.services.scoring.scoring_engine import (
    RecommendationPolicy,
    compute_all_scores,
)
from app.platform.config import Settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


def estimate_evaluation_cost(
    input_tokens: int,
    output_tokens: int,
    input_cost_per_1k: float = 0.003,
    output_cost_per_1k: float = 0.015,
) -> float:
    """Estimated USD cost of one generation call."""
    return (input_tokens / 1000) * input_cost_per_1k + (output_tokens / 1000) * output_cost_per_1k


class EvaluationOrchestrator:
    """
    Runs one evaluation: extraction and audit in parallel, then prompt,
    generation, validation and scoring.

    `evaluate` never raises. Extraction and audit problems only reduce the data
    the prompt is built from; generation or validation problems end the run
    with `success=False`.
    """

    def __init__(
        self,
        settings: Settings,
        generation_client: GenerationClient,
        extractor: Optional[ContentExtractor] = None,
        auditor: Optional[PerformanceAuditor] = None,
    ):
        self.settings = settings
        self.generation_client = generation_client
        self.extractor = extractor or ContentExtractor.from_settings(settings)
        self.auditor = auditor or PerformanceAuditor.from_settings(settings)
        self.policy = RecommendationPolicy(
            pivot_includes_value_five=settings.PIVOT_INCLUDES_VALUE_FIVE
        )

    async def evaluate(
        self,
        project: ProjectInput,
        personal_scores: Optional[PersonalScores] = None,
    ) -> EvaluationResult:
        url = str(project.url)
        try:
            return await self._run(project, url, personal_scores)
        except EvaluationError as e:
            logger.error(f"[AI Eval] Evaluation of {url} failed: {e}")
            return EvaluationResult.failure(str(e))
        except Exception as e:
            logger.exception(f"[AI Eval] Unexpected error evaluating {url}")
            return EvaluationResult.failure(str(e) or "Unknown error during AI evaluation")

    async def _run(
        self,
        project: ProjectInput,
        url: str,
        personal_scores: Optional[PersonalScores],
    ) -> EvaluationResult:
        logger.info(f"[AI Eval] Gathering page content and PageSpeed data for {url}")
        content, performance = await asyncio.gather(
            self.extractor.extract(url),
            self.auditor.audit(url),
        )

        if content.error:
            if not content.main_content and not performance.has_scores():
                raise EvaluationError(f"Could not gather any data about {url}: {content.error}")
            logger.warning(
                f"[AI Eval] Scraping failed: {content.error}, continuing with limited data"
            )
        if not performance.has_scores():
            logger.warning(f"[AI Eval] No PageSpeed data for {url}, continuing without it")

        evaluation_input = self.build_input(project, url, content, performance)

        logger.info("[AI Eval] Calling generation service")
        response = await self.generation_client.complete(
            SYSTEM_PROMPT,
            build_evaluation_prompt(evaluation_input),
            max_output_tokens=self.settings.GENERATION_MAX_OUTPUT_TOKENS,
            temperature=self.settings.GENERATION_TEMPERATURE,
            retries=self.settings.GENERATION_RETRIES,
        )

        logger.info("[AI Eval] Parsing response")
        generated = parse_evaluation_response(response.content)

        scores = self.merge_scores(generated, personal_scores)
        computed = compute_all_scores(scores, self.policy)

        cost = estimate_evaluation_cost(
            response.input_tokens,
            response.output_tokens,
            self.settings.GENERATION_INPUT_COST_PER_1K,
            self.settings.GENERATION_OUTPUT_COST_PER_1K,
        )
        logger.info(
            f"[AI Eval] {url}: {computed.recommendation.value} "
            f"(overall {computed.overall_score}), "
            f"{response.input_tokens}+{response.output_tokens} tokens, ~${cost:.4f}"
        )

        return EvaluationResult(
            success=True,
            scores=scores,
            reasoning=self.collect_reasoning(generated),
            first_impressions=generated.first_impressions,
            recommendations=generated.recommendations,
            performance_summary=PerformanceSummary.from_report(performance),
            computed=computed,
            token_usage=TokenUsage(input=response.input_tokens, output=response.output_tokens),
            estimated_cost=cost,
        )

    @staticmethod
    def build_input(
        project: ProjectInput,
        url: str,
        content: ExtractedContent,
        performance: PerformanceReport,
    ) -> EvaluationInput:
        return EvaluationInput(
            project_name=project.name,
            url=url,
            description=project.description,
            category=project.category,
            target_audience=project.target_audience,
            competitors=project.competitors,
            performance=performance,
            content=content,
        )

    @staticmethod
    def merge_scores(
        generated: GeneratedEvaluation,
        personal_scores: Optional[PersonalScores],
    ) -> Dict[str, Optional[int]]:
        scores: Dict[str, Optional[int]] = {
            key: assessment.score for key, assessment in generated.metrics().items()
        }
        personal = personal_scores.model_dump() if personal_scores else {}
        for key in ("passion", "learning", "pride"):
            scores[key] = personal.get(key)
        return scores

    @staticmethod
    def collect_reasoning(generated: GeneratedEvaluation) -> Dict[str, str]:
        reasoning = {key: assessment.reason for key, assessment in generated.metrics().items()}
        reasoning["summary"] = generated.summary
        return reasoning
