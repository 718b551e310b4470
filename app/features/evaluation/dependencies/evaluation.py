from typing import AsyncIterator

from fastapi import HTTPException, status

from app.features.evaluation.services.generation.generation_client import GenerationClient
from app.features.evaluation.services.orchestration.evaluator import EvaluationOrchestrator
from app.platform.config import settings


async def get_orchestrator() -> AsyncIterator[EvaluationOrchestrator]:
    """Orchestrator for one request; its generation client is closed afterwards."""
    if not settings.GENERATION_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI evaluation is not configured. Please set GENERATION_API_KEY.",
        )

    generation_client = GenerationClient.from_settings(settings)
    try:
        yield EvaluationOrchestrator(settings=settings, generation_client=generation_client)
    finally:
        await generation_client.aclose()
