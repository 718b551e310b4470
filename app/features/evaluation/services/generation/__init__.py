"""
Generation module.

Prompt construction, the bounded-retry completion client and response validation.
"""
from app.features.evaluation.services.generation.generation_client import (
    AttemptStatus,
    GenerationClient,
    GenerationResponse,
)
from app.features.evaluation.services.generation.prompt_builder import (
    SYSTEM_PROMPT,
    build_evaluation_prompt,
)
from app.features.evaluation.services.generation.response_validator import (
    extract_json,
    parse_evaluation_response,
    validate_evaluation_response,
)

__all__ = [
    "AttemptStatus",
    "GenerationClient",
    "GenerationResponse",
    "SYSTEM_PROMPT",
    "build_evaluation_prompt",
    "extract_json",
    "parse_evaluation_response",
    "validate_evaluation_response",
]
