"""
JSON extraction and structural validation of generation-service replies.

Nothing produced by the generation service is trusted until it has passed
`validate_evaluation_response`. Both steps fail fast: a malformed or invalid
reply is not a transient condition and is never retried.
"""
import json
import re
from typing import Any, List

from pydantic import ValidationError

from app.features.evaluation.exceptions import ResponseParseError, SchemaViolationError
from app.features.evaluation.schemas.evaluation import GeneratedEvaluation

FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def extract_json(text: str) -> Any:
    cleaned = text.strip()

    match = FENCED_BLOCK_PATTERN.search(cleaned)
    if match:
        cleaned = match.group(1).strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Failed to parse JSON response: {e}") from e


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "response"
    return f"{location}: {error['msg']}"


def validate_evaluation_response(data: Any) -> GeneratedEvaluation:
    if not isinstance(data, dict):
        raise SchemaViolationError(["response: expected a JSON object"])

    try:
        return GeneratedEvaluation.model_validate(data)
    except ValidationError as e:
        problems: List[str] = [_describe(error) for error in e.errors()]
        raise SchemaViolationError(problems) from e


def parse_evaluation_response(text: str) -> GeneratedEvaluation:
    return validate_evaluation_response(extract_json(text))
