"""
Evaluation pipeline errors.

Soft degradation (extractor/auditor failures) is never raised; it shows up as
null scores or a populated `error` field. Everything below aborts a run and is
turned into a failed result by the orchestrator.
"""
from typing import List, Optional


class EvaluationError(Exception):
    """Base class for errors that abort an evaluation run."""


class TransientServiceError(EvaluationError):
    """The generation service kept failing with retryable errors."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class FatalServiceError(EvaluationError):
    """Authentication or bad-request class failure; retrying will not help."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(FatalServiceError):
    """The generation service returned text that is not valid JSON."""


class SchemaViolationError(FatalServiceError):
    """The response parsed but does not match the evaluation schema."""

    def __init__(self, problems: List[str]):
        super().__init__("Invalid response structure from AI: " + "; ".join(problems))
        self.problems = problems
