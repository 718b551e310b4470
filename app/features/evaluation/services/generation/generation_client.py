import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import openai
from openai import AsyncOpenAI

from app.features.evaluation.exceptions import FatalServiceError, TransientServiceError
from app.platform.config import Settings

logger = logging.getLogger(__name__)

# Authentication and bad-request class statuses: the same request will fail again
FATAL_STATUS_CODES = {400, 401, 403, 422}

BASE_RETRY_DELAY_SECONDS = 1.0


class AttemptStatus(enum.Enum):
    SUCCESS = "success"
    TRANSIENT = "transient"
    FATAL = "fatal"


@dataclass
class GenerationResponse:
    content: str
    input_tokens: int
    output_tokens: int


@dataclass
class AttemptOutcome:
    status: AttemptStatus
    response: Optional[GenerationResponse] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class GenerationClient:
    """
    Bounded-retry text completion against an OpenAI-compatible chat API.

    Knows nothing about evaluation schemas: it returns the first text block of
    the reply together with token usage. Each attempt is classified and the
    retry loop only looks at that classification.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        base_delay: float = BASE_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.model = model
        self.base_delay = base_delay
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationClient":
        client = AsyncOpenAI(
            base_url=settings.GENERATION_BASE_URL,
            api_key=settings.GENERATION_API_KEY,
            # Retries are handled here, not by the SDK
            max_retries=0,
        )
        return cls(client=client, model=settings.GENERATION_MODEL)

    async def aclose(self) -> None:
        await self.client.close()

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_output_tokens: int = 2000,
        temperature: float = 0.3,
        retries: int = 2,
    ) -> GenerationResponse:
        last_outcome: Optional[AttemptOutcome] = None

        for attempt in range(retries + 1):
            outcome = await self._attempt(system_prompt, user_prompt, max_output_tokens, temperature)

            if outcome.status is AttemptStatus.SUCCESS:
                return outcome.response

            if outcome.status is AttemptStatus.FATAL:
                logger.error(f"Generation request rejected ({outcome.status_code}): {outcome.error}")
                raise FatalServiceError(outcome.error, status_code=outcome.status_code)

            last_outcome = outcome
            if attempt < retries:
                delay = self.base_delay * 2 ** attempt
                logger.warning(
                    f"Generation attempt {attempt + 1} failed: {outcome.error}; retrying in {delay:g}s"
                )
                await self.sleep(delay)

        logger.error(f"Generation failed after {retries + 1} attempts: {last_outcome.error}")
        raise TransientServiceError(last_outcome.error, attempts=retries + 1)

    async def _attempt(
        self,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        temperature: float,
    ) -> AttemptOutcome:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=max_output_tokens,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.APIStatusError as e:
            if e.status_code in FATAL_STATUS_CODES:
                return AttemptOutcome(AttemptStatus.FATAL, error=str(e), status_code=e.status_code)
            return AttemptOutcome(AttemptStatus.TRANSIENT, error=str(e), status_code=e.status_code)
        except openai.OpenAIError as e:
            return AttemptOutcome(AttemptStatus.TRANSIENT, error=str(e) or type(e).__name__)

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            return AttemptOutcome(AttemptStatus.TRANSIENT, error="No text content in response")

        usage = completion.usage
        return AttemptOutcome(
            AttemptStatus.SUCCESS,
            response=GenerationResponse(
                content=content,
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
            ),
        )
