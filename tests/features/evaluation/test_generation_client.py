from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from app.features.evaluation.exceptions import FatalServiceError, TransientServiceError
from app.features.evaluation.services.generation.generation_client import GenerationClient

REQUEST = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")


def completion(content="{}", prompt_tokens=120, completion_tokens=80):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


def connection_error():
    return openai.APIConnectionError(request=REQUEST)


def status_error(error_cls, status_code):
    response = httpx.Response(status_code, request=REQUEST)
    return error_cls(f"HTTP {status_code}", response=response, body=None)


def make_client(side_effect):
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock(side_effect=side_effect)
    sleep = AsyncMock()
    return GenerationClient(client=sdk, model="test-model", sleep=sleep), sdk, sleep


class TestGenerationClient:
    @pytest.mark.asyncio
    async def test_success_returns_content_and_usage(self):
        client, sdk, sleep = make_client([completion('{"ok": true}', 10, 5)])

        response = await client.complete("system", "prompt", max_output_tokens=1500, temperature=0.3)

        assert response.content == '{"ok": true}'
        assert response.input_tokens == 10
        assert response.output_tokens == 5
        sleep.assert_not_called()

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 1500
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "prompt"},
        ]

    @pytest.mark.asyncio
    async def test_two_transient_failures_then_success(self):
        client, sdk, sleep = make_client([
            connection_error(),
            status_error(openai.InternalServerError, 500),
            completion("third time lucky"),
        ])

        response = await client.complete("system", "prompt", retries=2)

        assert response.content == "third time lucky"
        assert sdk.chat.completions.create.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_auth_failure_is_not_retried(self):
        auth_error = status_error(openai.AuthenticationError, 401)
        client, sdk, sleep = make_client([auth_error, auth_error])

        with pytest.raises(FatalServiceError) as exc:
            await client.complete("system", "prompt", retries=2)

        assert exc.value.status_code == 401
        assert sdk.chat.completions.create.await_count == 1
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_bad_request_is_not_retried(self):
        client, sdk, _ = make_client([status_error(openai.BadRequestError, 400)])

        with pytest.raises(FatalServiceError):
            await client.complete("system", "prompt")

        assert sdk.chat.completions.create.await_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried_until_exhausted(self):
        client, sdk, sleep = make_client([status_error(openai.RateLimitError, 429)] * 3)

        with pytest.raises(TransientServiceError) as exc:
            await client.complete("system", "prompt", retries=2)

        assert exc.value.attempts == 3
        assert sdk.chat.completions.create.await_count == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_text_is_transient(self):
        client, sdk, _ = make_client([completion(None), completion("recovered")])

        response = await client.complete("system", "prompt", retries=1)

        assert response.content == "recovered"
        assert sdk.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_retries_raises_last_error(self):
        client, sdk, sleep = make_client([connection_error()])

        with pytest.raises(TransientServiceError, match="Connection error"):
            await client.complete("system", "prompt", retries=0)

        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_usage_counts_as_zero(self):
        reply = completion("text")
        reply.usage = None
        client, _, _ = make_client([reply])

        response = await client.complete("system", "prompt")

        assert (response.input_tokens, response.output_tokens) == (0, 0)

    @pytest.mark.asyncio
    async def test_aclose_closes_sdk_client(self):
        client, sdk, _ = make_client([])
        sdk.close = AsyncMock()

        await client.aclose()

        sdk.close.assert_awaited_once()
