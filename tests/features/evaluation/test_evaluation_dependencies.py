from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

from app.features.evaluation.dependencies import evaluation as dependencies
from app.features.evaluation.services.orchestration.evaluator import EvaluationOrchestrator


class TestGetOrchestrator:
    @pytest.mark.asyncio
    async def test_missing_key_is_service_unavailable(self, monkeypatch):
        monkeypatch.setattr(dependencies.settings, "GENERATION_API_KEY", "")

        with pytest.raises(HTTPException) as exc_info:
            await dependencies.get_orchestrator().__anext__()

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_generation_client_is_closed_after_request(self, monkeypatch):
        monkeypatch.setattr(dependencies.settings, "GENERATION_API_KEY", "test-key")
        generation_client = MagicMock()
        generation_client.aclose = AsyncMock()

        with patch.object(
            dependencies.GenerationClient, "from_settings", return_value=generation_client
        ):
            provider = dependencies.get_orchestrator()
            orchestrator = await provider.__anext__()

            assert isinstance(orchestrator, EvaluationOrchestrator)
            assert orchestrator.generation_client is generation_client
            generation_client.aclose.assert_not_awaited()

            with pytest.raises(StopAsyncIteration):
                await provider.__anext__()

        generation_client.aclose.assert_awaited_once()
