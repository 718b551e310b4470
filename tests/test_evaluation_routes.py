from unittest.mock import AsyncMock, MagicMock

import pytest

from app.features.evaluation.dependencies.evaluation import get_orchestrator
from app.features.evaluation.schemas.evaluation import EvaluationResult
from app.features.evaluation.schemas.scoring import ComputedScores, Recommendation

PROJECT = {
    "name": "Acme Invoicing",
    "url": "https://acme.example.com",
    "description": "Invoicing for freelancers",
}
MANUAL_SCORES = {"usability": 8, "features": 6, "polish": 6, "value": 6, "maintenance": 2}


def override_orchestrator(test_app, result: EvaluationResult) -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.evaluate = AsyncMock(return_value=result)
    test_app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return orchestrator


class TestScoreEndpoint:
    def test_computes_scores(self, client):
        response = client.post(
            "/api/v1/evaluations/score",
            json={"scores": MANUAL_SCORES, "notes": {"usability": "Onboarding is clear"}},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "success"
        assert payload["message"] == "Scores computed"

        data = payload["data"]
        assert data["scores"]["usability"] == 8
        assert data["scores"]["passion"] is None
        assert data["notes"] == {"usability": "Onboarding is clear"}
        computed = data["computed"]
        assert computed["product_score"] == 6.5
        assert computed["business_score"] == 8.0
        assert computed["personal_score"] is None
        assert computed["overall_score"] == pytest.approx(7.06, abs=0.01)
        assert computed["recommendation"] == "keep"

    def test_empty_scores_drop(self, client):
        response = client.post("/api/v1/evaluations/score", json={"scores": {}})

        assert response.status_code == 200
        computed = response.json()["data"]["computed"]
        assert computed["overall_score"] is None
        assert computed["recommendation"] == "drop"

    def test_rejects_out_of_range_score(self, client):
        response = client.post("/api/v1/evaluations/score", json={"scores": {"usability": 11}})

        assert response.status_code == 422
        payload = response.json()
        assert payload["status"] == "error"
        assert payload["message"] == "Validation failed"
        assert payload["errors"][0]["field"] == "scores.usability"

    def test_rejects_string_score(self, client):
        response = client.post("/api/v1/evaluations/score", json={"scores": {"usability": "8"}})
        assert response.status_code == 422

    def test_rejects_unknown_note(self, client):
        response = client.post(
            "/api/v1/evaluations/score",
            json={"scores": MANUAL_SCORES, "notes": {"vibes": "great"}},
        )
        assert response.status_code == 422

    def test_rejects_long_note(self, client):
        response = client.post(
            "/api/v1/evaluations/score",
            json={"scores": MANUAL_SCORES, "notes": {"usability": "x" * 501}},
        )
        assert response.status_code == 422


class TestReportEndpoint:
    def test_generates_markdown(self, client):
        response = client.post(
            "/api/v1/evaluations/report",
            json={"project": PROJECT, "scores": MANUAL_SCORES, "notes": {"value": "Clear pitch"}},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["message"] == "Report generated"
        markdown = payload["data"]["markdown"]
        assert markdown.startswith("# Project Evaluation: Acme Invoicing")
        assert "**Recommendation:** KEEP" in markdown
        assert '"Clear pitch"' in markdown
        assert payload["data"]["computed"]["recommendation"] == "keep"

    def test_rejects_invalid_project_url(self, client):
        response = client.post(
            "/api/v1/evaluations/report",
            json={"project": {**PROJECT, "url": "not a url"}, "scores": MANUAL_SCORES},
        )
        assert response.status_code == 422


class TestAIEvaluationEndpoint:
    def test_unavailable_without_api_key(self, client):
        response = client.post("/api/v1/evaluations/ai", json={"project": PROJECT})

        assert response.status_code == 503
        payload = response.json()
        assert payload["status"] == "error"
        assert "GENERATION_API_KEY" in payload["message"]

    def test_returns_evaluation(self, client, test_app):
        result = EvaluationResult(
            success=True,
            scores={"usability": 8, "value": 7},
            reasoning={"usability": "Clear onboarding.", "summary": "Solid."},
            computed=ComputedScores(
                product_score=7.5,
                business_score=None,
                personal_score=None,
                overall_score=7.5,
                recommendation=Recommendation.PAUSE,
            ),
            estimated_cost=0.0105,
        )
        orchestrator = override_orchestrator(test_app, result)

        response = client.post(
            "/api/v1/evaluations/ai",
            json={"project": PROJECT, "personal_scores": {"passion": 9}},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["message"] == "AI evaluation completed"
        assert payload["data"]["success"] is True
        assert payload["data"]["computed"]["recommendation"] == "pause"
        assert payload["data"]["reasoning"]["summary"] == "Solid."

        project, personal = orchestrator.evaluate.await_args.args
        assert project.name == "Acme Invoicing"
        assert personal.passion == 9

    def test_failed_run_is_server_error(self, client, test_app):
        override_orchestrator(test_app, EvaluationResult.failure("HTTP 401"))

        response = client.post("/api/v1/evaluations/ai", json={"project": PROJECT})

        assert response.status_code == 500
        payload = response.json()
        assert payload["status"] == "error"
        assert payload["message"] == "HTTP 401"
