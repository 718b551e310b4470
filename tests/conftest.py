"""
Test configuration and fixtures for the Product Evaluator API.

External services are never contacted: API keys are cleared before the app is
imported and HTTP calls go through `httpx.MockTransport` fakes.
"""

import os
from typing import Generator

from dotenv import load_dotenv

import pytest
from fastapi.testclient import TestClient

load_dotenv()

for key in ("GENERATION_API_KEY", "PAGESPEED_API_KEY", "FIRECRAWL_API_KEY"):
    os.environ[key] = ""
os.environ["PIVOT_INCLUDES_VALUE_FIVE"] = "false"


VALID_EVALUATION = {
    "firstImpressions": {
        "whatItDoes": "Sends invoices for freelancers.",
        "targetUser": "Freelance designers",
        "trustLevel": "medium",
    },
    "product": {
        "usability": {"score": 8, "reason": "Clear onboarding."},
        "value": {"score": 7, "reason": "Solves a real billing pain."},
        "features": {"score": 6, "reason": "Core invoicing is complete."},
        "polish": {"score": 7, "reason": "Consistent design."},
        "competition": {"score": 5, "reason": "Crowded market."},
    },
    "business": {
        "market": {"score": 7, "reason": "Many freelancers."},
        "monetization": {"score": 8, "reason": "Visible pricing tiers."},
        "maintenance": {"score": 3, "reason": "Simple stack."},
        "growth": {"score": 6, "reason": "Invoices spread the brand."},
    },
    "recommendations": ["Add testimonials", "Show a demo video", "Shorten signup"],
    "summary": "A focused invoicing tool with clear value and room to build trust.",
}


@pytest.fixture
def valid_evaluation() -> dict:
    import copy

    return copy.deepcopy(VALID_EVALUATION)


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    This fixture provides a clean TestClient instance for each test function,
    ensuring proper isolation between tests.
    """
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()
