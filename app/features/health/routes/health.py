from fastapi import APIRouter, status

from app.platform.config import settings
from app.platform.response import api_response


router = APIRouter()


def _enabled(value) -> str:
    return "enabled" if value else "disabled"


@router.get("/health", tags=["health"])
async def health_check():
    """Liveness plus which optional integrations are configured."""
    return api_response(
        data={
            "status": "ok",
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "integrations": {
                "ai_evaluation": _enabled(settings.GENERATION_API_KEY),
                "rendered_scraping": _enabled(settings.FIRECRAWL_API_KEY),
                "pagespeed_api_key": _enabled(settings.PAGESPEED_API_KEY),
            },
        },
        message="Service is healthy",
        status_code=status.HTTP_200_OK,
    )
