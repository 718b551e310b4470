from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Product Evaluator"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True

    # ── Text generation ─────────────────────────
    # Without a key the AI evaluation endpoint is disabled (503).
    GENERATION_API_KEY: Optional[str] = None
    GENERATION_BASE_URL: str = "https://openrouter.ai/api/v1"
    GENERATION_MODEL: str = "anthropic/claude-sonnet-4"
    GENERATION_MAX_OUTPUT_TOKENS: int = 1500
    GENERATION_TEMPERATURE: float = 0.3
    GENERATION_RETRIES: int = 2
    # USD per 1K tokens, used for the cost estimate only
    GENERATION_INPUT_COST_PER_1K: float = 0.003
    GENERATION_OUTPUT_COST_PER_1K: float = 0.015

    # ── Performance audit (PageSpeed Insights) ──
    # Optional: without a key requests run on the anonymous quota.
    PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_API_URL: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

    # ── Content extraction ──────────────────────
    # Optional: without a key pages are fetched directly (no JS rendering).
    FIRECRAWL_API_KEY: Optional[str] = None
    FIRECRAWL_API_URL: str = "https://api.firecrawl.dev/v1/scrape"
    FETCH_TIMEOUT_SECONDS: float = 15.0
    RENDER_TIMEOUT_SECONDS: float = 30.0

    # ── Scoring ─────────────────────────────────
    # When true a product with value == 5 that fails KEEP may still PIVOT.
    PIVOT_INCLUDES_VALUE_FIVE: bool = False

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
