"""
Content Schemas

Signals extracted from a product's landing page.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


MAX_HEADINGS = 20
MAX_CONTENT_LENGTH = 6000
MAX_CTAS = 10
TRUNCATION_MARKER = "..."


class ExtractedContent(BaseModel):
    """Structured page signals. When `error` is set every other field is empty."""
    title: Optional[str] = None
    meta_description: Optional[str] = None
    headings: List[str] = Field(default_factory=list)
    main_content: str = ""

    has_pricing: bool = False
    has_login: bool = False
    has_social_proof: bool = False
    has_security_badges: bool = False
    has_video: bool = False
    has_faq: bool = False

    ctas: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)

    error: Optional[str] = None

    @classmethod
    def empty(cls, error: str) -> "ExtractedContent":
        return cls(error=error)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Acme - Invoicing for freelancers",
                "meta_description": "Send invoices in seconds.",
                "headings": ["Invoicing made simple", "Pricing"],
                "main_content": "Invoicing made simple. Start free ...",
                "has_pricing": True,
                "has_login": True,
                "has_social_proof": False,
                "has_security_badges": False,
                "has_video": False,
                "has_faq": True,
                "ctas": ["Start free trial"],
                "technologies": ["Next.js", "Stripe"],
                "error": None,
            }
        }
