"""
Content extraction module.

Fetch strategies plus the markup parsers behind `ContentParser`.
"""
from app.features.evaluation.services.extraction.content_extractor import ContentExtractor
from app.features.evaluation.services.extraction.parsers import (
    ContentParser,
    HtmlContentParser,
    MarkdownContentParser,
)

__all__ = [
    "ContentExtractor",
    "ContentParser",
    "HtmlContentParser",
    "MarkdownContentParser",
]
