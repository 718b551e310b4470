"""
Markup parsers for the content extractor.

Every parser exposes `extract(markup) -> ExtractedContent`, so the fetch
strategies never depend on how the markup is read.
"""
import re
from typing import List, Optional, Protocol

from bs4 import BeautifulSoup, Comment

from app.features.evaluation.schemas.content import (
    MAX_CONTENT_LENGTH,
    MAX_HEADINGS,
    TRUNCATION_MARKER,
    ExtractedContent,
)
from app.features.evaluation.services.extraction.signals import (
    detect_flags,
    detect_technologies,
    extract_ctas,
)

MAX_HEADING_LENGTH = 200

STRIPPED_TAGS = ["script", "style", "noscript", "nav", "footer", "header"]
CONTENT_CONTAINER_PATTERN = re.compile(r"content|main|app", re.I)


class ContentParser(Protocol):
    def extract(self, markup: str) -> ExtractedContent:
        ...


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def truncate_content(text: str) -> str:
    if len(text) > MAX_CONTENT_LENGTH:
        return text[:MAX_CONTENT_LENGTH] + TRUNCATION_MARKER
    return text


def keep_headings(candidates: List[str]) -> List[str]:
    headings = [h for h in candidates if h and len(h) < MAX_HEADING_LENGTH]
    return headings[:MAX_HEADINGS]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _is_content_container(tag) -> bool:
    """A div whose id or any class mentions content, main or app."""
    if tag.name != "div":
        return False
    if CONTENT_CONTAINER_PATTERN.search(tag.get("id") or ""):
        return True
    return any(CONTENT_CONTAINER_PATTERN.search(c) for c in tag.get("class") or [])


class HtmlContentParser:
    """Reads raw HTML with BeautifulSoup."""

    def extract(self, markup: str) -> ExtractedContent:
        soup = BeautifulSoup(markup, "html.parser")

        title = _clean(soup.title.get_text()) if soup.title else None

        meta_description = None
        description_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
        if description_tag and description_tag.get("content"):
            meta_description = _clean(description_tag["content"])

        headings = keep_headings(
            [collapse_whitespace(h.get_text(" ")) for h in soup.find_all(["h1", "h2", "h3"])]
        )

        main_content = truncate_content(self._main_text(soup))

        return ExtractedContent(
            title=title,
            meta_description=meta_description,
            headings=headings,
            main_content=main_content,
            ctas=extract_ctas(markup),
            technologies=detect_technologies(markup),
            **detect_flags(markup),
        )

    @staticmethod
    def _main_text(soup: BeautifulSoup) -> str:
        for tag in soup.find_all(STRIPPED_TAGS):
            tag.decompose()
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

        container = (
            soup.find("main")
            or soup.find("article")
            or soup.find(_is_content_container)
            or soup
        )
        return collapse_whitespace(container.get_text(" "))


MARKDOWN_HEADING_PATTERN = re.compile(r"^#{1,3}\s+(.+)$", re.M)


class MarkdownContentParser:
    """
    Reads markdown produced by the rendering service.

    The service also returns rendered HTML and page metadata; those feed the
    technology/CTA detection and the title/description fields.
    """

    def __init__(
        self,
        html: str = "",
        title: Optional[str] = None,
        description: Optional[str] = None,
    ):
        self.html = html
        self.title = _clean(title)
        self.description = _clean(description)

    def extract(self, markup: str) -> ExtractedContent:
        headings = keep_headings(
            [m.group(1).strip() for m in MARKDOWN_HEADING_PATTERN.finditer(markup)]
        )

        combined = f"{markup} {self.html}"

        return ExtractedContent(
            title=self.title,
            meta_description=self.description,
            headings=headings,
            main_content=truncate_content(self.strip_markdown(markup)),
            ctas=extract_ctas(self.html),
            technologies=detect_technologies(self.html),
            **detect_flags(combined),
        )

    @staticmethod
    def strip_markdown(markdown: str) -> str:
        text = re.sub(r"```[\s\S]*?```", "", markdown)
        text = re.sub(r"^#{1,6}\s+", "", text, flags=re.M)
        text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
        text = re.sub(r"[*_]{1,2}([^*_]+)[*_]{1,2}", r"\1", text)
        text = re.sub(r"`[^`]+`", "", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()
