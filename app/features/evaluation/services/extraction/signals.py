"""
Heuristic page signals.

Fixed keyword/pattern sets applied to raw page content. Detection is
best-effort: a pattern can miss, but empty content never matches anything.
"""
import re
from typing import List

from bs4 import BeautifulSoup

from app.features.evaluation.schemas.content import MAX_CTAS

PRICING_PATTERN = re.compile(
    r"pricing|price|cost|subscription|plan|tier|monthly|annually|\$\d+|€\d+|£\d+", re.I
)
LOGIN_PATTERN = re.compile(r"sign\s*in|log\s*in|sign\s*up|create\s*account|register|auth", re.I)
SOCIAL_PROOF_PATTERN = re.compile(
    r"testimonial|review|customer|client|trusted\s+by|used\s+by|companies\s+use|loved\s+by"
    r"|\d+\s*\+?\s*(?:users|customers|companies)|rating|stars",
    re.I,
)
SECURITY_BADGE_PATTERN = re.compile(
    r"ssl|secure|encrypted|pci\s*compliant|gdpr|soc\s*2|256[-\s]?bit|https|verified"
    r"|trust(?:ed)?[\s-]?(?:site|badge|seal)",
    re.I,
)
VIDEO_PATTERN = re.compile(r"youtube\.com|vimeo\.com|<video|wistia\.com|loom\.com", re.I)
FAQ_PATTERN = re.compile(r"faq|frequently\s+asked|common\s+questions", re.I)

# (technology, markers) - any marker present in the raw HTML counts
TECHNOLOGY_FINGERPRINTS = [
    ("Next.js", ("__NEXT_DATA__", "_next/")),
    ("Nuxt", ("__NUXT__", "/_nuxt/")),
    ("React", ("data-reactroot", "__REACT_")),
    ("Angular", ("ng-app", "ng-controller")),
    ("Vue", ("data-v-", "Vue.js")),
    ("Svelte", ("data-svelte",)),
    ("Shopify", ("shopify", "Shopify")),
    ("WordPress", ("wordpress", "wp-content")),
    ("Stripe", ("stripe",)),
    ("Intercom", ("intercom",)),
    ("Google Analytics", ("google-analytics", "gtag")),
]

CTA_CLASS_PATTERN = re.compile(r"btn|button|cta", re.I)
CTA_MIN_LENGTH = 2
CTA_MAX_LENGTH = 49


def detect_flags(content: str) -> dict:
    """Boolean feature flags for the combined raw content."""
    return {
        "has_pricing": bool(PRICING_PATTERN.search(content)),
        "has_login": bool(LOGIN_PATTERN.search(content)),
        "has_social_proof": bool(SOCIAL_PROOF_PATTERN.search(content)),
        "has_security_badges": bool(SECURITY_BADGE_PATTERN.search(content)),
        "has_video": bool(VIDEO_PATTERN.search(content)),
        "has_faq": bool(FAQ_PATTERN.search(content)),
    }


def detect_technologies(html: str) -> List[str]:
    return [
        name
        for name, markers in TECHNOLOGY_FINGERPRINTS
        if any(marker in html for marker in markers)
    ]


def _has_cta_class(classes) -> bool:
    if not classes:
        return False
    if isinstance(classes, str):
        classes = [classes]
    return any(CTA_CLASS_PATTERN.search(c) for c in classes)


def extract_ctas(html: str) -> List[str]:
    """Call-to-action labels from buttons and button-styled links."""
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    candidates = [button.get_text(" ", strip=True) for button in soup.find_all("button")]
    candidates += [
        link.get_text(" ", strip=True)
        for link in soup.find_all("a", class_=_has_cta_class)
    ]

    ctas = []
    for text in candidates:
        text = " ".join(text.split())
        if CTA_MIN_LENGTH <= len(text) <= CTA_MAX_LENGTH:
            ctas.append(text)
    return ctas[:MAX_CTAS]
