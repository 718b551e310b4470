import asyncio
import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from app.features.evaluation.schemas.performance import Issue, PerformanceReport
from app.platform.config import Settings

logger = logging.getLogger(__name__)

LIGHTHOUSE_CATEGORIES = ["performance", "accessibility", "seo", "best-practices"]

# Sub-audits averaged into the technical score; a missing audit counts as passing
TECHNICAL_AUDITS = ["errors-in-console", "valid-source-maps", "no-unload-listeners"]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PerformanceAuditor:
    """
    Runs PageSpeed Insights for mobile and desktop and reduces the two
    Lighthouse reports to a handful of 0-100 scores plus categorized issues.

    Each strategy fails independently; a failed strategy is just a missing
    data source. This class never raises.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "PerformanceAuditor":
        return cls(api_key=settings.PAGESPEED_API_KEY, api_url=settings.PAGESPEED_API_URL, **kwargs)

    async def audit(self, url: str) -> PerformanceReport:
        mobile_data, desktop_data = await asyncio.gather(
            self.fetch_report(url, "mobile"),
            self.fetch_report(url, "desktop"),
        )
        try:
            return self.build_report(mobile_data, desktop_data)
        except (AttributeError, TypeError) as e:
            logger.error(f"Unexpected PageSpeed report shape for {url}: {e}")
            return PerformanceReport()

    async def fetch_report(self, url: str, strategy: str) -> Optional[Dict[str, Any]]:
        params = [("url", url), ("strategy", strategy)]
        params += [("category", category) for category in LIGHTHOUSE_CATEGORIES]
        if self.api_key:
            params.append(("key", self.api_key))

        try:
            # PageSpeed runs can take close to a minute; the service enforces its own limit
            async with httpx.AsyncClient(timeout=None, transport=self.transport) as client:
                response = await client.get(self.api_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"PageSpeed {strategy} request failed for {url}: {e}")
            return None

        if not response.is_success:
            logger.error(f"PageSpeed API error ({strategy}): {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"PageSpeed {strategy} returned invalid JSON: {e}")
            return None

        return data if isinstance(data, dict) else None

    @staticmethod
    def extract_category_scores(data: Optional[Dict[str, Any]]) -> Dict[str, Optional[int]]:
        scores = {category: None for category in LIGHTHOUSE_CATEGORIES}
        categories = ((data or {}).get("lighthouseResult") or {}).get("categories")
        if not isinstance(categories, dict):
            return scores

        for category in LIGHTHOUSE_CATEGORIES:
            score = (categories.get(category) or {}).get("score")
            if isinstance(score, (int, float)) and not isinstance(score, bool):
                scores[category] = round_half_up(score * 100)
        return scores

    @staticmethod
    def mobile_composite(
        mobile_performance: Optional[int],
        desktop_performance: Optional[int],
    ) -> Optional[int]:
        """80% of the mobile/desktop performance mean plus 20% mobile alone."""
        if mobile_performance is None:
            return None
        if desktop_performance is None:
            mean = mobile_performance
        else:
            mean = (mobile_performance + desktop_performance) / 2
        return round_half_up(mean * 0.8 + mobile_performance * 0.2)

    @staticmethod
    def find_issues(audits: Dict[str, Any]) -> List[Issue]:
        def score(audit_id: str) -> Optional[float]:
            value = (audits.get(audit_id) or {}).get("score")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            return value

        issues = []

        if score("viewport") == 0:
            issues.append(Issue(
                category="mobile",
                severity="high",
                message="Missing viewport meta tag",
                recommendation='Add <meta name="viewport" content="width=device-width, initial-scale=1">',
            ))

        tap_targets = score("tap-targets")
        if tap_targets is not None and tap_targets < 0.9:
            issues.append(Issue(
                category="mobile",
                severity="medium",
                message="Touch targets too small",
                recommendation="Ensure buttons and links are at least 48x48px",
            ))

        contrast = score("color-contrast")
        if contrast is not None and contrast < 1:
            issues.append(Issue(
                category="accessibility",
                severity="high",
                message="Insufficient color contrast",
                recommendation="Ensure text has at least 4.5:1 contrast ratio",
            ))

        if score("is-on-https") == 0:
            issues.append(Issue(
                category="security",
                severity="high",
                message="Site not served over HTTPS",
                recommendation="Enable HTTPS for your site",
            ))

        if score("meta-description") == 0:
            issues.append(Issue(
                category="seo",
                severity="medium",
                message="Missing meta description",
                recommendation="Add a meta description to improve search visibility",
            ))

        if score("document-title") == 0:
            issues.append(Issue(
                category="seo",
                severity="medium",
                message="Missing page title",
                recommendation="Add a <title> tag to your page",
            ))

        return issues

    @staticmethod
    def technical_score(audits: Dict[str, Any]) -> int:
        checks = []
        for audit_id in TECHNICAL_AUDITS:
            value = (audits.get(audit_id) or {}).get("score")
            checks.append(1 if value is None or isinstance(value, bool) else value)
        return round_half_up(sum(checks) / len(checks) * 100)

    @staticmethod
    def security_score(audits: Dict[str, Any]) -> int:
        return 100 if (audits.get("is-on-https") or {}).get("score") == 1 else 0

    def build_report(
        self,
        mobile_data: Optional[Dict[str, Any]],
        desktop_data: Optional[Dict[str, Any]],
    ) -> PerformanceReport:
        lighthouse = (mobile_data or {}).get("lighthouseResult")
        if not isinstance(lighthouse, dict):
            # No mobile audit means no evidence either way
            return PerformanceReport()

        mobile_scores = self.extract_category_scores(mobile_data)
        desktop_scores = self.extract_category_scores(desktop_data)

        audits = lighthouse.get("audits")
        if not isinstance(audits, dict):
            audits = {}

        return PerformanceReport(
            performance=mobile_scores["performance"],
            accessibility=mobile_scores["accessibility"],
            seo=mobile_scores["seo"],
            mobile=self.mobile_composite(
                mobile_scores["performance"], desktop_scores["performance"]
            ),
            technical=self.technical_score(audits),
            security=self.security_score(audits),
            issues=self.find_issues(audits),
        )
