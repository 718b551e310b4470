"""
Performance Schemas

Reduced PageSpeed Insights audit results.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class Issue(BaseModel):
    category: str  # mobile, accessibility, security, seo
    severity: Literal["high", "medium", "low"]
    message: str
    recommendation: Optional[str] = None


class PerformanceReport(BaseModel):
    """0-100 scores; a missing audit leaves every score null and no issues."""
    performance: Optional[int] = None
    accessibility: Optional[int] = None
    seo: Optional[int] = None
    mobile: Optional[int] = None
    technical: Optional[int] = None
    security: Optional[int] = None
    issues: List[Issue] = Field(default_factory=list)

    def has_scores(self) -> bool:
        return any(
            value is not None
            for value in (
                self.performance,
                self.accessibility,
                self.seo,
                self.mobile,
                self.technical,
                self.security,
            )
        )


class PerformanceSummary(BaseModel):
    """Headline audit scores returned with an evaluation."""
    performance: Optional[int] = None
    accessibility: Optional[int] = None
    seo: Optional[int] = None
    mobile: Optional[int] = None

    @classmethod
    def from_report(cls, report: PerformanceReport) -> "PerformanceSummary":
        return cls(
            performance=report.performance,
            accessibility=report.accessibility,
            seo=report.seo,
            mobile=report.mobile,
        )
