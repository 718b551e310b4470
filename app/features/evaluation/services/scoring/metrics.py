"""
Metric and recommendation definitions.

Shared by the prompt rubric, the response mapping and the evaluation report.
"""
from dataclasses import dataclass, field
from typing import Dict

from app.features.evaluation.schemas.scoring import Recommendation


@dataclass(frozen=True)
class MetricDefinition:
    key: str
    label: str
    category: str  # product, business, personal
    question: str
    hints: Dict[int, str] = field(default_factory=dict)
    inverted: bool = False  # lower is better


PRODUCT_METRICS = ("usability", "value", "features", "polish", "competition")
BUSINESS_METRICS = ("market", "monetization", "maintenance", "growth")
PERSONAL_METRICS = ("passion", "learning", "pride")

AI_METRICS = PRODUCT_METRICS + BUSINESS_METRICS
ALL_METRICS = PRODUCT_METRICS + BUSINESS_METRICS + PERSONAL_METRICS

CATEGORY_WEIGHTS = {"product": 0.5, "business": 0.3, "personal": 0.2}


METRIC_DEFINITIONS: Dict[str, MetricDefinition] = {
    definition.key: definition
    for definition in (
        MetricDefinition(
            "usability", "Usability", "product", "How easy is it to use?",
            {1: "Confusing, users get lost", 5: "Decent, some learning curve",
             10: "Intuitive, anyone can use it instantly"},
        ),
        MetricDefinition(
            "value", "User Value", "product", "Does it solve a real problem?",
            {1: "No clear problem solved", 5: "Solves a problem, but not well",
             10: "Essential, users would pay for this"},
        ),
        MetricDefinition(
            "features", "Features", "product", "How complete is the feature set?",
            {1: "Missing critical features", 5: "Core features done, some gaps",
             10: "Full-featured, nothing missing"},
        ),
        MetricDefinition(
            "polish", "Polish", "product", "What's the quality level?",
            {1: "Buggy, rough edges everywhere", 5: "Works but feels unfinished",
             10: "Professional, polished experience"},
        ),
        MetricDefinition(
            "competition", "Competition", "product", "How do you compare to competitors?",
            {1: "Many better alternatives exist", 5: "On par with competition",
             10: "Best in class, clear differentiator"},
        ),
        MetricDefinition(
            "market", "Market Size", "business", "How big is the potential market?",
            {1: "Tiny niche, very few users", 5: "Medium market, decent audience",
             10: "Huge market, mass appeal"},
        ),
        MetricDefinition(
            "monetization", "Monetization", "business", "Can this make money?",
            {1: "No clear path to revenue", 5: "Could monetize somehow",
             10: "Clear, proven revenue model"},
        ),
        MetricDefinition(
            "maintenance", "Maintenance Cost", "business", "How much effort to maintain?",
            {1: "Set it and forget it", 5: "Regular updates needed",
             10: "Constant firefighting"},
            inverted=True,
        ),
        MetricDefinition(
            "growth", "Growth Potential", "business", "Can it scale and grow?",
            {1: "No growth path", 5: "Some growth possible",
             10: "Viral potential, exponential growth"},
        ),
        MetricDefinition(
            "passion", "Passion", "personal", "Do you enjoy working on it?",
            {1: "Dread it", 5: "It's okay", 10: "Love it, can't wait to work on it"},
        ),
        MetricDefinition(
            "learning", "Learning", "personal", "Are you gaining skills?",
            {1: "Nothing new to learn", 5: "Some learning opportunities",
             10: "Constantly learning new things"},
        ),
        MetricDefinition(
            "pride", "Pride", "personal", "Would you show it in your portfolio?",
            {1: "Embarrassed by it", 5: "It's decent work", 10: "Proud to show anyone"},
        ),
    )
}


RECOMMENDATION_INFO: Dict[Recommendation, Dict[str, str]] = {
    Recommendation.INVEST: {
        "label": "INVEST",
        "description": "High potential - double down on this app",
    },
    Recommendation.KEEP: {
        "label": "KEEP",
        "description": "Solid performer - maintain with minor updates",
    },
    Recommendation.PIVOT: {
        "label": "PIVOT",
        "description": "Good foundation - needs new direction",
    },
    Recommendation.PAUSE: {
        "label": "PAUSE",
        "description": "Uncertain - revisit in 3 months",
    },
    Recommendation.DROP: {
        "label": "DROP",
        "description": "Low return - consider archiving",
    },
}
