"""
Markdown export of an evaluation.

The report is meant to be pasted into an assistant chat, so it ends with a
request for improvement suggestions focused on the weak areas.
"""
from datetime import date
from typing import Mapping, Optional

from app.features.evaluation.schemas.evaluation import ProjectInput
from app.features.evaluation.schemas.scoring import ComputedScores
from app.features.evaluation.services.scoring.metrics import (
    ALL_METRICS,
    BUSINESS_METRICS,
    CATEGORY_WEIGHTS,
    METRIC_DEFINITIONS,
    PERSONAL_METRICS,
    PRODUCT_METRICS,
    RECOMMENDATION_INFO,
)

WEAK_SCORE = 4
WEAK_INVERTED_SCORE = 7


def _score(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.1f}"


def _metric_line(scores: Mapping[str, Optional[int]], keys) -> str:
    parts = []
    for key in keys:
        definition = METRIC_DEFINITIONS[key]
        value = scores.get(key)
        suffix = " (low=good)" if definition.inverted else ""
        parts.append(f"{key.capitalize()}: {'-' if value is None else value}{suffix}")
    return ", ".join(parts)


def is_weak(key: str, score: Optional[int]) -> bool:
    if score is None:
        return False
    if METRIC_DEFINITIONS[key].inverted:
        return score >= WEAK_INVERTED_SCORE
    return score <= WEAK_SCORE


def format_evaluation_markdown(
    project: ProjectInput,
    scores: Mapping[str, Optional[int]],
    computed: ComputedScores,
    notes: Optional[Mapping[str, str]] = None,
    evaluated_on: Optional[date] = None,
) -> str:
    notes = notes or {}
    evaluated_on = evaluated_on or date.today()
    info = RECOMMENDATION_INFO[computed.recommendation]

    weak_areas = []
    other_notes = []
    for key in ALL_METRICS:
        definition = METRIC_DEFINITIONS[key]
        score = scores.get(key)
        note = notes.get(key)
        if is_weak(key, score):
            suffix = " (too high - lower is better)" if definition.inverted else ""
            quoted = f' - "{note}"' if note else ""
            weak_areas.append(f"- **{definition.label}:** {score}/10{suffix}{quoted}")
        elif note:
            other_notes.append(f'- **{definition.label}:** "{note}"')

    lines = [
        f"# Project Evaluation: {project.name}",
        "",
        f"**URL:** {project.url}",
    ]
    if project.description:
        lines.append(f"**Description:** {project.description}")
    lines += [
        f"**Evaluated:** {evaluated_on.strftime('%B')} {evaluated_on.day}, {evaluated_on.year}",
        f"**Recommendation:** {info['label']} - {info['description']}",
        "",
        "## Scores",
        "",
        f"**Overall Score:** {_score(computed.overall_score)}/10",
        "",
        "| Category | Score | Individual Metrics |",
        "|----------|-------|-------------------|",
        f"| Product Quality | {_score(computed.product_score)}/10 | {_metric_line(scores, PRODUCT_METRICS)} |",
        f"| Business Viability | {_score(computed.business_score)}/10 | {_metric_line(scores, BUSINESS_METRICS)} |",
        f"| Personal Investment | {_score(computed.personal_score)}/10 | {_metric_line(scores, PERSONAL_METRICS)} |",
        "",
        "### Scoring Weights",
        f"- Product Quality: {CATEGORY_WEIGHTS['product']:.0%} of overall score",
        f"- Business Viability: {CATEGORY_WEIGHTS['business']:.0%} of overall score",
        f"- Personal Investment: {CATEGORY_WEIGHTS['personal']:.0%} of overall score",
    ]

    if weak_areas:
        lines += ["", "## Weak Areas (need improvement)", *weak_areas]

    if other_notes:
        lines += ["", "## Notes", *other_notes]

    lines += [
        "",
        "---",
        "",
        "Based on this evaluation data, please suggest 3-5 specific, actionable improvements "
        "that would have the highest impact on increasing the overall score. Focus especially "
        "on the weak areas identified above.",
        "",
    ]
    return "\n".join(lines)
