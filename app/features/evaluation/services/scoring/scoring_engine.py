"""
Scoring engine.

Pure functions turning a flat map of 1-10 metric scores into category
composites, a weighted overall score and a recommendation. The scores may come
from the AI pipeline or be entered by hand; nothing here cares which.
"""
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from app.features.evaluation.schemas.scoring import ComputedScores, Recommendation
from app.features.evaluation.services.scoring.metrics import (
    CATEGORY_WEIGHTS,
    PERSONAL_METRICS,
    PRODUCT_METRICS,
)

ScoreMap = Mapping[str, Optional[float]]

# Higher maintenance means more cost, so it contributes as (10 - maintenance)
MAINTENANCE_CEILING = 10


@dataclass(frozen=True)
class RecommendationPolicy:
    """
    Tunable parts of the recommendation classifier.

    pivot_includes_value_five: PIVOT matches `value <= 5` instead of `value < 5`.
    Only changes the outcome when value == 5 and maintenance rules out KEEP.
    """
    pivot_includes_value_five: bool = False


DEFAULT_POLICY = RecommendationPolicy()


def average(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def calculate_product_score(scores: ScoreMap) -> Optional[float]:
    return average(scores.get(key) for key in PRODUCT_METRICS)


def calculate_business_score(scores: ScoreMap) -> Optional[float]:
    values = [scores.get("market"), scores.get("monetization"), scores.get("growth")]

    maintenance = scores.get("maintenance")
    if maintenance is not None:
        values.append(MAINTENANCE_CEILING - maintenance)

    return average(values)


def calculate_personal_score(scores: ScoreMap) -> Optional[float]:
    return average(scores.get(key) for key in PERSONAL_METRICS)


def calculate_overall_score(
    product_score: Optional[float],
    business_score: Optional[float],
    personal_score: Optional[float],
) -> Optional[float]:
    """Weighted blend with weights renormalized over the categories present."""
    weighted = [
        (score, CATEGORY_WEIGHTS[category])
        for category, score in (
            ("product", product_score),
            ("business", business_score),
            ("personal", personal_score),
        )
        if score is not None
    ]
    if not weighted:
        return None

    total_weight = sum(weight for _, weight in weighted)
    return sum(score * weight / total_weight for score, weight in weighted)


def calculate_recommendation(
    scores: ScoreMap,
    policy: RecommendationPolicy = DEFAULT_POLICY,
) -> Recommendation:
    """First matching rule wins: invest, drop, keep, pivot, otherwise pause."""
    product_score = calculate_product_score(scores)
    business_score = calculate_business_score(scores)
    value = scores.get("value")
    value = 0 if value is None else value
    maintenance = scores.get("maintenance")
    maintenance = 5 if maintenance is None else maintenance

    product = product_score if product_score is not None else 0
    business = business_score if business_score is not None else 0

    if value >= 7 and business >= 7:
        return Recommendation.INVEST

    if value <= 4:
        return Recommendation.DROP
    if maintenance >= 7 and product < 6:
        return Recommendation.DROP

    if value >= 5 and maintenance <= 4:
        return Recommendation.KEEP

    low_value = value <= 5 if policy.pivot_includes_value_five else value < 5
    if product >= 6 and low_value:
        return Recommendation.PIVOT

    return Recommendation.PAUSE


def _round(score: Optional[float]) -> Optional[float]:
    return round(score, 2) if score is not None else None


def compute_all_scores(
    scores: ScoreMap,
    policy: RecommendationPolicy = DEFAULT_POLICY,
) -> ComputedScores:
    product_score = calculate_product_score(scores)
    business_score = calculate_business_score(scores)
    personal_score = calculate_personal_score(scores)
    overall_score = calculate_overall_score(product_score, business_score, personal_score)

    return ComputedScores(
        product_score=_round(product_score),
        business_score=_round(business_score),
        personal_score=_round(personal_score),
        overall_score=_round(overall_score),
        recommendation=calculate_recommendation(scores, policy),
    )
