"""
Scoring engine module.

Composite scores and the recommendation classifier.
"""
from app.features.evaluation.services.scoring.scoring_engine import (
    RecommendationPolicy,
    average,
    calculate_business_score,
    calculate_overall_score,
    calculate_personal_score,
    calculate_product_score,
    calculate_recommendation,
    compute_all_scores,
)

__all__ = [
    "RecommendationPolicy",
    "average",
    "calculate_business_score",
    "calculate_overall_score",
    "calculate_personal_score",
    "calculate_product_score",
    "calculate_recommendation",
    "compute_all_scores",
]
