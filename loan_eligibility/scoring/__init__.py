"""Credit score simulation and eligibility decisions."""
from loan_eligibility.scoring.credit_score import simulate_score
from loan_eligibility.scoring.eligibility import (
    EligibilityDecision,
    EligibilityEngine,
    EligibilityRequest,
    decide,
    evaluate,
    score_band,
)

__all__ = [
    "EligibilityDecision",
    "EligibilityEngine",
    "EligibilityRequest",
    "decide",
    "evaluate",
    "score_band",
    "simulate_score",
]
