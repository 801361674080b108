"""
Eligibility Engine

Turns an applicant's request into an eligibility decision:

1. Simulate a credit score (see ``credit_score``)
2. Gate on minimum score and minimum income
3. Grant a fraction of the requested amount based on the score tier
4. Cap the amount at what the applicant can afford
5. Explain the outcome in a human-readable message

SCORE TIERS:
------------
- 750+:    Excellent - full requested amount
- 700-749: Very good - 90%
- 650-699: Good      - 75%
- 600-649: Fair      - 50%
- < 600:   Rejected

Tiered amounts are floored to whole currency units. The full-amount tier
returns the requested amount untouched, so a fractional request (e.g.
50000.5) passes through unfloored at 750+.

AFFORDABILITY CAP:
------------------
No applicant is offered more than five years of income
(monthly_income * 12 * 5), whatever the score tier says. When the cap
applies, the percentage quoted in the message is recomputed from the capped
amount.

The engine is pure apart from the random draw, which comes from the
injected generator. It never raises for validated input: approvals and
rejections are both ordinary return values. Persisting the outcome is the
caller's job.
"""
import math
import random
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from loan_eligibility.logging import get_logger
from loan_eligibility.scoring.credit_score import RandomSource, simulate_score

logger = get_logger(__name__)

MIN_APPROVAL_SCORE = 600
MIN_MONTHLY_INCOME = 20000
AFFORDABILITY_YEARS = 5

# (inclusive lower bound on score, fraction of requested amount)
SCORE_TIERS = [
    (750, 1.0),
    (700, 0.9),
    (650, 0.75),
]
FAIR_TIER_FRACTION = 0.5

SCORE_BANDS = [
    (750, "excellent"),
    (700, "very_good"),
    (650, "good"),
    (600, "fair"),
]

LOW_SCORE_MESSAGE = (
    "Your credit score is below the minimum required threshold. "
    "Please improve your credit history and try again."
)
LOW_INCOME_MESSAGE = "Your monthly income does not meet the minimum requirement of ₹20,000."


@dataclass(frozen=True)
class EligibilityRequest:
    """Validated applicant input."""
    name: str
    requested_amount: float
    monthly_income: float


@dataclass(frozen=True)
class EligibilityDecision:
    """Outcome of a single evaluation."""
    eligible: bool
    simulated_score: int  # 300-900
    max_eligible_amount: float
    message: str


def score_band(score: int) -> str:
    """Band label for a score, used in logs and metric labels."""
    for threshold, band in SCORE_BANDS:
        if score >= threshold:
            return band
    return "poor"


def tier_fraction(score: int) -> float:
    """Fraction of the requested amount granted at this score (score >= 600)."""
    for threshold, fraction in SCORE_TIERS:
        if score >= threshold:
            return fraction
    return FAIR_TIER_FRACTION


def tier_amount(requested_amount: float, score: int) -> float:
    """Score-tier amount before the affordability cap."""
    fraction = tier_fraction(score)
    if fraction < 1.0:
        return float(math.floor(requested_amount * fraction))
    return requested_amount


def max_affordable_amount(monthly_income: float) -> float:
    return monthly_income * 12 * AFFORDABILITY_YEARS


def rejection_reason(decision: EligibilityDecision) -> Optional[str]:
    """Which gate rejected the decision, or None for approvals."""
    if decision.eligible:
        return None
    if decision.simulated_score < MIN_APPROVAL_SCORE:
        return "low_score"
    return "low_income"


def was_capped(request: EligibilityRequest, decision: EligibilityDecision) -> bool:
    """True when the affordability cap, not the score tier, set the amount."""
    if not decision.eligible:
        return False
    affordable = max_affordable_amount(request.monthly_income)
    return tier_amount(request.requested_amount, decision.simulated_score) > affordable


def format_percentage(fraction: float) -> str:
    """Whole percent, rounding halves up (62.5 -> "63")."""
    percent = Decimal(repr(fraction * 100))
    return str(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def approval_message(name: str, fraction: float) -> str:
    message = f"Congratulations {name}! You are eligible for a loan."
    if fraction < 1.0:
        message += (
            f" Based on your credit profile, you can receive up to "
            f"{format_percentage(fraction)}% of the requested amount."
        )
    else:
        message += " You qualify for the full requested amount!"
    return message


def decide(request: EligibilityRequest, score: int) -> EligibilityDecision:
    """
    Apply the eligibility rules to an already simulated score.

    Args:
        request: Validated applicant input
        score: Simulated credit score (300-900)

    Returns:
        EligibilityDecision; rejected decisions always carry amount 0
    """
    if score < MIN_APPROVAL_SCORE:
        logger.info("eligibility_rejected", reason="low_score", score=score)
        return EligibilityDecision(
            eligible=False,
            simulated_score=score,
            max_eligible_amount=0.0,
            message=LOW_SCORE_MESSAGE,
        )

    # Income below the minimum always simulates under 600 today, so this gate
    # only fires if the income brackets or the jitter range change.
    if request.monthly_income < MIN_MONTHLY_INCOME:
        logger.info("eligibility_rejected", reason="low_income", score=score)
        return EligibilityDecision(
            eligible=False,
            simulated_score=score,
            max_eligible_amount=0.0,
            message=LOW_INCOME_MESSAGE,
        )

    fraction = tier_fraction(score)
    amount = tier_amount(request.requested_amount, score)

    affordable = max_affordable_amount(request.monthly_income)
    if amount > affordable:
        logger.info(
            "affordability_cap_applied",
            tier_amount=amount,
            max_affordable=affordable,
        )
        amount = affordable
        fraction = affordable / request.requested_amount

    logger.info(
        "eligibility_approved",
        score=score,
        score_band=score_band(score),
        max_eligible_amount=amount,
    )

    return EligibilityDecision(
        eligible=True,
        simulated_score=score,
        max_eligible_amount=amount,
        message=approval_message(request.name, fraction),
    )


class EligibilityEngine:
    """
    Evaluates loan eligibility requests.

    The random source is the only state. Pass a seeded ``random.Random`` (or
    any object with ``randint``) for reproducible scores; by default a fresh
    OS-seeded generator is created per engine.
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = rng if rng is not None else random.Random()

    def simulate_score(self, monthly_income: float, requested_amount: float) -> int:
        return simulate_score(monthly_income, requested_amount, self.rng)

    def evaluate(self, request: EligibilityRequest) -> EligibilityDecision:
        """Simulate a score for the request and decide on it."""
        score = self.simulate_score(request.monthly_income, request.requested_amount)
        return decide(request, score)


def evaluate(
    name: str,
    requested_amount: float,
    monthly_income: float,
    rng: Optional[RandomSource] = None,
) -> EligibilityDecision:
    """Evaluate a single applicant with a one-off engine."""
    request = EligibilityRequest(
        name=name,
        requested_amount=requested_amount,
        monthly_income=monthly_income,
    )
    return EligibilityEngine(rng).evaluate(request)
