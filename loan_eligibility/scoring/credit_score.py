"""
Simulated CIBIL Score

Produces a synthetic credit score in the 300-900 range from the two numbers
an applicant gives us: monthly income and the requested loan amount.

This is NOT a bureau pull. Nothing here looks at credit history; the score
is a stand-in so the rest of the eligibility flow has something realistic to
work with until a bureau integration exists.

SCORING METHODOLOGY:
--------------------
1. Base score from monthly income bracket

   - >= 100,000: 800
   - >= 75,000:  750
   - >= 50,000:  700
   - >= 30,000:  650
   - >= 20,000:  600
   - below:      550

2. Loan-to-annual-income adjustment

   ratio = requested_amount / (monthly_income * 12)

   - ratio > 3:       -50 (loan is several years of income)
   - 2 < ratio <= 3:  -30
   - ratio < 1:       +20 (loan is less than a year of income)
   - otherwise:       no change

3. Random jitter of -20..+20 (inclusive) drawn from the injected generator

4. Clamp to [300, 900]
"""
from typing import Protocol

from loan_eligibility.logging import get_logger

logger = get_logger(__name__)

MIN_SCORE = 300
MAX_SCORE = 900

# (inclusive lower bound on monthly income, base score)
INCOME_BRACKETS = [
    (100000, 800),
    (75000, 750),
    (50000, 700),
    (30000, 650),
    (20000, 600),
]
DEFAULT_BASE_SCORE = 550

MAX_JITTER = 20


class RandomSource(Protocol):
    """Anything with ``randint``; ``random.Random`` satisfies this."""

    def randint(self, a: int, b: int) -> int: ...


def base_score_for_income(monthly_income: float) -> int:
    """Map monthly income to its bracket's base score."""
    for threshold, base in INCOME_BRACKETS:
        if monthly_income >= threshold:
            return base
    return DEFAULT_BASE_SCORE


def loan_to_income_adjustment(requested_amount: float, monthly_income: float) -> int:
    """
    Score adjustment for the loan-to-annual-income ratio.

    Args:
        requested_amount: Loan amount requested
        monthly_income: Applicant's monthly income (must be positive)

    Returns:
        Points to add to the base score (negative for heavy loans)
    """
    ratio = requested_amount / (monthly_income * 12)

    if ratio > 3:
        return -50
    elif ratio > 2:
        return -30
    elif ratio < 1:
        return 20
    return 0


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def simulate_score(
    monthly_income: float,
    requested_amount: float,
    rng: RandomSource,
) -> int:
    """
    Simulate a CIBIL-style credit score.

    Args:
        monthly_income: Applicant's monthly income
        requested_amount: Loan amount requested
        rng: Random source used for the jitter

    Returns:
        Score between 300 and 900 inclusive

    Example:
        >>> class Fixed:
        ...     def randint(self, a, b):
        ...         return 0
        >>> simulate_score(100000, 50000, Fixed())
        820
    """
    base = base_score_for_income(monthly_income)
    adjustment = loan_to_income_adjustment(requested_amount, monthly_income)
    jitter = rng.randint(-MAX_JITTER, MAX_JITTER)

    score = clamp_score(base + adjustment + jitter)

    logger.debug(
        "credit_score_simulated",
        base_score=base,
        ratio_adjustment=adjustment,
        jitter=jitter,
        score=score,
    )
    return score
