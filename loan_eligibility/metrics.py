"""
Prometheus Metrics for the Loan Eligibility Service.

This module defines all metrics exposed at the /metrics endpoint.
Metrics are categorized into:

1. Business Impact Metrics - For Product/Credit teams
   - Decision outcomes, rejection reasons, amounts offered

2. Technical Metrics - For Engineering/SRE teams
   - Latencies, request counts
"""
from prometheus_client import Counter, Histogram, Info

# =============================================================================
# SERVICE INFO
# =============================================================================

SERVICE_INFO = Info(
    "loan_eligibility_service",
    "Service information"
)
SERVICE_INFO.info({
    "version": "0.1.0",
    "service": "loan-eligibility",
})

# =============================================================================
# BUSINESS IMPACT METRICS
# =============================================================================

# Counter: Decisions by outcome and score band
DECISION_TOTAL = Counter(
    "loan_eligibility_decisions_total",
    "Total eligibility decisions made",
    ["outcome", "score_band"]  # outcome: approved, rejected
)

# Counter: Rejections by the rule that rejected them
REJECTION_TOTAL = Counter(
    "loan_eligibility_rejections_total",
    "Rejected applications by reason",
    ["reason"]  # low_score, low_income
)

# Histogram: Requested amounts distribution
REQUESTED_AMOUNT = Histogram(
    "loan_eligibility_requested_amount",
    "Distribution of requested loan amounts",
    buckets=[10000, 50000, 100000, 250000, 500000, 1000000, 2500000, 5000000, 10000000]
)

# Counter: Total amount offered across approvals
ELIGIBLE_AMOUNT_TOTAL = Counter(
    "loan_eligibility_eligible_amount_total",
    "Total maximum eligible amount across approved decisions"
)

# Counter: Approvals limited by the affordability cap
CAPPED_TOTAL = Counter(
    "loan_eligibility_capped_total",
    "Approved decisions reduced to the affordability cap"
)

# =============================================================================
# TECHNICAL METRICS
# =============================================================================

# Histogram: Decision latency (evaluate + persist)
DECISION_LATENCY = Histogram(
    "loan_eligibility_decision_latency_seconds",
    "Time to evaluate and store an eligibility decision",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# =============================================================================
# HTTP METRICS (Standard)
# =============================================================================

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

HTTP_REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_decision(
    eligible: bool,
    score_band: str,
    max_eligible_amount: float,
    latency_seconds: float,
    rejection_reason: str = None,
    capped: bool = False,
) -> None:
    """
    Record all metrics for a single eligibility decision.

    Args:
        eligible: Whether the applicant was approved
        score_band: Band of the simulated score (e.g., "excellent", "poor")
        max_eligible_amount: Amount offered (0 when rejected)
        latency_seconds: Time taken to evaluate and store the decision
        rejection_reason: "low_score" or "low_income" for rejections
        capped: Whether the affordability cap reduced the amount
    """
    outcome = "approved" if eligible else "rejected"

    DECISION_TOTAL.labels(outcome=outcome, score_band=score_band).inc()
    DECISION_LATENCY.observe(latency_seconds)

    if eligible:
        ELIGIBLE_AMOUNT_TOTAL.inc(max_eligible_amount)
        if capped:
            CAPPED_TOTAL.inc()
    else:
        REJECTION_TOTAL.labels(reason=rejection_reason or "unknown").inc()


def record_requested_amount(amount: float) -> None:
    """Record the requested amount for distribution tracking."""
    REQUESTED_AMOUNT.observe(amount)


def record_http_request(method: str, endpoint: str, status: int, latency_seconds: float) -> None:
    HTTP_REQUESTS.labels(method=method, endpoint=endpoint, status=status).inc()
    HTTP_REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(latency_seconds)
