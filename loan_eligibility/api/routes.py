"""API route handlers for the loan eligibility service."""
import random
import time

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from loan_eligibility.config import settings
from loan_eligibility.database import get_db
from loan_eligibility.logging import get_logger, log_eligibility_decision
from loan_eligibility.schemas import (
    EligibilityResponse,
    LoanApplicationItem,
    LoanApplicationListResponse,
    LoanApplicationRequest,
)
from loan_eligibility.scoring import EligibilityEngine, score_band
from loan_eligibility.scoring.eligibility import rejection_reason, was_capped
from loan_eligibility.services.applications import LoanApplicationService
from loan_eligibility import metrics

logger = get_logger(__name__)

router = APIRouter(prefix="/api/loan", tags=["loan"])


def get_engine() -> EligibilityEngine:
    """Dependency that provides a per-request eligibility engine."""
    return EligibilityEngine(random.Random(settings.score_seed))


@router.post("/checkEligibility", response_model=EligibilityResponse)
def check_eligibility(
    request_body: LoanApplicationRequest,
    db: Session = Depends(get_db),
    engine: EligibilityEngine = Depends(get_engine),
):
    """
    Check loan eligibility for an applicant.

    This endpoint:
    1. Simulates a credit score from income and requested amount
    2. Rejects applicants below the minimum score or income
    3. Works out the maximum eligible amount for the score tier
    4. Caps the amount at five years of income
    5. Stores the application and its decision

    Returns eligibility, the simulated CIBIL score, the maximum eligible
    amount and an explanatory message.
    """
    start_time = time.perf_counter()

    logger.info("eligibility_requested", loan_amount=request_body.loan_amount)

    metrics.record_requested_amount(request_body.loan_amount)

    service = LoanApplicationService(db, engine)
    application, decision = service.check_eligibility(request_body)

    duration_seconds = time.perf_counter() - start_time
    band = score_band(decision.simulated_score)

    log_eligibility_decision(
        logger=logger,
        application_id=str(application.id),
        eligible=decision.eligible,
        cibil_score=decision.simulated_score,
        score_band=band,
        requested_amount=request_body.loan_amount,
        max_eligible_amount=decision.max_eligible_amount,
        duration_ms=duration_seconds * 1000,
    )

    metrics.record_decision(
        eligible=decision.eligible,
        score_band=band,
        max_eligible_amount=decision.max_eligible_amount,
        latency_seconds=duration_seconds,
        rejection_reason=rejection_reason(decision),
        capped=was_capped(request_body.to_eligibility_request(), decision),
    )

    return EligibilityResponse.from_decision(decision)


@router.get("/health", response_class=PlainTextResponse)
def health():
    return "Loan Application System is running!"


@router.get("/applications", response_model=LoanApplicationListResponse)
def list_applications(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    List stored applications, most recent first.

    PAN numbers are masked in the response.
    """
    start_time = time.perf_counter()

    service = LoanApplicationService(db)
    result = service.list_applications(limit)

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "applications_fetch_completed",
        application_count=result.count,
        duration_ms=round(duration_ms, 2),
        outcome="success",
    )

    return result


@router.get("/applications/{application_id}", response_model=LoanApplicationItem)
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
):
    """Fetch one stored application by ID."""
    start_time = time.perf_counter()

    logger.info("application_fetch_requested", application_id=application_id)

    service = LoanApplicationService(db)
    application = service.get_application(application_id)

    duration_ms = (time.perf_counter() - start_time) * 1000

    if not application:
        logger.warning(
            "application_not_found",
            application_id=application_id,
            duration_ms=round(duration_ms, 2),
            outcome="not_found",
        )
        raise HTTPException(status_code=404, detail="Application not found")

    logger.info(
        "application_fetch_completed",
        application_id=application_id,
        duration_ms=round(duration_ms, 2),
        outcome="success",
    )

    return application
