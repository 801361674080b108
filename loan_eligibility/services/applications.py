"""Loan application service: evaluates eligibility and records the outcome."""
import uuid
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from loan_eligibility.logging import TimedOperation, mask_pan
from loan_eligibility.models import LoanApplication
from loan_eligibility.schemas import (
    LoanApplicationRequest,
    LoanApplicationItem,
    LoanApplicationListResponse,
)
from loan_eligibility.scoring import EligibilityDecision, EligibilityEngine

logger = structlog.get_logger()


class LoanApplicationService:
    """
    Service for loan eligibility applications.

    This service orchestrates:
    1. Running the eligibility engine on the validated request
    2. Persisting the application together with its decision
    3. Reading stored applications back

    The engine never sees the database; this service only stores what the
    engine returned.
    """

    def __init__(self, db: Session, engine: Optional[EligibilityEngine] = None):
        """
        Initialize the application service.

        Args:
            db: SQLAlchemy database session
            engine: Eligibility engine (defaults to an OS-seeded engine)
        """
        self.db = db
        self.engine = engine or EligibilityEngine()

    def check_eligibility(
        self, request: LoanApplicationRequest
    ) -> tuple[LoanApplication, EligibilityDecision]:
        """
        Evaluate an application and store it.

        Args:
            request: Validated application body

        Returns:
            The stored LoanApplication and the engine's decision

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the application can't be stored
        """
        logger.info(
            "processing_application",
            loan_amount=request.loan_amount,
            monthly_income=request.monthly_income,
            pan_number=mask_pan(request.pan_number),
        )

        decision = self.engine.evaluate(request.to_eligibility_request())

        application = LoanApplication(
            id=uuid.uuid4(),
            name=request.name,
            loan_amount=request.loan_amount,
            mobile_number=request.mobile_number,
            pan_number=request.pan_number,
            monthly_income=request.monthly_income,
            cibil_score=decision.simulated_score,
            eligible=decision.eligible,
            max_eligible_amount=decision.max_eligible_amount,
            message=decision.message,
        )

        with TimedOperation("application_persist", logger, application_id=str(application.id)):
            try:
                self.db.add(application)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        return application, decision

    def get_application(self, application_id: str) -> Optional[LoanApplicationItem]:
        """
        Fetch a stored application by ID.

        Args:
            application_id: UUID of the application

        Returns:
            LoanApplicationItem or None if not found
        """
        try:
            application_uuid = uuid.UUID(application_id)
        except ValueError:
            return None

        application = (
            self.db.query(LoanApplication)
            .filter(LoanApplication.id == application_uuid)
            .first()
        )
        if not application:
            return None

        return _to_item(application)

    def list_applications(self, limit: int = 20) -> LoanApplicationListResponse:
        """Most recent applications first."""
        applications = (
            self.db.query(LoanApplication)
            .order_by(LoanApplication.created_at.desc())
            .limit(limit)
            .all()
        )

        items = [_to_item(a) for a in applications]
        return LoanApplicationListResponse(applications=items, count=len(items), limit=limit)


def _to_item(application: LoanApplication) -> LoanApplicationItem:
    return LoanApplicationItem(
        application_id=str(application.id),
        name=application.name,
        loan_amount=application.loan_amount,
        monthly_income=application.monthly_income,
        pan_number=mask_pan(application.pan_number),
        eligible=application.eligible,
        cibil_score=application.cibil_score,
        max_eligible_amount=application.max_eligible_amount,
        message=application.message,
        created_at=application.created_at,
    )
