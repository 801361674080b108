"""SQLAlchemy ORM models for the loan eligibility service."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text, Uuid

from loan_eligibility.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LoanApplication(Base):
    """An applicant's request together with the decision it received."""
    __tablename__ = "loan_applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    loan_amount = Column(Float, nullable=False)
    mobile_number = Column(String(10), nullable=False)
    pan_number = Column(String(10), nullable=False, index=True)
    monthly_income = Column(Float, nullable=False)

    # Decision
    cibil_score = Column(Integer, nullable=False)
    eligible = Column(Boolean, nullable=False)
    max_eligible_amount = Column(Float, nullable=False)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
