"""Pydantic schemas for request/response validation.

The web client speaks camelCase, so every field carries a camelCase alias.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from loan_eligibility.scoring import EligibilityDecision, EligibilityRequest

MOBILE_NUMBER_PATTERN = r"^[6-9][0-9]{9}$"
PAN_NUMBER_PATTERN = r"^[A-Z]{5}[0-9]{4}[A-Z]$"

# Field error messages returned to the client, keyed by alias then pydantic
# error type. "*" is the fallback for the field.
FIELD_ERROR_MESSAGES = {
    "name": {
        "missing": "Name is required",
        "value_error": "Name is required",
        "*": "Name must be between 2 and 100 characters",
    },
    "loanAmount": {
        "missing": "Loan amount is required",
        "greater_than_equal": "Minimum loan amount is ₹10,000",
        "less_than_equal": "Maximum loan amount is ₹1,00,00,000",
        "finite_number": "Loan amount must be a valid number",
    },
    "mobileNumber": {
        "missing": "Mobile number is required",
        "*": "Invalid mobile number format",
    },
    "panNumber": {
        "missing": "PAN number is required",
        "*": "Invalid PAN number format",
    },
    "monthlyIncome": {
        "missing": "Monthly income is required",
        "greater_than": "Monthly income must be positive",
        "finite_number": "Monthly income must be a valid number",
    },
}


class LoanApplicationRequest(BaseModel):
    """Request body for POST /api/loan/checkEligibility."""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    name: str = Field(..., min_length=2, max_length=100, description="Applicant's full name")
    loan_amount: float = Field(
        ..., alias="loanAmount", ge=10000, le=10000000, description="Requested loan amount"
    )
    mobile_number: str = Field(
        ..., alias="mobileNumber", pattern=MOBILE_NUMBER_PATTERN, description="10-digit mobile number"
    )
    pan_number: str = Field(
        ..., alias="panNumber", pattern=PAN_NUMBER_PATTERN, description="PAN, e.g. ABCDE1234F"
    )
    monthly_income: float = Field(..., alias="monthlyIncome", gt=0, description="Monthly income")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value

    def to_eligibility_request(self) -> EligibilityRequest:
        return EligibilityRequest(
            name=self.name,
            requested_amount=self.loan_amount,
            monthly_income=self.monthly_income,
        )


class EligibilityResponse(BaseModel):
    """Response body for POST /api/loan/checkEligibility."""
    model_config = ConfigDict(populate_by_name=True)

    eligible: bool
    cibil_score: int = Field(..., alias="cibilScore", ge=300, le=900)
    max_eligible_amount: float = Field(..., alias="maxEligibleAmount", ge=0)
    message: str

    @classmethod
    def from_decision(cls, decision: EligibilityDecision) -> "EligibilityResponse":
        return cls(
            eligible=decision.eligible,
            cibil_score=decision.simulated_score,
            max_eligible_amount=decision.max_eligible_amount,
            message=decision.message,
        )


class LoanApplicationItem(BaseModel):
    """A stored application, as returned by the applications endpoints."""
    model_config = ConfigDict(populate_by_name=True)

    application_id: str = Field(..., alias="applicationId")
    name: str
    loan_amount: float = Field(..., alias="loanAmount")
    monthly_income: float = Field(..., alias="monthlyIncome")
    pan_number: str = Field(..., alias="panNumber")
    eligible: bool
    cibil_score: int = Field(..., alias="cibilScore")
    max_eligible_amount: float = Field(..., alias="maxEligibleAmount")
    message: str
    created_at: datetime = Field(..., alias="createdAt")


class LoanApplicationListResponse(BaseModel):
    """Response body for GET /api/loan/applications."""
    applications: list[LoanApplicationItem]
    count: int
    limit: Optional[int] = None
