"""Service layer for the loan eligibility service."""
from loan_eligibility.services.applications import LoanApplicationService

__all__ = ["LoanApplicationService"]
