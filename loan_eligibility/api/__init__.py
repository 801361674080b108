"""HTTP API for the loan eligibility service."""
from loan_eligibility.api.routes import router

__all__ = ["router"]
