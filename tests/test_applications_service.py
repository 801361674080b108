"""Tests for the loan application service (engine + persistence)."""
import uuid
from unittest.mock import MagicMock

import pytest

from loan_eligibility.models import LoanApplication
from loan_eligibility.schemas import LoanApplicationRequest
from loan_eligibility.scoring import EligibilityEngine
from loan_eligibility.services.applications import LoanApplicationService
from tests.helpers import FixedRandom


def make_request(**overrides) -> LoanApplicationRequest:
    fields = {
        "name": "Ravi Kumar",
        "loan_amount": 1500000,
        "mobile_number": "9123456780",
        "pan_number": "PQRSX6789Z",
        "monthly_income": 50000,
    }
    fields.update(overrides)
    return LoanApplicationRequest(**fields)


class TestCheckEligibility:

    def setup_method(self):
        self.engine = EligibilityEngine(FixedRandom(0))

    def test_stores_request_and_decision(self, db_session):
        """700 - 30 = 670: 75% tier, stored alongside the request."""
        service = LoanApplicationService(db_session, self.engine)

        application, decision = service.check_eligibility(make_request())

        stored = db_session.get(LoanApplication, application.id)
        assert stored is not None
        assert stored.mobile_number == "9123456780"
        assert stored.monthly_income == 50000
        assert stored.cibil_score == decision.simulated_score == 670
        assert stored.eligible is True
        assert stored.max_eligible_amount == decision.max_eligible_amount == 1125000
        assert stored.message == decision.message
        assert stored.created_at is not None

    def test_rejection_is_stored_too(self, db_session):
        service = LoanApplicationService(db_session, EligibilityEngine(FixedRandom(-20)))

        application, decision = service.check_eligibility(make_request(monthly_income=10000))

        assert decision.eligible is False
        stored = db_session.get(LoanApplication, application.id)
        assert stored.eligible is False
        assert stored.max_eligible_amount == 0

    def test_commit_failure_rolls_back(self):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("db down")
        service = LoanApplicationService(db, self.engine)

        with pytest.raises(RuntimeError):
            service.check_eligibility(make_request())

        db.rollback.assert_called_once()

    def test_default_engine(self, db_session):
        service = LoanApplicationService(db_session)
        _, decision = service.check_eligibility(make_request())
        assert 300 <= decision.simulated_score <= 900


class TestReadApplications:

    def test_get_application(self, db_session):
        service = LoanApplicationService(db_session, EligibilityEngine(FixedRandom(0)))
        application, _ = service.check_eligibility(make_request())

        item = service.get_application(str(application.id))

        assert item.application_id == str(application.id)
        assert item.name == "Ravi Kumar"
        assert item.pan_number == "PQ***"
        assert item.cibil_score == 670

    def test_get_unknown_application(self, db_session):
        service = LoanApplicationService(db_session)
        assert service.get_application(str(uuid.uuid4())) is None
        assert service.get_application("not-a-uuid") is None

    def test_list_applications_empty(self, db_session):
        result = LoanApplicationService(db_session).list_applications()
        assert result.applications == []
        assert result.count == 0
