"""Tests for the eligibility evaluator.

Covers the ordered policy checks, the attempt ceiling boundary, and the
human-readable verdict messages.
"""

import pytest

from ndrdesk.services.eligibility import EligibilityEvaluator, Verdict, VerdictReason
from ndrdesk.services.nsl_policy import DEFAULT_REATTEMPT_CODES, NDRAction, NSLPolicy
from tests.helpers import make_shipment


@pytest.fixture
def evaluator() -> EligibilityEvaluator:
    return EligibilityEvaluator()


class TestEvaluate:
    """Tests for EligibilityEvaluator.evaluate."""

    @pytest.mark.parametrize("code", sorted(DEFAULT_REATTEMPT_CODES))
    @pytest.mark.parametrize("attempts", [0, 1, 2])
    def test_reattempt_allowed_for_listed_codes(self, evaluator, code, attempts):
        """Every listed code with at most two attempts is allowed."""
        verdict = evaluator.evaluate(
            make_shipment(nsl_code=code, attempt_count=attempts), NDRAction.RE_ATTEMPT
        )
        assert verdict == Verdict(allowed=True, reason=VerdictReason.OK)

    def test_ceiling_boundary(self, evaluator):
        """Two attempts is eligible; three is denied."""
        assert evaluator.evaluate(
            make_shipment(attempt_count=2), NDRAction.RE_ATTEMPT
        ).allowed
        verdict = evaluator.evaluate(make_shipment(attempt_count=3), NDRAction.RE_ATTEMPT)
        assert not verdict.allowed
        assert verdict.reason is VerdictReason.ATTEMPT_LIMIT_EXCEEDED

    def test_reschedule_code_is_action_specific(self, evaluator):
        """EOD-777 is denied for RE-ATTEMPT and allowed for PICKUP_RESCHEDULE."""
        shipment = make_shipment(nsl_code="EOD-777", attempt_count=1)
        denied = evaluator.evaluate(shipment, NDRAction.RE_ATTEMPT)
        assert denied.reason is VerdictReason.NSL_CODE_NOT_PERMITTED
        assert evaluator.evaluate(shipment, NDRAction.PICKUP_RESCHEDULE).allowed

    def test_ceiling_applies_to_reschedule(self, evaluator):
        """The attempt ceiling applies to both actions."""
        verdict = evaluator.evaluate(
            make_shipment(nsl_code="EOD-21", attempt_count=3), NDRAction.PICKUP_RESCHEDULE
        )
        assert verdict.reason is VerdictReason.ATTEMPT_LIMIT_EXCEEDED

    def test_code_check_runs_before_ceiling(self, evaluator):
        """An unlisted code over the ceiling reports the code failure."""
        verdict = evaluator.evaluate(
            make_shipment(nsl_code="EOD-999", attempt_count=5), NDRAction.RE_ATTEMPT
        )
        assert verdict.reason is VerdictReason.NSL_CODE_NOT_PERMITTED

    def test_deterministic(self, evaluator):
        """Same inputs always produce the same verdict."""
        shipment = make_shipment(nsl_code="EOD-43", attempt_count=1)
        verdicts = {evaluator.evaluate(shipment, NDRAction.RE_ATTEMPT) for _ in range(5)}
        assert len(verdicts) == 1

    def test_custom_policy_ceiling(self):
        """A configured ceiling replaces the default."""
        evaluator = EligibilityEvaluator(NSLPolicy(max_prior_attempts=0))
        assert evaluator.evaluate(make_shipment(attempt_count=0), NDRAction.RE_ATTEMPT).allowed
        assert not evaluator.evaluate(
            make_shipment(attempt_count=1), NDRAction.RE_ATTEMPT
        ).allowed


class TestWorkedExamples:
    """End-to-end verdicts for typical shipments."""

    def test_bad_address_first_retry(self, evaluator):
        """EOD-74 after one attempt may be re-attempted."""
        verdict = evaluator.evaluate(
            make_shipment(nsl_code="EOD-74", attempt_count=1), NDRAction.RE_ATTEMPT
        )
        assert verdict.allowed
        assert verdict.reason is VerdictReason.OK

    def test_bad_address_after_three_attempts(self, evaluator):
        """EOD-74 after three attempts hits the ceiling."""
        verdict = evaluator.evaluate(
            make_shipment(nsl_code="EOD-74", attempt_count=3), NDRAction.RE_ATTEMPT
        )
        assert not verdict.allowed
        assert verdict.reason is VerdictReason.ATTEMPT_LIMIT_EXCEEDED

    def test_unknown_code_reschedule(self, evaluator):
        """EOD-999 cannot be rescheduled."""
        verdict = evaluator.evaluate(
            make_shipment(nsl_code="EOD-999", attempt_count=0), NDRAction.PICKUP_RESCHEDULE
        )
        assert not verdict.allowed
        assert verdict.reason is VerdictReason.NSL_CODE_NOT_PERMITTED


class TestAllowedActions:
    """Tests for EligibilityEvaluator.allowed_actions."""

    def test_reattempt_only(self, evaluator):
        assert evaluator.allowed_actions(make_shipment(nsl_code="EOD-11")) == [
            NDRAction.RE_ATTEMPT
        ]

    def test_none_over_ceiling(self, evaluator):
        assert evaluator.allowed_actions(make_shipment(attempt_count=4)) == []


class TestDescribe:
    """Tests for EligibilityEvaluator.describe."""

    def test_code_denial_lists_allowed_codes(self, evaluator):
        """Code denials name the shipment code and the allowed codes."""
        shipment = make_shipment(nsl_code="EOD-999")
        verdict = evaluator.evaluate(shipment, NDRAction.PICKUP_RESCHEDULE)
        message = evaluator.describe(verdict, shipment, NDRAction.PICKUP_RESCHEDULE)
        assert message == (
            "PICKUP_RESCHEDULE not allowed for NSL code: EOD-999. "
            "Allowed codes: EOD-21, EOD-777"
        )

    def test_ceiling_denial_suggests_rto(self, evaluator):
        shipment = make_shipment(attempt_count=3)
        verdict = evaluator.evaluate(shipment, NDRAction.RE_ATTEMPT)
        assert evaluator.describe(verdict, shipment, NDRAction.RE_ATTEMPT) == (
            "Maximum 3 attempts allowed. Please initiate RTO."
        )

    def test_allowed(self, evaluator):
        shipment = make_shipment()
        verdict = evaluator.evaluate(shipment, NDRAction.RE_ATTEMPT)
        assert evaluator.describe(verdict, shipment, NDRAction.RE_ATTEMPT) == "RE-ATTEMPT allowed"
