"""Tests for the NSL policy table."""

from dataclasses import FrozenInstanceError

import pytest

from ndrdesk.errors.domain import ValidationError
from ndrdesk.services.nsl_policy import (
    DEFAULT_POLICY,
    DEFAULT_REATTEMPT_CODES,
    DEFAULT_RESCHEDULE_CODES,
    NDRAction,
    NSLPolicy,
    parse_action,
)


class TestDefaultTable:
    """Tests for the built-in Delhivery allow-lists."""

    def test_reattempt_codes(self):
        """RE-ATTEMPT allow-list matches the courier's accepted statuses."""
        assert DEFAULT_POLICY.allowed_codes(NDRAction.RE_ATTEMPT) == frozenset({
            "EOD-74", "EOD-15", "EOD-104", "EOD-43",
            "EOD-86", "EOD-11", "EOD-69", "EOD-6",
        })

    def test_reschedule_codes(self):
        """PICKUP_RESCHEDULE allow-list is EOD-777 and EOD-21."""
        assert DEFAULT_POLICY.allowed_codes(NDRAction.PICKUP_RESCHEDULE) == frozenset(
            {"EOD-777", "EOD-21"}
        )

    def test_default_ceiling(self):
        """Two prior attempts is the highest eligible count."""
        assert DEFAULT_POLICY.max_prior_attempts == 2


class TestPermits:
    """Tests for NSLPolicy.permits and actions_for."""

    def test_exact_match(self):
        """A listed code is permitted for its action."""
        assert DEFAULT_POLICY.permits("EOD-74", NDRAction.RE_ATTEMPT)

    @pytest.mark.parametrize("code", ["eod-74", "EOD-74 ", "EOD74", "EOD-7"])
    def test_match_is_exact_and_case_sensitive(self, code):
        """Near-miss spellings are not permitted."""
        assert not DEFAULT_POLICY.permits(code, NDRAction.RE_ATTEMPT)

    def test_unknown_code_not_permitted_for_any_action(self):
        """An unrecognized code yields no actions."""
        assert DEFAULT_POLICY.actions_for("EOD-999") == []

    def test_actions_for_reschedule_code(self):
        """EOD-21 only allows PICKUP_RESCHEDULE."""
        assert DEFAULT_POLICY.actions_for("EOD-21") == [NDRAction.PICKUP_RESCHEDULE]

    def test_overlapping_sets_are_allowed(self):
        """Disjointness between the lists is not enforced."""
        policy = NSLPolicy(reattempt_codes={"EOD-1"}, reschedule_codes={"EOD-1"})
        assert policy.actions_for("EOD-1") == [
            NDRAction.RE_ATTEMPT,
            NDRAction.PICKUP_RESCHEDULE,
        ]


class TestNSLPolicyConstruction:
    """Tests for building custom policies."""

    def test_iterables_are_frozen(self):
        """Lists from config become frozensets."""
        policy = NSLPolicy(reattempt_codes=["A", "B"], reschedule_codes=["C"])
        assert isinstance(policy.reattempt_codes, frozenset)
        assert policy.allowed_codes(NDRAction.PICKUP_RESCHEDULE) == frozenset({"C"})

    def test_policy_is_immutable(self):
        """Fields cannot be reassigned after construction."""
        with pytest.raises(FrozenInstanceError):
            DEFAULT_POLICY.max_prior_attempts = 5  # type: ignore[misc]

    def test_default_sets_are_shared_constants(self):
        """Default policy uses the module constants."""
        assert DEFAULT_POLICY.reattempt_codes == DEFAULT_REATTEMPT_CODES
        assert DEFAULT_POLICY.reschedule_codes == DEFAULT_RESCHEDULE_CODES


class TestParseAction:
    """Tests for parse_action."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("RE-ATTEMPT", NDRAction.RE_ATTEMPT),
            ("PICKUP_RESCHEDULE", NDRAction.PICKUP_RESCHEDULE),
            (NDRAction.RE_ATTEMPT, NDRAction.RE_ATTEMPT),
        ],
    )
    def test_known_actions(self, value, expected):
        """Wire values and enum members resolve."""
        assert parse_action(value) is expected

    def test_unknown_action_raises_e2002(self):
        """Unknown names raise ValidationError E-2002."""
        with pytest.raises(ValidationError) as exc_info:
            parse_action("RTO")
        assert exc_info.value.code == "E-2002"
        assert "RTO" in exc_info.value.message
