"""Per-shipment NDR action eligibility.

Given one shipment snapshot and the requested action, decide whether the
courier should be asked to perform it. The evaluator is deterministic and
free of I/O: identical inputs always produce the identical verdict, and
verdicts are recomputed on every call because the underlying NSL code and
attempt count may change between reads.

Checks run in order and the first failure wins:
1. the NSL code must be in the policy allow-list for the action;
2. the shipment must not have exceeded the prior-attempt ceiling.
"""

from dataclasses import dataclass
from enum import Enum

from ndrdesk.services.ndr_types import ShipmentNDRRecord
from ndrdesk.services.nsl_policy import DEFAULT_POLICY, NDRAction, NSLPolicy


class VerdictReason(str, Enum):
    """Machine reason attached to every verdict."""

    OK = "ok"
    NSL_CODE_NOT_PERMITTED = "nsl_code_not_permitted"
    ATTEMPT_LIMIT_EXCEEDED = "attempt_limit_exceeded"


@dataclass(frozen=True)
class Verdict:
    """Outcome of evaluating one (shipment, action) pair."""

    allowed: bool
    reason: VerdictReason


ALLOWED = Verdict(allowed=True, reason=VerdictReason.OK)


class EligibilityEvaluator:
    """Apply an NSL policy to individual shipments."""

    def __init__(self, policy: NSLPolicy | None = None) -> None:
        self._policy = policy or DEFAULT_POLICY

    @property
    def policy(self) -> NSLPolicy:
        """Return the policy this evaluator applies."""
        return self._policy

    def evaluate(self, shipment: ShipmentNDRRecord, action: NDRAction) -> Verdict:
        """Decide whether the action may proceed for the shipment.

        Args:
            shipment: Current NDR snapshot of the shipment.
            action: Requested NDR action.

        Returns:
            Verdict with allowed flag and machine reason.
        """
        if not self._policy.permits(shipment.nsl_code, action):
            return Verdict(allowed=False, reason=VerdictReason.NSL_CODE_NOT_PERMITTED)
        if shipment.attempt_count > self._policy.max_prior_attempts:
            return Verdict(allowed=False, reason=VerdictReason.ATTEMPT_LIMIT_EXCEEDED)
        return ALLOWED

    def allowed_actions(self, shipment: ShipmentNDRRecord) -> list[NDRAction]:
        """Return the actions that would be allowed, for enabling row buttons."""
        return [
            action for action in NDRAction
            if self.evaluate(shipment, action).allowed
        ]

    def describe(
        self,
        verdict: Verdict,
        shipment: ShipmentNDRRecord,
        action: NDRAction,
    ) -> str:
        """Render a verdict as a human-readable sentence.

        Args:
            verdict: Verdict previously returned by evaluate().
            shipment: The shipment the verdict was computed for.
            action: The action that was evaluated.

        Returns:
            Message suitable for an alert or rejection list.
        """
        if verdict.reason is VerdictReason.NSL_CODE_NOT_PERMITTED:
            allowed = ", ".join(sorted(self._policy.allowed_codes(action)))
            return (
                f"{action.value} not allowed for NSL code: {shipment.nsl_code}. "
                f"Allowed codes: {allowed or 'none'}"
            )
        if verdict.reason is VerdictReason.ATTEMPT_LIMIT_EXCEEDED:
            total = self._policy.max_prior_attempts + 1
            return f"Maximum {total} attempts allowed. Please initiate RTO."
        return f"{action.value} allowed"
