"""NSL policy table for NDR actions.

Maps Delhivery NSL status codes to the NDR actions the courier accepts for
shipments currently in that status. The table is a plain immutable lookup:
codes are compared exactly and case-sensitively, an unrecognized code is
simply not permitted for any action, and the two action sets are not
required to be disjoint.
"""

from dataclasses import dataclass, field
from enum import Enum

from ndrdesk.errors.domain import ValidationError


class NDRAction(str, Enum):
    """NDR actions the courier can execute.

    RE_ATTEMPT: schedule another delivery attempt.
    PICKUP_RESCHEDULE: initiate return to origin (RTO).
    """

    RE_ATTEMPT = "RE-ATTEMPT"
    PICKUP_RESCHEDULE = "PICKUP_RESCHEDULE"


# Delhivery NSL codes accepting a re-attempt request
DEFAULT_REATTEMPT_CODES: frozenset[str] = frozenset({
    "EOD-74",  # Bad address
    "EOD-15",
    "EOD-104",  # Entry restricted area
    "EOD-43",
    "EOD-86",  # Not attempted
    "EOD-11",  # Consignee unavailable
    "EOD-69",  # Customer asked for open delivery
    "EOD-6",  # Cancelled the order
})

# Delhivery NSL codes accepting a pickup reschedule (RTO)
DEFAULT_RESCHEDULE_CODES: frozenset[str] = frozenset({
    "EOD-777",
    "EOD-21",
})

# At most this many prior attempts may exist when an action is requested,
# which caps a shipment at three delivery attempts in total.
DEFAULT_MAX_PRIOR_ATTEMPTS = 2


def parse_action(value: "str | NDRAction") -> NDRAction:
    """Resolve an action name to an NDRAction.

    Args:
        value: Action name as sent by the courier API (e.g. 'RE-ATTEMPT').

    Returns:
        The matching NDRAction.

    Raises:
        ValidationError: If the value is not a known action (E-2002).
    """
    if isinstance(value, NDRAction):
        return value
    try:
        return NDRAction(value)
    except ValueError:
        raise ValidationError.from_code("E-2002", action=value) from None


@dataclass(frozen=True)
class NSLPolicy:
    """Immutable NSL code allow-lists per NDR action.

    Attributes:
        reattempt_codes: NSL codes for which RE-ATTEMPT is permitted.
        reschedule_codes: NSL codes for which PICKUP_RESCHEDULE is permitted.
        max_prior_attempts: Highest attempt count still eligible for an action.
    """

    reattempt_codes: frozenset[str] = field(default=DEFAULT_REATTEMPT_CODES)
    reschedule_codes: frozenset[str] = field(default=DEFAULT_RESCHEDULE_CODES)
    max_prior_attempts: int = DEFAULT_MAX_PRIOR_ATTEMPTS

    def __post_init__(self) -> None:
        # Accept any iterable of codes from config but store frozensets.
        object.__setattr__(self, "reattempt_codes", frozenset(self.reattempt_codes))
        object.__setattr__(self, "reschedule_codes", frozenset(self.reschedule_codes))

    def allowed_codes(self, action: NDRAction) -> frozenset[str]:
        """Return the NSL codes for which the action is permitted."""
        if action is NDRAction.RE_ATTEMPT:
            return self.reattempt_codes
        if action is NDRAction.PICKUP_RESCHEDULE:
            return self.reschedule_codes
        return frozenset()

    def permits(self, nsl_code: str, action: NDRAction) -> bool:
        """Return whether the action is permitted for a shipment in nsl_code."""
        return nsl_code in self.allowed_codes(action)

    def actions_for(self, nsl_code: str) -> list[NDRAction]:
        """Return every action permitted for the NSL code, in enum order."""
        return [action for action in NDRAction if self.permits(nsl_code, action)]


DEFAULT_POLICY = NSLPolicy()
