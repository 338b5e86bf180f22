"""Services for NDRDesk: policy, eligibility, advisory, and courier gateway."""

from ndrdesk.services.action_gateway import ActionGateway
from ndrdesk.services.eligibility import EligibilityEvaluator, Verdict, VerdictReason
from ndrdesk.services.ndr_types import (
    ActionStatus,
    ShipmentNDRRecord,
    StatusBucket,
    filter_by_bucket,
)
from ndrdesk.services.nsl_policy import DEFAULT_POLICY, NDRAction, NSLPolicy, parse_action
from ndrdesk.services.time_window import TimeWindowAdvisor, next_attempt_date

__all__ = [
    "ActionGateway",
    "ActionStatus",
    "DEFAULT_POLICY",
    "EligibilityEvaluator",
    "NDRAction",
    "NSLPolicy",
    "ShipmentNDRRecord",
    "StatusBucket",
    "TimeWindowAdvisor",
    "Verdict",
    "VerdictReason",
    "filter_by_bucket",
    "next_attempt_date",
    "parse_action",
]
