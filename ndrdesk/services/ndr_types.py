"""Shared types for NDR shipment records and courier action status.

Neutral module with no gateway or orchestrator imports. Used by the
eligibility evaluator, the courier client, and the bulk orchestrator.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ndrdesk.errors.domain import ValidationError


class StatusBucket(str, Enum):
    """NDR list buckets, classified upstream by the tracking feed.

    The engine only reads the bucket as a filter; it never assigns one.
    """

    ACTION_REQUIRED = "action_required"
    ACTION_TAKEN = "action_taken"
    DELIVERED = "delivered"
    RTO = "rto"
    ALL = "all"


@dataclass(frozen=True)
class ShipmentNDRRecord:
    """Snapshot of one undelivered shipment as last read from tracking.

    Attributes:
        waybill: Courier AWB number, unique per shipment.
        nsl_code: Current courier NSL status code (e.g. 'EOD-74').
        attempt_count: Delivery attempts recorded by the courier so far.
        status_bucket: Upstream list bucket, if known.
        order_id: Merchant order identifier, if known.
    """

    waybill: str
    nsl_code: str
    attempt_count: int = 0
    status_bucket: StatusBucket | None = None
    order_id: str | None = None

    def __post_init__(self) -> None:
        if self.attempt_count < 0:
            raise ValidationError.from_code(
                "E-1003",
                details={"waybills": [self.waybill]},
                value=self.attempt_count,
                waybill=self.waybill,
                source="shipment record",
            )

    def same_state(self, other: "ShipmentNDRRecord") -> bool:
        """Return whether two snapshots carry the same NDR decision inputs."""
        return (
            self.waybill == other.waybill
            and self.nsl_code == other.nsl_code
            and self.attempt_count == other.attempt_count
        )


@dataclass(frozen=True)
class ActionStatus:
    """Courier-side status of a submitted NDR request (UPL).

    Attributes:
        correlation_id: UPL ID returned when the request was submitted.
        status: Courier processing status (e.g. 'PENDING', 'SUCCESS').
        waybills: Waybills covered by the request.
        raw: Unmodified courier response body.
    """

    correlation_id: str
    status: str
    waybills: list[str] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)


def filter_by_bucket(
    records: Iterable[ShipmentNDRRecord],
    bucket: StatusBucket,
) -> list[ShipmentNDRRecord]:
    """Return records in the given bucket; ALL returns every record."""
    if bucket is StatusBucket.ALL:
        return list(records)
    return [r for r in records if r.status_bucket is bucket]
