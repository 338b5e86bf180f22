"""Data models for NDR action submission.

Defines dataclasses for validated requests, bulk outcomes, per-shipment
rejections, and single-order results.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ndrdesk.errors.domain import ValidationError
from ndrdesk.services.eligibility import VerdictReason
from ndrdesk.services.ndr_types import ShipmentNDRRecord
from ndrdesk.services.nsl_policy import NDRAction, parse_action


@dataclass(frozen=True)
class ActionRequest:
    """Validated NDR action over a non-empty set of shipments.

    Build with from_selection(); the shipments tuple holds one record per
    distinct waybill in first-seen order.
    """

    action: NDRAction
    shipments: tuple[ShipmentNDRRecord, ...]

    @classmethod
    def from_selection(
        cls,
        shipments: Iterable[ShipmentNDRRecord],
        action: "str | NDRAction",
    ) -> "ActionRequest":
        """Validate a user selection into a request.

        Args:
            shipments: Selected shipment snapshots.
            action: Requested action, as an NDRAction or its wire value.

        Returns:
            The validated request.

        Raises:
            ValidationError: E-2002 for an unknown action, E-2001 for an
                empty selection, E-2004 when the same waybill appears twice
                with different NDR state.
        """
        resolved = parse_action(action)
        unique: dict[str, ShipmentNDRRecord] = {}
        for shipment in shipments:
            seen = unique.get(shipment.waybill)
            if seen is None:
                unique[shipment.waybill] = shipment
            elif not seen.same_state(shipment):
                raise ValidationError.from_code(
                    "E-2004",
                    details={"waybills": [shipment.waybill]},
                    waybill=shipment.waybill,
                )
        if not unique:
            raise ValidationError.from_code("E-2001", action=resolved.value)
        return cls(action=resolved, shipments=tuple(unique.values()))


@dataclass(frozen=True)
class RejectedItem:
    """One shipment left out of a bulk submission."""

    waybill: str
    """Courier AWB number of the rejected shipment."""

    reason: VerdictReason
    """Machine reason from the eligibility verdict."""

    message: str
    """Human-readable explanation for the rejection list."""


@dataclass(frozen=True)
class BulkOutcome:
    """Result of one bulk NDR submission.

    Every selected waybill appears exactly once, in either accepted or
    rejected, both in selection order. A correlation ID is present only
    when a courier request was made.
    """

    action: NDRAction
    """Action requested for the whole selection."""

    accepted: tuple[str, ...]
    """Waybills sent to the courier."""

    rejected: tuple[RejectedItem, ...]
    """Waybills withheld by local policy, with reasons."""

    correlation_id: str | None = None
    """UPL ID returned by the courier, if anything was submitted."""

    @property
    def submitted(self) -> bool:
        """Whether a courier request was made."""
        return self.correlation_id is not None

    @property
    def total(self) -> int:
        """Number of distinct waybills in the selection."""
        return len(self.accepted) + len(self.rejected)

    @property
    def rejected_waybills(self) -> list[str]:
        """Waybills of the rejected items, in selection order."""
        return [item.waybill for item in self.rejected]


@dataclass(frozen=True)
class ActionResult:
    """Result of a single-order NDR submission."""

    waybill: str
    action: NDRAction
    correlation_id: str
    next_attempt_date: date | None = None
