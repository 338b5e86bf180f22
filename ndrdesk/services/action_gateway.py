"""ActionGateway protocol for courier-facing NDR submissions.

The orchestrator depends on this interface only. DelhiveryActionGateway is
the HTTP implementation; tests substitute in-memory fakes.
"""

from collections.abc import Sequence
from typing import Protocol

from ndrdesk.services.ndr_types import ActionStatus
from ndrdesk.services.nsl_policy import NDRAction


class ActionGateway(Protocol):
    """Courier API that executes re-attempt and RTO requests."""

    async def submit(self, action: NDRAction, waybills: Sequence[str]) -> str:
        """Submit one request covering every waybill.

        Args:
            action: NDR action to apply to all waybills.
            waybills: Non-empty list of AWB numbers.

        Returns:
            Courier correlation identifier (UPL ID).

        Raises:
            GatewayError: On network fault, non-success status, or a
                response without a correlation identifier.
        """
        ...

    async def get_status(self, correlation_id: str) -> ActionStatus:
        """Look up the courier-side status of a previous submission.

        Args:
            correlation_id: UPL ID returned by submit().

        Returns:
            ActionStatus for the request.

        Raises:
            GatewayError: On network fault or non-success status.
            NotFoundError: If the courier does not know the UPL ID.
        """
        ...
