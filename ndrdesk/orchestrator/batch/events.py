"""Observer pattern for bulk NDR submission events.

Provides the BulkEventObserver protocol and BulkEventEmitter class
for notifying observers of bulk submission progress.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class BulkEventObserver(Protocol):
    """Observer protocol for bulk submission lifecycle events.

    Implementations can subscribe via BulkEventEmitter to update a UI,
    write an audit trail, or log activity.
    """

    async def on_bulk_started(self, action: str, total: int) -> None:
        """Called after the selection is validated, before partitioning.

        Args:
            action: NDR action value (e.g. 'RE-ATTEMPT').
            total: Number of distinct waybills in the selection.
        """
        ...

    async def on_item_rejected(self, waybill: str, reason: str, message: str) -> None:
        """Called for each shipment withheld by local policy.

        Args:
            waybill: Rejected AWB number.
            reason: Verdict reason value.
            message: Human-readable explanation.
        """
        ...

    async def on_bulk_submitted(
        self,
        action: str,
        correlation_id: str | None,
        accepted: int,
        rejected: int,
    ) -> None:
        """Called when a bulk submission finishes without a gateway error.

        Args:
            action: NDR action value.
            correlation_id: UPL ID, or None if nothing was eligible.
            accepted: Number of waybills sent to the courier.
            rejected: Number of waybills withheld.
        """
        ...

    async def on_bulk_failed(self, action: str, error_code: str, error_message: str) -> None:
        """Called when the gateway call fails.

        Args:
            action: NDR action value.
            error_code: Error code from the error registry.
            error_message: Human-readable error description.
        """
        ...


class BulkEventEmitter:
    """Emits bulk submission events to registered observers.

    Exceptions from individual observers are caught and logged to prevent
    one broken observer from stopping event delivery to others or failing
    the submission itself.
    """

    def __init__(self) -> None:
        """Initialize emitter with empty observer list."""
        self._observers: list[BulkEventObserver] = []

    def add_observer(self, observer: BulkEventObserver) -> None:
        """Register an observer to receive bulk events."""
        self._observers.append(observer)

    def remove_observer(self, observer: BulkEventObserver) -> None:
        """Unregister an observer."""
        self._observers.remove(observer)

    async def _emit(self, event: str, *args: object) -> None:
        for observer in self._observers:
            try:
                await getattr(observer, event)(*args)
            except Exception as e:
                logger.error(
                    "Observer %s failed %s: %s",
                    type(observer).__name__,
                    event,
                    e,
                )

    async def emit_bulk_started(self, action: str, total: int) -> None:
        """Emit bulk started event to all observers."""
        await self._emit("on_bulk_started", action, total)

    async def emit_item_rejected(self, waybill: str, reason: str, message: str) -> None:
        """Emit item rejected event to all observers."""
        await self._emit("on_item_rejected", waybill, reason, message)

    async def emit_bulk_submitted(
        self,
        action: str,
        correlation_id: str | None,
        accepted: int,
        rejected: int,
    ) -> None:
        """Emit bulk submitted event to all observers."""
        await self._emit("on_bulk_submitted", action, correlation_id, accepted, rejected)

    async def emit_bulk_failed(self, action: str, error_code: str, error_message: str) -> None:
        """Emit bulk failed event to all observers."""
        await self._emit("on_bulk_failed", action, error_code, error_message)
