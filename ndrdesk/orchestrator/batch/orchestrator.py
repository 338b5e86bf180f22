"""Bulk and single-order NDR action submission.

NDRActionOrchestrator validates a selection, partitions it with the
eligibility evaluator, and sends every eligible waybill to the courier in
one gateway call. Partitioning always completes before any network I/O,
and a gateway failure propagates as GatewayError with no partial outcome.
Nothing is retried here; resubmitting the same selection is the caller's
decision.

Example:
    orchestrator = NDRActionOrchestrator(EligibilityEvaluator(), gateway)
    outcome = await orchestrator.submit_bulk(shipments, NDRAction.RE_ATTEMPT)
    print(outcome.correlation_id, outcome.rejected)
"""

import logging
from collections.abc import Iterable

from ndrdesk.errors.domain import GatewayError, ValidationError
from ndrdesk.orchestrator.batch.events import BulkEventEmitter
from ndrdesk.orchestrator.batch.models import (
    ActionRequest,
    ActionResult,
    BulkOutcome,
    RejectedItem,
)
from ndrdesk.services.action_gateway import ActionGateway
from ndrdesk.services.eligibility import EligibilityEvaluator
from ndrdesk.services.ndr_types import ShipmentNDRRecord
from ndrdesk.services.nsl_policy import NDRAction, parse_action
from ndrdesk.services.time_window import TimeWindowAdvisor, next_attempt_date

logger = logging.getLogger(__name__)


class NDRActionOrchestrator:
    """Apply NDR actions to single orders and bulk selections."""

    def __init__(
        self,
        evaluator: EligibilityEvaluator,
        gateway: ActionGateway,
        advisor: TimeWindowAdvisor | None = None,
        emitter: BulkEventEmitter | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            evaluator: Eligibility evaluator holding the NSL policy.
            gateway: Courier action gateway.
            advisor: Time window advisor; defaults to the 9 PM cutoff.
            emitter: Optional event emitter for bulk lifecycle events.
        """
        self._evaluator = evaluator
        self._gateway = gateway
        self._advisor = advisor or TimeWindowAdvisor()
        self._emitter = emitter or BulkEventEmitter()

    @property
    def emitter(self) -> BulkEventEmitter:
        """Return the bulk event emitter."""
        return self._emitter

    def partition(
        self,
        shipments: Iterable[ShipmentNDRRecord],
        action: NDRAction,
    ) -> tuple[list[str], list[RejectedItem]]:
        """Split shipments into eligible waybills and rejections.

        Pure: no I/O and no events. Order of the input is preserved in both
        lists.

        Args:
            shipments: Shipment snapshots to evaluate.
            action: Requested action.

        Returns:
            Tuple of (eligible waybills, rejected items).
        """
        eligible: list[str] = []
        rejected: list[RejectedItem] = []
        for shipment in shipments:
            verdict = self._evaluator.evaluate(shipment, action)
            if verdict.allowed:
                eligible.append(shipment.waybill)
            else:
                rejected.append(
                    RejectedItem(
                        waybill=shipment.waybill,
                        reason=verdict.reason,
                        message=self._evaluator.describe(verdict, shipment, action),
                    )
                )
        return eligible, rejected

    def _warn_if_off_hours(self, action: NDRAction, count: int) -> None:
        if action is NDRAction.RE_ATTEMPT and not self._advisor.is_recommended_time():
            logger.warning(
                "Submitting %s for %d waybill(s) before the %d:00 cutoff; "
                "the courier may not act on shipments still in transit",
                action.value, count, self._advisor.cutoff_hour,
            )

    async def submit_bulk(
        self,
        shipments: Iterable[ShipmentNDRRecord],
        action: "str | NDRAction",
    ) -> BulkOutcome:
        """Submit one action for a selection of shipments.

        Args:
            shipments: Selected shipment snapshots.
            action: Requested action.

        Returns:
            BulkOutcome listing accepted and rejected waybills. The
            correlation ID is None when no shipment was eligible.

        Raises:
            ValidationError: Empty selection, unknown action, or a
                conflicting duplicate waybill. Raised before any I/O.
            GatewayError: The courier call failed.
        """
        request = ActionRequest.from_selection(shipments, action)
        action = request.action
        await self._emitter.emit_bulk_started(action.value, len(request.shipments))

        eligible, rejected = self.partition(request.shipments, action)
        logger.info(
            "%s selection partitioned: %d eligible, %d rejected",
            action.value, len(eligible), len(rejected),
        )
        for item in rejected:
            await self._emitter.emit_item_rejected(item.waybill, item.reason.value, item.message)

        correlation_id = None
        if eligible:
            self._warn_if_off_hours(action, len(eligible))
            try:
                correlation_id = await self._gateway.submit(action, eligible)
            except GatewayError as e:
                logger.error(
                    "%s submission failed for %d waybill(s): %s",
                    action.value, len(eligible), e,
                )
                await self._emitter.emit_bulk_failed(action.value, e.code or "", e.message)
                raise
        else:
            logger.info("No eligible shipments for %s; courier not called", action.value)

        await self._emitter.emit_bulk_submitted(
            action.value, correlation_id, len(eligible), len(rejected)
        )
        return BulkOutcome(
            action=action,
            accepted=tuple(eligible),
            rejected=tuple(rejected),
            correlation_id=correlation_id,
        )

    async def submit_single(
        self,
        shipment: ShipmentNDRRecord,
        action: "str | NDRAction",
    ) -> ActionResult:
        """Submit one action for one shipment.

        Args:
            shipment: Current snapshot of the shipment.
            action: Requested action.

        Returns:
            ActionResult with the courier correlation ID and, for a
            re-attempt, the expected next attempt date.

        Raises:
            ValidationError: Unknown action, or E-2003 when policy denies
                the action. The verdict reason is in details["reason"].
            GatewayError: The courier call failed.
        """
        action = parse_action(action)
        verdict = self._evaluator.evaluate(shipment, action)
        if not verdict.allowed:
            raise ValidationError.from_code(
                "E-2003",
                details={"waybill": shipment.waybill, "reason": verdict.reason.value},
                action=action.value,
                waybill=shipment.waybill,
                reason=self._evaluator.describe(verdict, shipment, action),
            )

        self._warn_if_off_hours(action, 1)
        try:
            correlation_id = await self._gateway.submit(action, [shipment.waybill])
        except GatewayError as e:
            logger.error("%s submission failed for %s: %s", action.value, shipment.waybill, e)
            raise

        next_date = None
        if action is NDRAction.RE_ATTEMPT:
            next_date = next_attempt_date(
                shipment.attempt_count,
                max_prior_attempts=self._evaluator.policy.max_prior_attempts,
            )
        return ActionResult(
            waybill=shipment.waybill,
            action=action,
            correlation_id=correlation_id,
            next_attempt_date=next_date,
        )
