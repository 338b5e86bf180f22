"""FastAPI routes for NDR resolution.

Provides REST API endpoints for eligibility checks, single and bulk NDR
action submission, courier status lookup, the time advisory, and the NSL
policy table. Domain errors propagate to the handlers in api/main.py.
"""

import logging
import os
from functools import lru_cache

from fastapi import APIRouter, Depends

from ndrdesk.api.schemas import (
    ActionRequestBody,
    ActionResponse,
    ActionStatusResponse,
    AdvisoryResponse,
    BulkActionRequest,
    BulkActionResponse,
    ErrorResponse,
    EvaluateRequest,
    EvaluateResponse,
    PolicyResponse,
    RejectedItemResponse,
)
from ndrdesk.cli.config import NDRDeskConfig, load_config
from ndrdesk.errors.formatter import format_rejection_summary, group_rejections
from ndrdesk.orchestrator.batch.orchestrator import NDRActionOrchestrator
from ndrdesk.services.action_gateway import ActionGateway
from ndrdesk.services.eligibility import EligibilityEvaluator
from ndrdesk.services.gateway_provider import get_action_gateway
from ndrdesk.services.ndr_types import filter_by_bucket
from ndrdesk.services.nsl_policy import NDRAction, parse_action
from ndrdesk.services.time_window import TimeWindowAdvisor

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/ndr",
    tags=["ndr"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or action denied"},
        404: {"model": ErrorResponse, "description": "Unknown UPL ID"},
        502: {"model": ErrorResponse, "description": "Courier gateway failure"},
    },
)


@lru_cache(maxsize=1)
def get_config() -> NDRDeskConfig:
    """Dependency to get the process configuration.

    Reads NDRDESK_CONFIG_PATH when set, otherwise the standard locations.
    """
    return load_config(config_path=os.environ.get("NDRDESK_CONFIG_PATH"))


def get_evaluator(cfg: NDRDeskConfig = Depends(get_config)) -> EligibilityEvaluator:
    """Dependency to get an EligibilityEvaluator for the configured policy."""
    return EligibilityEvaluator(cfg.policy.to_policy())


def get_advisor(cfg: NDRDeskConfig = Depends(get_config)) -> TimeWindowAdvisor:
    """Dependency to get the TimeWindowAdvisor."""
    return cfg.advisory.to_advisor()


async def get_gateway(cfg: NDRDeskConfig = Depends(get_config)) -> ActionGateway:
    """Dependency to get the shared courier gateway."""
    return await get_action_gateway(cfg.gateway)


def get_orchestrator(
    evaluator: EligibilityEvaluator = Depends(get_evaluator),
    gateway: ActionGateway = Depends(get_gateway),
    advisor: TimeWindowAdvisor = Depends(get_advisor),
) -> NDRActionOrchestrator:
    """Dependency to get an NDRActionOrchestrator."""
    return NDRActionOrchestrator(evaluator=evaluator, gateway=gateway, advisor=advisor)


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(
    body: EvaluateRequest,
    evaluator: EligibilityEvaluator = Depends(get_evaluator),
) -> EvaluateResponse:
    """Check whether an NDR action is allowed for a shipment.

    Never contacts the courier.

    Args:
        body: Shipment snapshot and requested action.
        evaluator: Eligibility evaluator dependency.

    Returns:
        The verdict with a human-readable message and the actions that
        would be allowed for this shipment.
    """
    action = parse_action(body.action)
    shipment = body.shipment.to_record()
    verdict = evaluator.evaluate(shipment, action)
    return EvaluateResponse(
        waybill=shipment.waybill,
        action=action.value,
        allowed=verdict.allowed,
        reason=verdict.reason.value,
        message=evaluator.describe(verdict, shipment, action),
        allowed_actions=[a.value for a in evaluator.allowed_actions(shipment)],
    )


@router.post("/action", response_model=ActionResponse)
async def submit_action(
    body: ActionRequestBody,
    orchestrator: NDRActionOrchestrator = Depends(get_orchestrator),
) -> ActionResponse:
    """Submit an NDR action for one shipment.

    Args:
        body: Shipment snapshot and requested action.
        orchestrator: Orchestrator dependency.

    Returns:
        The courier UPL ID and, for re-attempts, the next attempt date.
    """
    result = await orchestrator.submit_single(body.shipment.to_record(), body.action)
    return ActionResponse(
        waybill=result.waybill,
        action=result.action.value,
        correlation_id=result.correlation_id,
        next_attempt_date=result.next_attempt_date,
    )


@router.post("/bulk-action", response_model=BulkActionResponse)
async def submit_bulk_action(
    body: BulkActionRequest,
    orchestrator: NDRActionOrchestrator = Depends(get_orchestrator),
) -> BulkActionResponse:
    """Submit one NDR action for a selection of shipments.

    Ineligible shipments are listed in the response instead of failing
    the request; only a courier failure fails the whole call.

    Args:
        body: Selected shipments, requested action, and optional bucket.
        orchestrator: Orchestrator dependency.

    Returns:
        Accepted and rejected waybills, with the UPL ID when anything
        was sent to the courier.
    """
    records = filter_by_bucket([s.to_record() for s in body.shipments], body.bucket)
    logger.info(
        "Bulk %s request: %d of %d shipment(s) in bucket %s",
        body.action, len(records), len(body.shipments), body.bucket.value,
    )
    outcome = await orchestrator.submit_bulk(records, body.action)
    return BulkActionResponse(
        action=outcome.action.value,
        submitted=outcome.submitted,
        correlation_id=outcome.correlation_id,
        accepted=list(outcome.accepted),
        rejected=[
            RejectedItemResponse(
                waybill=item.waybill,
                reason=item.reason.value,
                message=item.message,
            )
            for item in outcome.rejected
        ],
        rejected_by_reason=group_rejections(outcome.rejected),
        summary=format_rejection_summary(outcome.rejected),
    )


@router.get("/status/{upl_id}", response_model=ActionStatusResponse)
async def get_action_status(
    upl_id: str,
    gateway: ActionGateway = Depends(get_gateway),
) -> ActionStatusResponse:
    """Look up courier processing status for a submitted request."""
    status = await gateway.get_status(upl_id)
    return ActionStatusResponse(
        correlation_id=status.correlation_id,
        status=status.status,
        waybills=status.waybills,
    )


@router.get("/advisory", response_model=AdvisoryResponse)
def get_advisory(advisor: TimeWindowAdvisor = Depends(get_advisor)) -> AdvisoryResponse:
    """Return whether now is a recommended time to apply NDR actions."""
    return AdvisoryResponse(
        recommended=advisor.is_recommended_time(),
        cutoff_hour=advisor.cutoff_hour,
        message=advisor.recommendation_message(),
    )


@router.get("/policy", response_model=PolicyResponse)
def get_policy(evaluator: EligibilityEvaluator = Depends(get_evaluator)) -> PolicyResponse:
    """Return the NSL policy table in effect."""
    policy = evaluator.policy
    return PolicyResponse(
        actions={action.value: sorted(policy.allowed_codes(action)) for action in NDRAction},
        max_prior_attempts=policy.max_prior_attempts,
    )
