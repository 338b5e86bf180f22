"""Bulk NDR action engine for NDRDesk.

Provides selection validation, eligibility partitioning, a single batched
courier call, and event-driven progress notification.
"""

from ndrdesk.orchestrator.batch.events import BulkEventEmitter, BulkEventObserver
from ndrdesk.orchestrator.batch.models import (
    ActionRequest,
    ActionResult,
    BulkOutcome,
    RejectedItem,
)
from ndrdesk.orchestrator.batch.orchestrator import NDRActionOrchestrator

__all__ = [
    "ActionRequest",
    "ActionResult",
    "BulkEventEmitter",
    "BulkEventObserver",
    "BulkOutcome",
    "NDRActionOrchestrator",
    "RejectedItem",
]
