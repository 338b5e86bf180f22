"""Pydantic schemas for API request/response validation.

This module defines the data contracts for the NDRDesk REST API. Shipments
are passed in the request body; the API keeps no state between requests.
"""

from datetime import date

from pydantic import BaseModel, Field

from ndrdesk.services.ndr_types import ShipmentNDRRecord, StatusBucket


# Shipment schemas


class ShipmentIn(BaseModel):
    """Shipment snapshot as last read from the tracking feed."""

    waybill: str = Field(..., min_length=1)
    nsl_code: str
    attempt_count: int = Field(0, ge=0)
    status_bucket: StatusBucket | None = None
    order_id: str | None = None

    def to_record(self) -> ShipmentNDRRecord:
        """Convert to the engine's immutable record."""
        return ShipmentNDRRecord(
            waybill=self.waybill,
            nsl_code=self.nsl_code,
            attempt_count=self.attempt_count,
            status_bucket=self.status_bucket,
            order_id=self.order_id,
        )


# Evaluation schemas


class EvaluateRequest(BaseModel):
    """Request schema for an eligibility check."""

    shipment: ShipmentIn
    action: str


class EvaluateResponse(BaseModel):
    """Response schema for an eligibility check."""

    waybill: str
    action: str
    allowed: bool
    reason: str
    message: str
    allowed_actions: list[str]


# Submission schemas


class ActionRequestBody(BaseModel):
    """Request schema for a single-order NDR action."""

    shipment: ShipmentIn
    action: str


class ActionResponse(BaseModel):
    """Response schema for a submitted single-order action."""

    waybill: str
    action: str
    correlation_id: str
    next_attempt_date: date | None = None


class BulkActionRequest(BaseModel):
    """Request schema for a bulk NDR action.

    An empty shipment list is rejected by the engine with E-2001 so that
    the caller gets the same error contract as the CLI.
    """

    shipments: list[ShipmentIn]
    action: str
    bucket: StatusBucket = StatusBucket.ALL


class RejectedItemResponse(BaseModel):
    """One shipment withheld by local policy."""

    waybill: str
    reason: str
    message: str


class BulkActionResponse(BaseModel):
    """Response schema for a bulk NDR action."""

    action: str
    submitted: bool
    correlation_id: str | None = None
    accepted: list[str]
    rejected: list[RejectedItemResponse]
    rejected_by_reason: dict[str, list[str]]
    summary: str


# Status and reference schemas


class ActionStatusResponse(BaseModel):
    """Courier processing status for a submitted request."""

    correlation_id: str
    status: str
    waybills: list[str]


class AdvisoryResponse(BaseModel):
    """Time-of-day advisory."""

    recommended: bool
    cutoff_hour: int
    message: str


class PolicyResponse(BaseModel):
    """NSL policy table."""

    actions: dict[str, list[str]]
    max_prior_attempts: int


class ErrorResponse(BaseModel):
    """Error body returned for domain errors."""

    error_code: str | None
    message: str
    remediation: str = ""
    retryable: bool = False
    details: dict | None = None
