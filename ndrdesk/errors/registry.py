"""Error code registry with E-XXXX format codes.

This module defines the error code system for NDRDesk, organizing errors
into categories:
- E-1xxx: Shipment data errors
- E-2xxx: Validation errors
- E-3xxx: Courier gateway errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    DATA = "data"  # E-1xxx: Shipment data errors
    VALIDATION = "validation"  # E-2xxx: Validation errors
    GATEWAY = "gateway"  # E-3xxx: Courier gateway errors
    SYSTEM = "system"  # E-4xxx: System/internal errors
    AUTH = "auth"  # E-5xxx: Authentication errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str  # E-XXXX format
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Data errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.DATA,
        title="Missing Required Column",
        message_template="Required column '{column}' is missing from the shipment file.",
        remediation="Add the column to the file header (waybill, nsl_code, attempt_count) and retry.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.DATA,
        title="Empty Shipment File",
        message_template="No shipment rows found in {path}.",
        remediation="Check that the file contains at least one shipment row.",
    ),
    "E-1003": ErrorCode(
        code="E-1003",
        category=ErrorCategory.DATA,
        title="Invalid Attempt Count",
        message_template="Invalid attempt count '{value}' for waybill {waybill} ({source}).",
        remediation="Attempt counts must be whole numbers of zero or more. Correct and retry.",
    ),
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Empty Selection",
        message_template="No shipments selected for {action}.",
        remediation="Select at least one shipment and retry.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="Unknown NDR Action",
        message_template="Unknown NDR action '{action}'.",
        remediation="Use RE-ATTEMPT or PICKUP_RESCHEDULE.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Action Not Permitted",
        message_template="{action} is not permitted for waybill {waybill}: {reason}",
        remediation="Check the shipment's NSL code and attempt count, or choose another action.",
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.VALIDATION,
        title="Conflicting Duplicate Waybill",
        message_template="Waybill {waybill} appears more than once with different NDR state.",
        remediation="Refresh the shipment list and resubmit the selection.",
    ),
    # Courier gateway errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.GATEWAY,
        title="Courier Service Unavailable",
        message_template="Courier NDR API is not responding: {reason}",
        remediation="Wait a few minutes and resubmit the same selection.",
        is_retryable=True,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.GATEWAY,
        title="Courier Rate Limit Exceeded",
        message_template="Too many requests to the courier NDR API.",
        remediation="Wait 60 seconds and resubmit the same selection.",
        is_retryable=True,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.GATEWAY,
        title="Courier Rejected Action",
        message_template="Courier rejected the {action} request: {reason}",
        remediation="The shipments passed local policy checks. Refresh tracking data and contact support if it persists.",
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.GATEWAY,
        title="Malformed Courier Response",
        message_template="Courier response could not be understood: {reason}",
        remediation="Check the UPL status before resubmitting to avoid a duplicate request.",
    ),
    "E-3005": ErrorCode(
        code="E-3005",
        category=ErrorCategory.GATEWAY,
        title="Courier Unknown Error",
        message_template="Courier returned an unexpected error: {reason}",
        remediation="Contact support with error code E-3005 and the courier message.",
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Configuration Error",
        message_template="Configuration could not be loaded: {reason}",
        remediation="Fix the ndrdesk.yaml file or the NDRDESK_* environment variables.",
    ),
    # Auth errors (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="Courier Authentication Failed",
        message_template="Courier API rejected the configured token.",
        remediation="Check gateway.api_token in your config or NDRDESK_GATEWAY_API_TOKEN.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
