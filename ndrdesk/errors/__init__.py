"""Error handling framework for NDRDesk.

This package provides:
- Error code registry with E-XXXX format codes
- Typed domain exceptions (validation, gateway, configuration)
- Error formatting and rejection grouping utilities

Error categories:
- E-1xxx: Shipment data errors
- E-2xxx: Validation errors
- E-3xxx: Courier gateway errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors
"""

from ndrdesk.errors.domain import (
    ConfigurationError,
    DomainError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from ndrdesk.errors.formatter import (
    format_error,
    format_rejection_summary,
    group_rejections,
)
from ndrdesk.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Domain exceptions
    "DomainError",
    "ValidationError",
    "GatewayError",
    "NotFoundError",
    "ConfigurationError",
    # Formatter
    "format_error",
    "group_rejections",
    "format_rejection_summary",
]
