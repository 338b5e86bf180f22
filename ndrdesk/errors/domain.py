"""Typed domain exceptions for API and CLI error mapping.

These exceptions give callers a stronger contract than string matching.
Routes and CLI commands catch specific exception types to choose an HTTP
status code or exit code.

Usage:
    # In the orchestrator
    raise ValidationError.from_code("E-2001", action="RE-ATTEMPT")

    # In a route handler
    try:
        outcome = await orchestrator.submit_bulk(shipments, action)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
"""

from typing import Any

from ndrdesk.errors.registry import get_error


class DomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error message.
        code: Registry error code in E-XXXX format, if known.
        remediation: Action the user should take to resolve.
        details: Additional machine-readable context.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        remediation: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.remediation = remediation
        self.details = details or {}

    def __str__(self) -> str:
        """Return message prefixed with the error code when one is set."""
        if self.code:
            return f"{self.code}: {self.message}"
        return self.message

    @property
    def is_retryable(self) -> bool:
        """Whether the registry marks this error as retryable."""
        error_def = get_error(self.code) if self.code else None
        return bool(error_def and error_def.is_retryable)

    @classmethod
    def from_code(
        cls,
        code: str,
        details: dict[str, Any] | None = None,
        **kwargs: object,
    ) -> "DomainError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            details: Machine-readable context stored on the error.
            **kwargs: Context values for message template substitution.

        Returns:
            Error instance with formatted message.
        """
        error_def = get_error(code)
        if not error_def:
            return cls(
                f"Unknown error: {code}",
                code=code,
                remediation="Contact support.",
                details=details,
            )

        message = error_def.message_template
        try:
            message = message.format(**kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            message,
            code=error_def.code,
            remediation=error_def.remediation,
            details=details,
        )


class NotFoundError(DomainError):
    """Resource was not found. Maps to HTTP 404."""

    def __init__(self, resource_type: str, identifier: str) -> None:
        super().__init__(f"{resource_type} '{identifier}' not found")
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(DomainError):
    """Input rejected before any courier call. Maps to HTTP 400."""


class GatewayError(DomainError):
    """The courier gateway call failed. Maps to HTTP 502.

    Attributes:
        status_code: HTTP status returned by the courier, if any.
    """

    default_code = "E-3005"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        remediation: str = "",
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, code=code, remediation=remediation, details=details)
        self.status_code = status_code

    @classmethod
    def from_code(
        cls,
        code: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        **kwargs: object,
    ) -> "GatewayError":
        """Create a gateway error from a registry code.

        Args:
            code: Error code in E-XXXX format.
            details: Machine-readable context stored on the error.
            status_code: Courier HTTP status, if a response was received.
            **kwargs: Context values for message template substitution.

        Returns:
            GatewayError with formatted message.
        """
        error = super().from_code(code, details=details, **kwargs)
        error.status_code = status_code
        return error


class ConfigurationError(DomainError):
    """Configuration could not be loaded or validated."""

    default_code = "E-4001"
