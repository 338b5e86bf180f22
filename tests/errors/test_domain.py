"""Tests for typed domain exceptions."""

from ndrdesk.errors.domain import (
    ConfigurationError,
    DomainError,
    GatewayError,
    NotFoundError,
    ValidationError,
)


class TestFromCode:
    """Tests for DomainError.from_code."""

    def test_formats_template(self):
        error = ValidationError.from_code("E-2001", action="RE-ATTEMPT")
        assert isinstance(error, ValidationError)
        assert error.code == "E-2001"
        assert error.message == "No shipments selected for RE-ATTEMPT."
        assert error.remediation
        assert str(error) == "E-2001: No shipments selected for RE-ATTEMPT."

    def test_missing_placeholder_keeps_template(self):
        error = ValidationError.from_code("E-2001")
        assert error.message == "No shipments selected for {action}."

    def test_unknown_code(self):
        error = DomainError.from_code("E-9999")
        assert error.message == "Unknown error: E-9999"
        assert error.code == "E-9999"

    def test_details_stored(self):
        error = ValidationError.from_code("E-2004", details={"waybills": ["W1"]}, waybill="W1")
        assert error.details == {"waybills": ["W1"]}


class TestGatewayError:
    """Tests for GatewayError."""

    def test_status_code_and_retryable(self):
        error = GatewayError.from_code("E-3002", status_code=429)
        assert isinstance(error, GatewayError)
        assert error.status_code == 429
        assert error.is_retryable

    def test_default_code(self):
        error = GatewayError("courier exploded")
        assert error.code == "E-3005"
        assert not error.is_retryable


class TestOtherErrors:
    """Tests for NotFoundError and ConfigurationError."""

    def test_not_found_message(self):
        error = NotFoundError("UPL", "U1")
        assert error.message == "UPL 'U1' not found"
        assert error.code is None
        assert str(error) == "UPL 'U1' not found"
        assert not error.is_retryable

    def test_configuration_default_code(self):
        assert ConfigurationError("bad").code == "E-4001"
