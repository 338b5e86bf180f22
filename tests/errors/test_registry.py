"""Unit tests for ndrdesk/errors/registry.py.

Tests verify:
- Error codes are registered with correct categories and titles
- Retryable flags match the courier failure modes
"""

import re

import pytest

from ndrdesk.errors.registry import ERROR_REGISTRY, ErrorCategory, get_error, get_errors_by_category


@pytest.mark.parametrize(
    "code,category,title",
    [
        ("E-1001", ErrorCategory.DATA, "Missing Required Column"),
        ("E-1002", ErrorCategory.DATA, "Empty Shipment File"),
        ("E-1003", ErrorCategory.DATA, "Invalid Attempt Count"),
        ("E-2001", ErrorCategory.VALIDATION, "Empty Selection"),
        ("E-2002", ErrorCategory.VALIDATION, "Unknown NDR Action"),
        ("E-2003", ErrorCategory.VALIDATION, "Action Not Permitted"),
        ("E-2004", ErrorCategory.VALIDATION, "Conflicting Duplicate Waybill"),
        ("E-3001", ErrorCategory.GATEWAY, "Courier Service Unavailable"),
        ("E-3002", ErrorCategory.GATEWAY, "Courier Rate Limit Exceeded"),
        ("E-3003", ErrorCategory.GATEWAY, "Courier Rejected Action"),
        ("E-3004", ErrorCategory.GATEWAY, "Malformed Courier Response"),
        ("E-3005", ErrorCategory.GATEWAY, "Courier Unknown Error"),
        ("E-4001", ErrorCategory.SYSTEM, "Configuration Error"),
        ("E-5001", ErrorCategory.AUTH, "Courier Authentication Failed"),
    ],
)
def test_error_codes_registered(code, category, title):
    """All NDRDesk error codes must be registered."""
    error = get_error(code)
    assert error is not None, f"{code} not found in registry"
    assert error.category == category
    assert error.title == title


def test_only_transient_gateway_errors_are_retryable():
    retryable = {code for code, e in ERROR_REGISTRY.items() if e.is_retryable}
    assert retryable == {"E-3001", "E-3002"}


def test_codes_match_keys_and_format():
    for key, error in ERROR_REGISTRY.items():
        assert key == error.code
        assert re.fullmatch(r"E-\d{4}", key)


def test_templates_do_not_use_reserved_details_placeholder():
    """'details' is a keyword of from_code and cannot be a template field."""
    for error in ERROR_REGISTRY.values():
        assert "{details}" not in error.message_template


def test_get_errors_by_category():
    codes = [e.code for e in get_errors_by_category(ErrorCategory.DATA)]
    assert codes == ["E-1001", "E-1002", "E-1003"]


def test_unknown_code():
    assert get_error("E-9999") is None
