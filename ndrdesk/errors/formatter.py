"""Error formatting and grouping utilities.

This module provides:
- Error formatting for user display
- Grouping of rejected shipments by denial reason
"""

from collections.abc import Iterable

from ndrdesk.errors.domain import DomainError


def format_error(error: DomainError, include_remediation: bool = True) -> str:
    """Format error for display to user.

    Args:
        error: The DomainError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string suitable for user display.
    """
    lines = [str(error)]

    waybills = error.details.get("waybills")
    if waybills:
        shown = ", ".join(str(w) for w in waybills[:10])
        if len(waybills) > 10:
            shown += f" (and {len(waybills) - 10} more)"
        lines.append(f"  Waybills: {shown}")

    if error.is_retryable:
        lines.append("  Retryable: yes")

    if include_remediation and error.remediation:
        lines.append(f"  Action: {error.remediation}")

    return "\n".join(lines)


def group_rejections(rejected: Iterable) -> dict[str, list[str]]:
    """Group rejected waybills by denial reason.

    Same reasons appearing on many shipments are combined into a single
    entry listing all affected waybills, in selection order.

    Example:
        3 shipments rejected with attempt_limit_exceeded
        -> {"attempt_limit_exceeded": ["W1", "W2", "W3"]}

    Args:
        rejected: RejectedItem objects (anything with waybill and reason).

    Returns:
        Mapping of reason value to waybills, ordered by first appearance.
    """
    groups: dict[str, list[str]] = {}
    for item in rejected:
        key = getattr(item.reason, "value", str(item.reason))
        groups.setdefault(key, []).append(item.waybill)
    return groups


def format_rejection_summary(rejected: Iterable) -> str:
    """Format rejected shipments for display in a confirmation dialog.

    Args:
        rejected: RejectedItem objects with a human-readable message.

    Returns:
        One line per rejected shipment under a count header.
    """
    items = list(rejected)
    if not items:
        return "No shipments rejected."

    lines = [f"{len(items)} shipment(s) cannot be actioned:"]
    for item in items:
        lines.append(f"  {item.waybill}: {item.message}")
    return "\n".join(lines)
