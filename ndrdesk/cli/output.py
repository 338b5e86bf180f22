"""CLI output formatters for Rich tables and JSON.

Provides human-readable Rich output (default) and machine-parseable JSON
output (--json flag). All formatting goes through these functions so the
CLI commands stay clean.
"""

import dataclasses
import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ndrdesk.errors.formatter import group_rejections
from ndrdesk.orchestrator.batch.models import ActionResult, BulkOutcome
from ndrdesk.services.ndr_types import ActionStatus
from ndrdesk.services.nsl_policy import NDRAction, NSLPolicy

console = Console()

# Courier UPL status colors
STATUS_COLORS = {
    "SUCCESS": "green",
    "COMPLETED": "green",
    "PENDING": "yellow",
    "IN_PROGRESS": "blue",
    "FAILED": "red",
    "FAILURE": "red",
}


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def _render(renderable: Any) -> str:
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def format_policy(policy: NSLPolicy, as_json: bool = False) -> str:
    """Format the NSL policy table.

    Args:
        policy: Policy to display.
        as_json: If True, return JSON string instead of Rich table.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _to_json({
            "actions": {
                action.value: sorted(policy.allowed_codes(action)) for action in NDRAction
            },
            "max_prior_attempts": policy.max_prior_attempts,
        })

    table = Table(title="NSL Policy", show_lines=True)
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Permitted NSL codes")
    for action in NDRAction:
        codes = sorted(policy.allowed_codes(action))
        table.add_row(action.value, ", ".join(codes) or "—")
    table.caption = f"Max prior attempts: {policy.max_prior_attempts}"
    return _render(table)


def format_evaluation(
    waybill: str,
    action: NDRAction,
    allowed: bool,
    reason: str,
    message: str,
    as_json: bool = False,
) -> str:
    """Format one eligibility verdict.

    Args:
        waybill: Waybill evaluated, or a placeholder for ad hoc checks.
        action: Action evaluated.
        allowed: Verdict allowed flag.
        reason: Verdict reason value.
        message: Human-readable explanation.
        as_json: If True, return JSON string.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _to_json({
            "waybill": waybill,
            "action": action.value,
            "allowed": allowed,
            "reason": reason,
            "message": message,
        })
    color = "green" if allowed else "red"
    label = "ALLOWED" if allowed else "DENIED"
    return _render(
        Panel(
            f"[bold {color}]{label}[/bold {color}] ({reason})\n{message}",
            title=f"{action.value} for {waybill}",
            border_style=color,
        )
    )


def format_bulk_outcome(outcome: BulkOutcome, as_json: bool = False) -> str:
    """Format a bulk submission outcome.

    Rejections sharing a reason are grouped into a single row.

    Args:
        outcome: Outcome returned by submit_bulk().
        as_json: If True, return JSON string instead of Rich output.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _to_json(dataclasses.asdict(outcome))

    lines = [
        f"[bold]Action:[/bold]    {outcome.action.value}",
        f"[bold]Accepted:[/bold]  [green]{len(outcome.accepted)}[/green]",
        f"[bold]Rejected:[/bold]  [red]{len(outcome.rejected)}[/red]",
        f"[bold]UPL ID:[/bold]    {outcome.correlation_id or '—'}",
    ]
    if not outcome.submitted:
        lines.append("")
        lines.append("[yellow]No eligible shipments; nothing was sent to the courier.[/yellow]")
    output = _render(Panel("\n".join(lines), title="Bulk NDR Action", border_style="cyan"))

    if outcome.rejected:
        messages = {item.reason.value: item.message for item in outcome.rejected}
        table = Table(title="Rejected", show_lines=True)
        table.add_column("Reason", style="red")
        table.add_column("Waybills")
        table.add_column("Example message")
        for reason, waybills in group_rejections(outcome.rejected).items():
            table.add_row(reason, ", ".join(waybills), messages[reason])
        output += _render(table)
    return output


def format_action_result(result: ActionResult, as_json: bool = False) -> str:
    """Format a single-order submission result.

    Args:
        result: Result returned by submit_single().
        as_json: If True, return JSON string.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _to_json(dataclasses.asdict(result))
    lines = [
        f"[bold]Waybill:[/bold]  {result.waybill}",
        f"[bold]Action:[/bold]   {result.action.value}",
        f"[bold]UPL ID:[/bold]   {result.correlation_id}",
    ]
    if result.next_attempt_date is not None:
        lines.append(f"[bold]Next attempt:[/bold] {result.next_attempt_date.isoformat()}")
    return _render(Panel("\n".join(lines), title="NDR Action Submitted", border_style="green"))


def format_action_status(status: ActionStatus, as_json: bool = False) -> str:
    """Format courier UPL status.

    Args:
        status: Status returned by the gateway.
        as_json: If True, return JSON string including the raw body.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _to_json(dataclasses.asdict(status))
    color = STATUS_COLORS.get(status.status.upper(), "white")
    table = Table(show_header=False, box=None)
    table.add_row("UPL ID:", status.correlation_id)
    table.add_row("Status:", f"[{color}]{status.status}[/{color}]")
    table.add_row("Waybills:", ", ".join(status.waybills) or "—")
    return _render(Panel(table, title="[bold]NDR Request Status[/bold]", border_style=color))
