"""NDRDesk CLI: resolve courier non-delivery reports from the terminal.

Usage:
    ndrdesk policy show                       Show permitted NSL codes
    ndrdesk evaluate --nsl-code EOD-74 --attempts 1 --action RE-ATTEMPT
    ndrdesk action 1234567890 --nsl-code EOD-74 --attempts 1 --action RE-ATTEMPT
    ndrdesk bulk shipments.csv --action RE-ATTEMPT
    ndrdesk status <UPL_ID>                   Check a submitted request
"""

import asyncio
import logging
import sys
from typing import Optional

import typer
from rich.console import Console

from ndrdesk.cli.config import NDRDeskConfig, load_config
from ndrdesk.cli.output import (
    format_action_result,
    format_action_status,
    format_bulk_outcome,
    format_evaluation,
    format_policy,
)
from ndrdesk.errors.domain import ConfigurationError, DomainError, NotFoundError
from ndrdesk.errors.formatter import format_error
from ndrdesk.orchestrator.batch.orchestrator import NDRActionOrchestrator
from ndrdesk.services.eligibility import EligibilityEvaluator
from ndrdesk.services.gateway_provider import build_action_gateway
from ndrdesk.services.ndr_types import ShipmentNDRRecord, StatusBucket, filter_by_bucket
from ndrdesk.services.nsl_policy import NDRAction, parse_action
from ndrdesk.services.shipment_import import load_shipments_csv

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="ndrdesk",
    help="Courier NDR resolution: eligibility checks and bulk actions",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")
policy_app = typer.Typer(help="Inspect the NSL policy table")

app.add_typer(config_app, name="config")
app.add_typer(policy_app, name="policy")

console = Console()

# --- Global state ---
_config_path: str | None = None
_log_level: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to ndrdesk.yaml config file"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override logging level (debug, info, warning, error)"
    ),
):
    """NDRDesk CLI: courier NDR resolution."""
    global _config_path, _log_level
    _config_path = config
    _log_level = log_level


def _load() -> NDRDeskConfig:
    """Load config and configure logging, exiting 1 on config errors."""
    try:
        cfg = load_config(config_path=_config_path)
    except ConfigurationError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(1)
    level = (_log_level or cfg.logging.level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=cfg.logging.format,
        stream=sys.stderr,
    )
    return cfg


def _action(value: str) -> NDRAction:
    try:
        return parse_action(value)
    except DomainError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(1)


def _confirm_off_hours(cfg: NDRDeskConfig, action: NDRAction, yes: bool) -> None:
    """Show the time advisory and ask before early re-attempts."""
    advisor = cfg.advisory.to_advisor()
    if advisor.is_recommended_time():
        return
    console.print(f"[yellow]{advisor.recommendation_message()}[/yellow]")
    if action is NDRAction.RE_ATTEMPT and not yes:
        if not typer.confirm("Submit anyway?", default=False):
            console.print("Aborted.")
            raise typer.Exit(1)


def _mask(secret: str) -> str:
    if not secret:
        return "(not set)"
    return "***" + secret[-4:] if len(secret) > 4 else "***"


def _orchestrator(cfg: NDRDeskConfig, gateway) -> NDRActionOrchestrator:
    return NDRActionOrchestrator(
        evaluator=EligibilityEvaluator(cfg.policy.to_policy()),
        gateway=gateway,
        advisor=cfg.advisory.to_advisor(),
    )


# --- Version ---


@app.command()
def version():
    """Show NDRDesk version."""
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as pkg_version

    try:
        v = pkg_version("ndrdesk")
    except PackageNotFoundError:
        from ndrdesk import __version__ as v
    console.print(f"[bold]NDRDesk[/bold] v{v}")


# --- Config commands ---


@config_app.command("show")
def config_show():
    """Display resolved configuration (token masked)."""
    cfg = _load()
    console.print("[bold]Gateway:[/bold]")
    console.print(f"  base_url: {cfg.gateway.base_url}")
    console.print(f"  api_token: {_mask(cfg.gateway.api_token)}")
    console.print(f"  timeout_seconds: {cfg.gateway.timeout_seconds}")

    console.print("\n[bold]Advisory:[/bold]")
    console.print(f"  cutoff_hour: {cfg.advisory.cutoff_hour}")
    console.print(f"  timezone: {cfg.advisory.timezone or '(local)'}")

    console.print("\n[bold]Policy:[/bold]")
    console.print(f"  reattempt_codes: {', '.join(cfg.policy.reattempt_codes)}")
    console.print(f"  reschedule_codes: {', '.join(cfg.policy.reschedule_codes)}")
    console.print(f"  max_prior_attempts: {cfg.policy.max_prior_attempts}")

    console.print("\n[bold]Logging:[/bold]")
    console.print(f"  level: {cfg.logging.level}")


# --- Policy commands ---


@policy_app.command("show")
def policy_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show permitted NSL codes per NDR action."""
    cfg = _load()
    output = format_policy(cfg.policy.to_policy(), as_json=json_output)
    if json_output:
        typer.echo(output)
    else:
        console.print(output)


# --- Advisory ---


@app.command()
def advisory():
    """Show whether now is a recommended time to apply NDR actions."""
    cfg = _load()
    advisor = cfg.advisory.to_advisor()
    color = "green" if advisor.is_recommended_time() else "yellow"
    console.print(f"[{color}]{advisor.recommendation_message()}[/{color}]")


# --- Evaluation ---


@app.command()
def evaluate(
    nsl_code: str = typer.Option(..., "--nsl-code", help="Current NSL status code"),
    attempts: int = typer.Option(0, "--attempts", min=0, help="Attempts recorded so far"),
    action: str = typer.Option(..., "--action", help="RE-ATTEMPT or PICKUP_RESCHEDULE"),
    waybill: str = typer.Option("-", "--waybill", help="Waybill label for the output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Check whether an NDR action is allowed, without contacting the courier."""
    cfg = _load()
    ndr_action = _action(action)
    evaluator = EligibilityEvaluator(cfg.policy.to_policy())
    shipment = ShipmentNDRRecord(waybill=waybill, nsl_code=nsl_code, attempt_count=attempts)
    verdict = evaluator.evaluate(shipment, ndr_action)
    output = format_evaluation(
        waybill,
        ndr_action,
        verdict.allowed,
        verdict.reason.value,
        evaluator.describe(verdict, shipment, ndr_action),
        as_json=json_output,
    )
    if json_output:
        typer.echo(output)
    else:
        console.print(output)
    if not verdict.allowed:
        raise typer.Exit(1)


# --- Submission ---


@app.command("action")
def action_cmd(
    waybill: str = typer.Argument(help="Waybill (AWB) number"),
    nsl_code: str = typer.Option(..., "--nsl-code", help="Current NSL status code"),
    attempts: int = typer.Option(0, "--attempts", min=0, help="Attempts recorded so far"),
    action: str = typer.Option(..., "--action", help="RE-ATTEMPT or PICKUP_RESCHEDULE"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the off-hours confirmation"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Submit an NDR action for a single shipment."""
    cfg = _load()
    ndr_action = _action(action)
    shipment = ShipmentNDRRecord(waybill=waybill, nsl_code=nsl_code, attempt_count=attempts)
    _confirm_off_hours(cfg, ndr_action, yes)

    async def _run():
        async with build_action_gateway(cfg.gateway) as gateway:
            return await _orchestrator(cfg, gateway).submit_single(shipment, ndr_action)

    try:
        result = asyncio.run(_run())
    except DomainError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(1)
    output = format_action_result(result, as_json=json_output)
    if json_output:
        typer.echo(output)
    else:
        console.print(output)


@app.command()
def bulk(
    file: str = typer.Argument(help="CSV file: waybill,nsl_code,attempt_count[,order_id,status_bucket]"),
    action: str = typer.Option(..., "--action", help="RE-ATTEMPT or PICKUP_RESCHEDULE"),
    bucket: StatusBucket = typer.Option(
        StatusBucket.ALL, "--bucket", help="Only act on shipments in this status bucket"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the off-hours confirmation"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Submit one NDR action for every shipment in a CSV file."""
    cfg = _load()
    ndr_action = _action(action)
    try:
        shipments = filter_by_bucket(load_shipments_csv(file), bucket)
    except FileNotFoundError:
        console.print(f"[red]File not found:[/red] {file}")
        raise typer.Exit(1)
    except DomainError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(1)
    _log.info("%d shipment(s) selected from %s (bucket: %s)", len(shipments), file, bucket.value)
    _confirm_off_hours(cfg, ndr_action, yes)

    async def _run():
        async with build_action_gateway(cfg.gateway) as gateway:
            return await _orchestrator(cfg, gateway).submit_bulk(shipments, ndr_action)

    try:
        outcome = asyncio.run(_run())
    except DomainError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(1)
    output = format_bulk_outcome(outcome, as_json=json_output)
    if json_output:
        typer.echo(output)
    else:
        console.print(output)


@app.command()
def status(
    upl_id: str = typer.Argument(help="UPL ID returned when the action was submitted"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show courier processing status for a submitted NDR request."""
    cfg = _load()

    async def _run():
        async with build_action_gateway(cfg.gateway) as gateway:
            return await gateway.get_status(upl_id)

    try:
        result = asyncio.run(_run())
    except NotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except DomainError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(1)
    output = format_action_status(result, as_json=json_output)
    if json_output:
        typer.echo(output)
    else:
        console.print(output)
