#!/usr/bin/env python3
"""Contract Guard CLI - contract register and approval workflow.

Every command works on a freshly seeded in-memory workspace.

Usage:
    python main.py register --entity Brazil --status REVIEW
    python main.py metrics
    python main.py show CNT-2023-001 --as u5
    python main.py act CNT-2023-004 --as u2 approve --comment "Budget ok"
    python main.py analyze CNT-2023-001
    python main.py refine "we need boats for the offshore campaign" --context scope
    python main.py providers
"""

import asyncio
import sys
from typing import Optional, Tuple

import click
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text
from rich.markup import escape

from assistant import RefineContext, ReviewSession
from contracts import (
    Action,
    Contract,
    ContractStatus,
    Entity,
    RegisterQuery,
    SortOrder,
    StatusFilter,
)
from config import settings
from errors import ContractGuardError, ContractValidationError
from providers import list_providers as get_available_providers
from register import derive_view
from risk import get_trigger, suggest_checklist_triggers
from seed import Workspace, bootstrap
from workflow import available_actions, pending_approvals


console = Console()

STATUS_CHOICES = [f.value for f in StatusFilter] + [s.value for s in ContractStatus]
STATUS_STYLES = {
    ContractStatus.DRAFT: "dim",
    ContractStatus.SUBMITTED: "cyan",
    ContractStatus.PENDING_CEO: "magenta",
    ContractStatus.CHANGES_REQUESTED: "yellow",
    ContractStatus.APPROVED: "green",
    ContractStatus.REJECTED: "red",
}


def configure_logging(verbose: bool = False) -> None:
    """Send loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.log_level.upper())


def format_amount(amount: float, currency: str = "USD") -> str:
    if amount >= 1_000_000:
        return f"{currency} {amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"{currency} {amount / 1_000:.0f}k"
    return f"{currency} {amount:,.0f}"


def parse_status(value: str):
    try:
        return StatusFilter(value)
    except ValueError:
        return ContractStatus(value)


def fail(error: Exception) -> None:
    """Print a workflow error and exit non-zero."""
    console.print(f"[red]Error:[/red] {error}")
    if isinstance(error, ContractValidationError) and error.details:
        for field, problem in error.details.items():
            console.print(f"  [red]-[/red] {field}: {problem}")
    sys.exit(1)


def status_text(status: ContractStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def render_kpis(workspace_contracts, entity: Optional[Entity]) -> None:
    metrics = derive_view(workspace_contracts, RegisterQuery(entity=entity, page_size=1)).metrics
    console.print(Panel.fit(
        f"[bold]Under review:[/bold] {metrics.under_review}    "
        f"[bold]Total value:[/bold] {format_amount(metrics.total_value, settings.default_currency)}    "
        f"[bold]High risk:[/bold] [red]{metrics.high_risk}[/red]    "
        f"[bold]Avg review:[/bold] {metrics.avg_review_days:.1f} days",
        title=entity.value if entity else "All entities",
        border_style="blue",
    ))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose (DEBUG) logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Contract Guard: contract register and multi-role approval workflow."""
    configure_logging(verbose)
    ctx.ensure_object(dict)


def _workspace(ctx: click.Context) -> Workspace:
    if "workspace" not in ctx.obj:
        ctx.obj["workspace"] = bootstrap()
    return ctx.obj["workspace"]


@cli.command("register")
@click.option("--entity", "-e", type=click.Choice([e.value for e in Entity]), default=None,
              help="Only contracts for this entity")
@click.option("--status", "-s", type=click.Choice(STATUS_CHOICES), default=StatusFilter.ALL.value,
              help="ALL, REVIEW (Submitted or Pending CEO) or a single status")
@click.option("--high-risk", is_flag=True, help="Only high-risk contracts")
@click.option("--search", "-q", default="", help="Search contractor, id or scope")
@click.option("--sort", "sort_order", type=click.Choice(["asc", "desc"]), default="desc",
              help="Order by submission date")
@click.option("--page", "-p", type=int, default=1)
@click.option("--page-size", type=int, default=settings.default_page_size)
@click.pass_context
def register_cmd(ctx, entity, status, high_risk, search, sort_order, page, page_size):
    """List the contract register with dashboard KPIs."""
    workspace = _workspace(ctx)
    query = RegisterQuery(
        entity=Entity(entity) if entity else None,
        status=parse_status(status),
        high_risk_only=high_risk,
        search=search,
        sort_order=SortOrder(sort_order),
        page=page,
        page_size=page_size,
    )
    contracts = workspace.repository.get_all()
    view = derive_view(contracts, query)
    render_kpis(contracts, query.entity)

    table = Table(show_lines=False)
    for column in ("ID", "Contractor", "Entity", "Amount", "Status", "Risk", "Submitted"):
        table.add_column(column, no_wrap=column in ("ID", "Status", "Amount"))
    for c in view.items:
        table.add_row(
            c.id,
            c.contractor_name,
            c.entity.value,
            format_amount(c.amount, c.currency),
            status_text(c.status),
            "[red]HIGH[/red]" if c.is_high_risk else "",
            c.submission_date.strftime("%Y-%m-%d") if c.submission_date else "-",
        )
    console.print(table)
    if view.total_matches:
        console.print(
            f"[dim]Showing {view.first_row}-{view.last_row} of {view.total_matches} "
            f"(page {view.page}/{view.total_pages})[/dim]"
        )
    else:
        console.print("[dim]No contracts match the current filters.[/dim]")


@cli.command()
@click.option("--entity", "-e", type=click.Choice([e.value for e in Entity]), default=None)
@click.pass_context
def metrics(ctx, entity):
    """Show KPIs, status distribution and spend by entity."""
    workspace = _workspace(ctx)
    selected = Entity(entity) if entity else None
    contracts = workspace.repository.get_all()
    render_kpis(contracts, selected)
    summary = derive_view(contracts, RegisterQuery(entity=selected, page_size=1)).metrics

    statuses = Table(title="Status distribution")
    statuses.add_column("Status")
    statuses.add_column("Contracts", justify="right")
    for bucket in summary.status_distribution:
        statuses.add_row(status_text(bucket.status), str(bucket.count))
    console.print(statuses)

    spend = Table(title="Spend by entity")
    spend.add_column("Entity")
    spend.add_column("Value", justify="right")
    for row in summary.spend_by_entity:
        spend.add_row(row.entity.value, format_amount(row.value, settings.default_currency))
    console.print(spend)


def render_contract(contract: Contract) -> None:
    console.print(Panel.fit(
        f"[bold]{contract.contractor_name}[/bold]  ({contract.id})\n"
        f"{contract.entity.value} / {contract.department}  "
        f"{contract.contract_type.value}  {format_amount(contract.amount, contract.currency)}\n"
        f"Status: {status_text(contract.status)}",
        border_style="red" if contract.is_high_risk else "blue",
    ))
    console.print(f"[bold]Scope:[/bold] {contract.scope_of_work}")
    if contract.detected_triggers:
        console.print("\n[bold red]Risk triggers:[/bold red]")
        for trigger in contract.detected_triggers:
            console.print(f"  - [{trigger.category.value}] {trigger.description}")
    hints = suggest_checklist_triggers(contract)
    if hints:
        console.print("\n[yellow]Checklist flags to consider:[/yellow]")
        for trigger_id in hints:
            console.print(f"  - {trigger_id}: {get_trigger(trigger_id).description}")

    approvals = ", ".join(k.value for k, v in contract.corporate_approvals.items() if v) or "none"
    console.print(f"\n[bold]Approvals:[/bold] {approvals}")
    if contract.status == ContractStatus.SUBMITTED:
        pending = ", ".join(sorted(k.value for k in pending_approvals(contract)))
        console.print(f"[bold]Waiting on:[/bold] {pending or 'none'}")

    if contract.audit_trail:
        audit = Table(title="Audit trail")
        for column in ("When", "User", "Action", "Details"):
            audit.add_column(column)
        for entry in contract.audit_trail:
            audit.add_row(entry.timestamp.strftime("%Y-%m-%d %H:%M"), entry.user_name,
                          entry.action, entry.details or "")
        console.print(audit)

    for comment in contract.comments:
        console.print(f"[dim]{comment.timestamp:%Y-%m-%d %H:%M}[/dim] "
                      f"[bold]{comment.user_name}[/bold]: {escape(comment.text)}")
    if contract.ai_risk_analysis:
        console.print(Panel(Text(contract.ai_risk_analysis), title="AI risk analysis"))


@cli.command()
@click.argument("contract_id")
@click.option("--as", "user_id", default=None, help="Show the actions this user can take")
@click.pass_context
def show(ctx, contract_id, user_id):
    """Show one contract with its triggers, approvals and audit trail."""
    workspace = _workspace(ctx)
    try:
        contract = workspace.repository.get_by_id(contract_id)
        render_contract(contract)
        if user_id:
            user = workspace.users.get_by_id(user_id)
            actions = sorted(a.value for a in available_actions(user, contract))
            console.print(f"\n[bold]{user.name} ({user.role.value}) can:[/bold] {', '.join(actions) or 'nothing'}")
    except ContractGuardError as e:
        fail(e)


def _parse_assignments(assignments: Tuple[str, ...]) -> dict:
    changes = {}
    for item in assignments:
        if "=" not in item:
            raise ContractValidationError(f"Expected FIELD=VALUE, got '{item}'")
        field, value = item.split("=", 1)
        changes[field.strip()] = value
    return changes


@cli.command()
@click.argument("contract_id")
@click.argument("action", type=click.Choice([a.value for a in Action]))
@click.option("--as", "user_id", required=True, help="Acting user id (e.g. u1)")
@click.option("--comment", "-m", default=None, help="Review comment or comment text")
@click.option("--reviewer", default=None, help="User id for add_ad_hoc_reviewer")
@click.option("--trigger", default=None, help="Checklist trigger id for set_risk_flag")
@click.option("--clear", is_flag=True, help="Clear the flag instead of setting it")
@click.option("--document", default=None, help="File name for attach_document")
@click.option("--set", "assignments", multiple=True, help="FIELD=VALUE for edit (repeatable)")
@click.pass_context
def act(ctx, contract_id, action, user_id, comment, reviewer, trigger, clear, document, assignments):
    """Apply one workflow action to a contract and print the outcome."""
    workspace = _workspace(ctx)
    engine = workspace.engine
    action = Action(action)
    try:
        before = workspace.repository.get_by_id(contract_id)
        if action in (Action.SUBMIT, Action.APPROVE, Action.REJECT, Action.REQUEST_CHANGES):
            contract = engine.apply(contract_id, user_id, action, comment)
        elif action == Action.EDIT:
            contract = engine.update_draft(contract_id, user_id, _parse_assignments(assignments))
        elif action == Action.ADD_AD_HOC_REVIEWER:
            if not reviewer:
                raise ContractValidationError("--reviewer is required")
            contract = engine.add_ad_hoc_reviewer(contract_id, user_id, reviewer)
        elif action == Action.SET_RISK_FLAG:
            if not trigger:
                raise ContractValidationError("--trigger is required")
            contract = engine.set_risk_flag(contract_id, user_id, trigger, triggered=not clear)
        elif action == Action.ATTACH_DOCUMENT:
            if not document:
                raise ContractValidationError("--document is required")
            contract = engine.attach_document(contract_id, user_id, document, "application/octet-stream", 0)
        else:
            contract = engine.add_comment(contract_id, user_id, comment or "")
    except ContractGuardError as e:
        fail(e)
        return

    if contract.status != before.status:
        console.print(f"[green]{contract.id}:[/green] {status_text(before.status)} -> {status_text(contract.status)}")
    else:
        console.print(f"[green]{contract.id}:[/green] {action.value} recorded ({status_text(contract.status)})")
    if len(contract.audit_trail) > len(before.audit_trail):
        entry = contract.audit_trail[-1]
        console.print(f"  [dim]Audit:[/dim] {entry.action}" + (f" - {entry.details}" if entry.details else ""))


@cli.command()
@click.argument("contract_id")
@click.option("--refresh", is_flag=True, help="Ignore a cached analysis")
@click.pass_context
def analyze(ctx, contract_id, refresh):
    """Generate an executive risk summary for a contract."""
    workspace = _workspace(ctx)
    session = ReviewSession(workspace.engine, workspace.assistant)
    try:
        contract = session.view(contract_id)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Analyzing {contract.contractor_name}...", total=None)
            analysis = asyncio.run(session.request_risk_summary(refresh=refresh))
    except ContractGuardError as e:
        fail(e)
        return
    console.print(Panel(Text(analysis or ""), title=f"AI risk analysis - {contract_id}", border_style="magenta"))


@cli.command()
@click.argument("text")
@click.option("--context", type=click.Choice([c.value for c in RefineContext]),
              default=RefineContext.SCOPE.value, help="Which field the text is for")
@click.pass_context
def refine(ctx, text, context):
    """Rewrite rough contract text in a professional register."""
    workspace = _workspace(ctx)
    console.print(workspace.assistant.refine(text, RefineContext(context)), markup=False)


@cli.command()
def providers():
    """List AI providers and whether they are configured."""
    console.print("[bold]Available AI providers:[/bold]\n")
    for name, available in get_available_providers().items():
        status = "[green]✓ Ready[/green]" if available else "[red]✗ No API key[/red]"
        console.print(f"  {name:12} {status}")
    console.print(f"\n[dim]Configured:[/dim] {settings.ai_provider} / {settings.ai_model}")
    console.print("[dim]Set GOOGLE_API_KEY (or CONTRACT_GUARD_GOOGLE_API_KEY) for Gemini.[/dim]")


if __name__ == "__main__":
    cli(obj={})
