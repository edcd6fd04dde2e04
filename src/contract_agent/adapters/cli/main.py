"""
adapters.cli.main - CLI adapter for the contract agent.

Mirrors contract_agent/adapters/rest/ for terminal use. Uses the same
ServiceFactory, OperationExecutor and ConversationOrchestrator as the
REST API so behaviour is identical.

Commands
--------
  init       Create the database schema
  seed       Insert demo contracts
  contracts  Show the contract table with derived fields
  tools      List the declared operations
  exec       Run one operation directly, bypassing the model
  ask        One-shot natural-language request
  chat       Interactive session (history kept until exit)

Usage
-----
  python run_cli.py seed
  python run_cli.py exec filterTable '{"column": "status", "operator": "equals", "value": "active"}'
  python run_cli.py ask "which contracts expire in the next 60 days?"
  python run_cli.py chat
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.syntax import Syntax
from rich.table import Table

from contract_agent import __version__
from contract_agent.agent.orchestrator import ConversationOrchestrator
from contract_agent.application.context import RequestContext
from contract_agent.application.dto import ChatResponse
from contract_agent.domain.models import ConversationMessage
from contract_agent.factory import ServiceFactory
from contract_agent.infrastructure.config import Settings
from contract_agent.infrastructure.logging import configure_logging
from contract_agent.infrastructure.persistence.seed import seed_contracts

console = Console()
app = typer.Typer(
    help="Contract Table Agent CLI",
    add_completion=False,
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def _make_factory() -> ServiceFactory:
    config = Settings.from_env()
    configure_logging(config.log_level)
    factory = ServiceFactory(config)
    await factory.initialize()
    return factory


def _make_orchestrator(factory: ServiceFactory) -> ConversationOrchestrator:
    try:
        return factory.create_orchestrator()
    except ValueError as exc:
        console.print(f"[bold red]Language model not configured:[/bold red] {exc}")
        raise typer.Exit(code=1)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[bold red]Invalid date '{value}'.[/bold red] Use YYYY-MM-DD.")
        raise typer.Exit(code=2)


def _build_ctx(today: Optional[date]) -> RequestContext:
    readable = today.strftime("%A, %B %d, %Y") if today else ""
    return RequestContext(current_date=today, current_date_readable=readable)


def _print_json(data: dict) -> None:
    console.print(Syntax(json.dumps(data, indent=2, default=str), "json", theme="ansi_dark"))


def _print_response(response: ChatResponse) -> None:
    style = "green" if response.success else "red"
    title = "Agent" if response.success else f"Agent ({response.reason or 'failed'})"
    console.print(Panel(response.message or "[dim](no message)[/dim]", title=title, border_style=style))

    for result in response.tool_results:
        status = "[green]ok[/green]" if result.success else f"[red]{result.error}[/red]"
        label = result.action or result.message or ""
        console.print(f"  • {status} [dim]{label}[/dim]")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"contract-agent v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Contract Table Agent CLI."""


# ---------------------------------------------------------------------------
# Commands: Data
# ---------------------------------------------------------------------------

@app.command()
def init() -> None:
    """Create the database schema (safe to re-run)."""
    async def _run() -> None:
        factory = await _make_factory()
        console.print(f"[green]Database ready:[/green] {factory.config.db_path}")

    asyncio.run(_run())


@app.command()
def seed() -> None:
    """Insert the demo contracts."""
    async def _run() -> None:
        factory = await _make_factory()
        count = await seed_contracts(factory.create_contract_repository())
        console.print(f"[green]Inserted {count} demo contracts.[/green]")

    asyncio.run(_run())


@app.command()
def contracts(
    today: Optional[str] = typer.Option(None, "--date", "-d", help="Today's date (YYYY-MM-DD)."),
) -> None:
    """Show the contract table with duration, days remaining and monthly amount."""
    anchor = _parse_date(today)

    async def _run() -> None:
        factory = await _make_factory()
        views = await factory.create_contract_service().list_views(_build_ctx(anchor).now())

        table = Table(box=box.SIMPLE_HEAVY, show_lines=False)
        for header, justify in [
            ("Name", "left"), ("Counterparty", "left"), ("Amount", "right"),
            ("Start", "left"), ("End", "left"), ("Status", "left"),
            ("Days", "right"), ("Left", "right"), ("Monthly", "right"),
        ]:
            table.add_column(header, justify=justify)

        for v in views:
            c = v.contract
            table.add_row(
                c.name, c.counterparty_name, f"{c.amount:,.2f}",
                c.start_date, c.end_date, c.status,
                str(v.duration_days), str(v.days_remaining), f"{v.monthly_amount:,.2f}",
            )
        console.print(table)
        console.print(f"[dim]{len(views)} contracts[/dim]")

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Operations
# ---------------------------------------------------------------------------

@app.command()
def tools() -> None:
    """List the declared operations."""
    async def _run() -> None:
        factory = await _make_factory()
        registry = factory.create_tool_registry()

        table = Table(box=box.SIMPLE, show_lines=False)
        table.add_column("Operation", style="bold")
        table.add_column("Kind")
        table.add_column("Parameters")
        for tool, definition in zip(registry.all(), registry.definitions()):
            params = ", ".join(definition.parameters.get("properties", {}).keys()) or "-"
            table.add_row(tool.name, tool.category, params)
        console.print(table)

    asyncio.run(_run())


@app.command(name="exec")
def exec_operation(
    name: str = typer.Argument(..., help="Operation name, e.g. filterTable."),
    arguments: str = typer.Argument("", help="Arguments as a JSON object."),
    today: Optional[str] = typer.Option(None, "--date", "-d", help="Today's date (YYYY-MM-DD)."),
) -> None:
    """Run one operation directly, bypassing the language model."""
    anchor = _parse_date(today)

    async def _run() -> None:
        factory = await _make_factory()
        result = await factory.create_executor().execute(name, arguments, _build_ctx(anchor))
        _print_json(result.to_dict())
        if not result.success:
            raise typer.Exit(code=1)

    asyncio.run(_run())


@app.command()
def ask(
    query: str = typer.Argument(..., help="What you want done with the contracts."),
    today: Optional[str] = typer.Option(None, "--date", "-d", help="Today's date (YYYY-MM-DD)."),
    raw: bool = typer.Option(False, "--json", help="Print the full JSON response."),
) -> None:
    """Send one natural-language request through the agent."""
    anchor = _parse_date(today)

    async def _run() -> None:
        factory = await _make_factory()
        orchestrator = _make_orchestrator(factory)

        with console.status("[bold cyan]Thinking…", spinner="dots"):
            response = await orchestrator.run(
                [ConversationMessage.user(query)], _build_ctx(anchor),
            )

        if raw:
            _print_json(response.to_dict())
        else:
            _print_response(response)

    asyncio.run(_run())


@app.command()
def chat(
    today: Optional[str] = typer.Option(None, "--date", "-d", help="Today's date (YYYY-MM-DD)."),
) -> None:
    """Start an interactive session. History is kept until you exit."""
    anchor = _parse_date(today)

    async def _run() -> None:
        factory = await _make_factory()
        orchestrator = _make_orchestrator(factory)
        history: list[ConversationMessage] = []

        console.print(Panel(
            "[bold]Contract Table Agent[/bold]\n"
            "Ask about, filter, add, update or delete contracts.\n"
            "Type [bold]exit[/bold] / [bold]quit[/bold] to stop.",
            border_style="cyan",
        ))

        while True:
            try:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if user_input.strip().lower() in ("exit", "quit", "q", "bye"):
                console.print("[dim]Goodbye![/dim]")
                break

            if not user_input.strip():
                continue

            history.append(ConversationMessage.user(user_input))
            with console.status("[bold cyan]Thinking…", spinner="dots"):
                response = await orchestrator.run(history, _build_ctx(anchor))
            history.append(ConversationMessage.assistant(response.message))

            console.print()
            _print_response(response)

    asyncio.run(_run())


if __name__ == "__main__":
    app()
