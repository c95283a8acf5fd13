"""CLI for splitledger using Typer."""

import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .exceptions import SplitValidationError
from .loader import load_balances, load_expenses
from .mcp_server import run_server
from .models import SettlementPlan, UserBalance, UserSettlements
from .money import to_decimal
from .service import LedgerService
from .settlements import settlements_for_user
from .splits import calculate_split
from .ui import select_participant_interactive

app = typer.Typer(
    name="splitledger",
    help="Compute shared-expense balances and plan the fewest payments to settle up",
)

console = Console()


def setup_logging(verbose: bool = False, level_name: str = "INFO"):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: Decimal, symbol: str = "$", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            formatted = f"({symbol}[red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"({symbol}{abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]{symbol}{abs_amount:,.2f}[/green] "
        else:
            formatted = f" {symbol}{abs_amount:,.2f} "
    return formatted


def _fail(e: Exception, verbose: bool):
    console.print(f"\n[bold red]Error:[/bold red] {e}")
    if verbose:
        raise e
    sys.exit(1)


def display_balances(balances: list[UserBalance], symbol: str = "$"):
    """Display balances in a table, creditors first."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Participant", style="cyan")
    table.add_column("Paid", justify="right", width=14)
    table.add_column("Owed", justify="right", width=14)
    table.add_column("Net", justify="right", width=14)
    table.add_column("Status", style="dim")

    for balance in balances:
        if balance.is_creditor:
            status = "is owed"
        elif balance.is_debtor:
            status = "owes"
        else:
            status = "settled"

        table.add_row(
            balance.user_id,
            format_money(balance.total_paid, symbol, use_color=False),
            format_money(balance.total_owed, symbol, use_color=False),
            format_money(balance.net_amount, symbol),
            status,
        )

    console.print(table)


def display_plan(plan: SettlementPlan, symbol: str = "$"):
    """Display a settlement plan with its checks."""
    if not plan.settlements:
        console.print("\n[green]Nothing to settle.[/green]")
    else:
        table = Table(
            title="Settlements", show_header=True, header_style="bold magenta"
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("From", style="red")
        table.add_column("To", style="green")
        table.add_column("Amount", justify="right", width=14)

        for index, settlement in enumerate(plan.settlements, start=1):
            table.add_row(
                str(index),
                settlement.from_user,
                settlement.to_user,
                format_money(settlement.amount, symbol),
            )

        console.print(table)

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  Strategy: {plan.strategy}")
    console.print(f"  Payments: {len(plan.settlements)}")
    console.print(f"  Total volume: {format_money(plan.total_volume, symbol)}")

    if plan.is_balanced:
        console.print("  [green]✓ Balances sum to zero[/green]")
    else:
        console.print("  [red]✗ Balances do not sum to zero[/red]")

    if plan.is_valid:
        console.print("  [green]✓ Settlements resolve every balance[/green]")
    else:
        console.print("  [red]✗ Settlements leave balances unresolved[/red]")

    if plan.is_optimal:
        console.print(
            f"  [green]✓ Optimal ({plan.theoretical_minimum} = n - 1)[/green]"
        )
    else:
        console.print(
            f"  [yellow]Payments vs n - 1 bound: {len(plan.settlements)} / "
            f"{plan.theoretical_minimum}[/yellow]"
        )


def display_user_settlements(summary: UserSettlements, symbol: str = "$"):
    """Display what one participant pays and receives."""
    console.print(f"\n[bold]{summary.user_id}[/bold]")

    if not summary.to_pay and not summary.to_receive:
        console.print("  [green]Nothing to pay or receive.[/green]")
        return

    for s in summary.to_pay:
        console.print(f"  pays [cyan]{s.to_user}[/cyan] {format_money(s.amount, symbol)}")
    for s in summary.to_receive:
        console.print(
            f"  receives from [cyan]{s.from_user}[/cyan] {format_money(s.amount, symbol)}"
        )

    console.print()
    console.print(f"  Total to pay:     {format_money(summary.net_to_pay, symbol)}")
    console.print(f"  Total to receive: {format_money(summary.net_to_receive, symbol)}")


@app.command()
def balances(
    expenses_file: Path = typer.Argument(..., help="JSON file of expense records"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show each participant's net balance.

    Positive balances are owed money, negative balances owe money.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)
        service = LedgerService(settings)
        expenses = load_expenses(expenses_file)
        console.print(f"[green]Loaded {len(expenses)} expenses[/green]\n")

        result = service.compute_balances(expenses)
        if not result:
            console.print("[yellow]No balances: the ledger has no usable expenses.[/yellow]")
            return

        display_balances(result, settings.currency_symbol)

    except Exception as e:
        _fail(e, verbose)


@app.command()
def settle(
    input_file: Path = typer.Argument(..., help="JSON file of expenses or balances"),
    from_balances: bool = typer.Option(
        False, "--from-balances", "-b", help="Input file holds balances, not expenses"
    ),
    strategy: str | None = typer.Option(
        None, "--strategy", "-s", help="Settlement strategy: greedy or extremes"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Plan the fewest payments that settle every balance.

    Nothing is paid: the plan is only printed.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)
        if strategy:
            settings = settings.model_copy(update={"settlement_strategy": strategy})
        service = LedgerService(settings)

        if from_balances:
            plan = service.plan_from_balances(load_balances(input_file))
        else:
            plan = service.plan(load_expenses(input_file))

        display_balances(plan.balances, settings.currency_symbol)
        display_plan(plan, settings.currency_symbol)

    except Exception as e:
        _fail(e, verbose)


@app.command()
def whois(
    expenses_file: Path = typer.Argument(..., help="JSON file of expense records"),
    user_id: str | None = typer.Argument(
        None, help="Participant ID (prompted for if omitted)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show what a single participant pays and receives when settling up."""
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)
        service = LedgerService(settings)
        plan = service.plan(load_expenses(expenses_file))

        if user_id is None:
            user_id = select_participant_interactive(plan.balances)
            if user_id is None:
                console.print("[yellow]No participant selected.[/yellow]")
                return

        summary = settlements_for_user(plan.settlements, user_id)
        display_user_settlements(summary, settings.currency_symbol)

    except Exception as e:
        _fail(e, verbose)


def _parse_values(values: list[str]) -> dict[str, Decimal]:
    """Parse ``user=number`` pairs given with --value."""
    parsed: dict[str, Decimal] = {}
    for item in values:
        user_id, sep, raw = item.partition("=")
        if not sep or not user_id:
            raise SplitValidationError(f"Expected user=number, got '{item}'")
        try:
            parsed[user_id] = to_decimal(raw)
        except InvalidOperation as e:
            raise SplitValidationError(f"Invalid number for {user_id}: '{raw}'") from e
    return parsed


@app.command()
def split(
    amount: str = typer.Argument(..., help="Total expense amount"),
    participants: list[str] = typer.Argument(..., help="Participant IDs"),
    split_type: str = typer.Option(
        "equal", "--type", "-t", help="equal, exact, percentage or custom"
    ),
    values: list[str] | None = typer.Option(
        None, "--value", help="Per-participant input as user=number (repeatable)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Preview how an expense would be split between participants."""
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)
        split_input = _parse_values(values) if values else None
        details = calculate_split(split_type, amount, participants, split_input)

        table = Table(title="Split", show_header=True, header_style="bold magenta")
        table.add_column("Participant", style="cyan")
        table.add_column("Share", justify="right", width=14)
        if split_type == "percentage":
            table.add_column("Percentage", justify="right")
        elif split_type == "custom":
            table.add_column("Shares", justify="right")

        for user_id, detail in details.items():
            row = [user_id, format_money(detail.amount or Decimal("0"), settings.currency_symbol)]
            if split_type == "percentage":
                row.append(f"{detail.percentage}%")
            elif split_type == "custom":
                row.append(str(detail.shares))
            table.add_row(*row)

        console.print(table)

    except Exception as e:
        _fail(e, verbose)


@app.command()
def serve():
    """Start the MCP server exposing the ledger tools."""
    run_server()


if __name__ == "__main__":
    app()
