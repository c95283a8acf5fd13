"""MCP server for splitledger: exposes balance and settle-up planning as tools."""

import json
import logging
from decimal import Decimal

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .exceptions import SplitLedgerError
from .loader import parse_balances, parse_expenses
from .service import LedgerService
from .splits import calculate_split as _calculate_split

logger = logging.getLogger(__name__)

mcp_app = FastMCP("splitledger")

WORKFLOW_INSTRUCTIONS = """\
You are helping a group settle up shared expenses. Follow this workflow:

1. BALANCES: Call compute_balances with the group's expenses as a JSON list.
   Each expense has amount, paidBy, participants and optional splitDetails.
   Show the user who is owed money and who owes money.

2. PLAN: Call plan_settlements with the same expenses to get the fewest
   payments that settle everyone. Show each payment and the total volume.
   If the plan reports that balances do not sum to zero, tell the user that
   some expenses have split details that don't add up.

3. PER PERSON: If a participant asks what they owe, call user_settlements.

Nothing is ever paid by these tools; they only plan payments.
Always show amounts in accounting format. Negative = owes money, \
positive = is owed money.\
"""

_service: LedgerService | None = None


def _ensure_service() -> LedgerService:
    """Lazily initialize the LedgerService (loads .env config)."""
    global _service
    if _service is None:
        _service = LedgerService(load_settings())
    return _service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_amount(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount as accounting-style string."""
    if amount < 0:
        return f"({symbol}{abs(amount):,.2f})"
    return f"{symbol}{amount:,.2f}"


def _decode(document: str) -> object:
    try:
        return json.loads(document, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise SplitLedgerError(f"Input is not valid JSON: {e}") from e


# ---------------------------------------------------------------------------
# MCP Tools
# ---------------------------------------------------------------------------


@mcp_app.tool()
def compute_balances(expenses_json: str) -> str:
    """Compute each participant's net balance from a list of expenses.

    Args:
        expenses_json: JSON list of expenses (or an object with an "expenses" key).
    """
    try:
        service = _ensure_service()
        symbol = service.settings.currency_symbol
        expenses = parse_expenses(_decode(expenses_json), source="expenses_json")
        balances = service.compute_balances(expenses)

        if not balances:
            return "No balances: no usable expenses were provided."

        lines = ["Balances:"]
        for b in balances:
            lines.append(
                f"  {b.user_id}: net {_format_amount(b.net_amount, symbol)} "
                f"(paid {_format_amount(b.total_paid, symbol)}, "
                f"owed {_format_amount(b.total_owed, symbol)})"
            )
        return "\n".join(lines)
    except SplitLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute balances: {e}"


@mcp_app.tool()
def plan_settlements(expenses_json: str = "", balances_json: str = "") -> str:
    """Plan the fewest payments that settle every balance.

    Pass either expenses_json or balances_json (a JSON list of
    {"userId", "netAmount"} objects).

    Args:
        expenses_json: JSON list of expenses.
        balances_json: JSON list of precomputed balances.
    """
    try:
        service = _ensure_service()
        symbol = service.settings.currency_symbol

        if balances_json:
            balances = parse_balances(_decode(balances_json), source="balances_json")
            plan = service.plan_from_balances(balances)
        elif expenses_json:
            expenses = parse_expenses(_decode(expenses_json), source="expenses_json")
            plan = service.plan(expenses)
        else:
            return "Error: Provide expenses_json or balances_json."

        if not plan.settlements:
            lines = ["Nothing to settle."]
        else:
            lines = [f"Settlements ({len(plan.settlements)}):"]
            for i, s in enumerate(plan.settlements):
                lines.append(
                    f"[{i}] {s.from_user} pays {s.to_user} "
                    f"{_format_amount(s.amount, symbol)}"
                )

        lines.append(f"Total volume: {_format_amount(plan.total_volume, symbol)}")
        if not plan.is_balanced:
            lines.append("WARNING: balances do not sum to zero.")
        if not plan.is_valid:
            lines.append("WARNING: the plan leaves some balances unresolved.")
        return "\n".join(lines)
    except SplitLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to plan settlements: {e}"


@mcp_app.tool()
def user_settlements(expenses_json: str, user_id: str) -> str:
    """Show what one participant pays and receives when the group settles up.

    Args:
        expenses_json: JSON list of expenses.
        user_id: The participant to report on.
    """
    try:
        service = _ensure_service()
        symbol = service.settings.currency_symbol
        expenses = parse_expenses(_decode(expenses_json), source="expenses_json")
        summary = service.settlements_for_user(expenses, user_id)

        if not summary.to_pay and not summary.to_receive:
            return f"{user_id} has nothing to pay or receive."

        lines = [f"{user_id}:"]
        for s in summary.to_pay:
            lines.append(f"  pays {s.to_user} {_format_amount(s.amount, symbol)}")
        for s in summary.to_receive:
            lines.append(
                f"  receives from {s.from_user} {_format_amount(s.amount, symbol)}"
            )
        lines.append(f"  Total to pay: {_format_amount(summary.net_to_pay, symbol)}")
        lines.append(
            f"  Total to receive: {_format_amount(summary.net_to_receive, symbol)}"
        )
        return "\n".join(lines)
    except SplitLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to get user settlements: {e}"


@mcp_app.tool()
def calculate_split(
    amount: str,
    participants: list[str],
    split_type: str = "equal",
    split_input: dict[str, str] | None = None,
) -> str:
    """Preview how an expense amount would be split.

    Args:
        amount: Total expense amount, e.g. "42.50".
        participants: Participant IDs sharing the expense.
        split_type: One of equal, exact, percentage, custom.
        split_input: Per-participant amounts, percentages or shares.
    """
    try:
        service = _ensure_service()
        symbol = service.settings.currency_symbol
        details = _calculate_split(split_type, amount, participants, split_input)  # type: ignore[arg-type]

        lines = [f"Split ({split_type}):"]
        for user_id, detail in details.items():
            lines.append(f"  {user_id}: {_format_amount(detail.amount or Decimal('0'), symbol)}")
        return "\n".join(lines)
    except SplitLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to calculate split: {e}"


# ---------------------------------------------------------------------------
# MCP Prompt
# ---------------------------------------------------------------------------


@mcp_app.prompt()
def settle_up_workflow() -> str:
    """Instructions for walking a group through settling up."""
    return WORKFLOW_INSTRUCTIONS


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server():
    """Start the MCP server (stdio transport)."""
    mcp_app.run(transport="stdio")
