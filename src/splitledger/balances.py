"""Balance engine: fold expense records into per-participant net balances."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from .models import ExpenseRecord, UserBalance
from .money import ZERO, round_to_two, within_tolerance

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    paid: Decimal = ZERO
    owed: Decimal = ZERO


def _is_processable(expense: ExpenseRecord) -> bool:
    """
    Check whether an expense can contribute to balances.

    Records with a non-positive amount, no payer, or no participants are
    skipped rather than raised on, so one bad record cannot block the rest
    of a group's history. Upstream validation should already reject them.
    """
    amount = expense.amount
    if amount is None or not amount.is_finite() or amount <= 0:
        return False
    if not expense.paid_by:
        return False
    return bool(expense.participants)


def compute_balances(expenses: Iterable[ExpenseRecord]) -> dict[str, UserBalance]:
    """
    Compute every participant's net balance from a set of expenses.

    Steps:
    1. Credit the payer with the full amount of each expense
    2. Debit each participant with their share (explicit split detail if
       present, otherwise an equal split of the amount)
    3. Round paid, owed and net to cents once, at the end

    Args:
        expenses: Expense records in any order

    Returns:
        Mapping of user ID to balance, in first-seen order
    """
    accumulators: dict[str, _Accumulator] = {}

    def get_accumulator(user_id: str) -> _Accumulator:
        if user_id not in accumulators:
            accumulators[user_id] = _Accumulator()
        return accumulators[user_id]

    skipped = 0
    for expense in expenses:
        if not _is_processable(expense):
            skipped += 1
            logger.debug(f"Skipping malformed expense {expense.expense_id}")
            continue

        assert expense.amount is not None and expense.paid_by is not None
        get_accumulator(expense.paid_by).paid += expense.amount

        equal_share = expense.amount / len(expense.participants)
        for participant in expense.participants:
            share = expense.share_for(participant)
            get_accumulator(participant).owed += (
                equal_share if share is None else share
            )

    if skipped:
        logger.info(f"Skipped {skipped} malformed expense(s)")

    return {
        user_id: UserBalance(
            user_id=user_id,
            net_amount=round_to_two(acc.paid - acc.owed),
            total_paid=round_to_two(acc.paid),
            total_owed=round_to_two(acc.owed),
        )
        for user_id, acc in accumulators.items()
    }


def sort_balances(balances: Iterable[UserBalance]) -> list[UserBalance]:
    """Sort balances by net amount, most owed first and most owing last."""
    return sorted(balances, key=lambda b: b.net_amount, reverse=True)


def compute_balances_sorted(expenses: Iterable[ExpenseRecord]) -> list[UserBalance]:
    """Compute balances as a list ordered creditors first."""
    return sort_balances(compute_balances(expenses).values())


def get_creditors(expenses: Iterable[ExpenseRecord]) -> list[UserBalance]:
    """Users who are owed money (strictly positive balance)."""
    return [b for b in compute_balances_sorted(expenses) if b.net_amount > 0]


def get_debtors(expenses: Iterable[ExpenseRecord]) -> list[UserBalance]:
    """Users who owe money (strictly negative balance)."""
    return [b for b in compute_balances_sorted(expenses) if b.net_amount < 0]


def get_user_balance(
    expenses: Iterable[ExpenseRecord], user_id: str
) -> UserBalance | None:
    """
    Balance for a single user.

    Returns None (not a zero balance) when the user appears in no
    processable expense.
    """
    return compute_balances(expenses).get(user_id)


def validate_balance_sum(
    balances: Mapping[str, UserBalance] | Iterable[UserBalance],
) -> bool:
    """
    Check that balances sum to zero within a cent.

    Total paid must equal total owed across a group. Used for tests and
    warnings, never to reject input.
    """
    values = balances.values() if isinstance(balances, Mapping) else balances
    total = sum((b.net_amount for b in values), ZERO)
    return within_tolerance(round_to_two(total))
