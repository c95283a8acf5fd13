"""Settlement planner: turn net balances into a minimal list of payments."""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from .exceptions import UnknownStrategyError
from .models import Settlement, UserBalance, UserSettlements
from .money import CENT, ZERO, round_to_two

logger = logging.getLogger(__name__)

BalanceInput = Mapping[str, UserBalance] | Iterable[UserBalance]


@dataclass
class _Position:
    """A participant's remaining amount to pay or receive (always positive)."""

    user_id: str
    amount: Decimal


def _as_list(balances: BalanceInput) -> list[UserBalance]:
    if isinstance(balances, Mapping):
        return list(balances.values())
    return list(balances)


def minimize_settlements(balances: BalanceInput) -> list[Settlement]:
    """
    Minimize the number of payments needed to settle all balances.

    Greedy largest-first matching:
    1. Split into creditors (positive) and debtors (negative), ignoring
       anything under a cent
    2. Sort both by absolute amount, descending
    3. Match the largest remaining creditor with the largest remaining debtor
    4. Settle min(creditor, debtor) between them
    5. Move past anyone left with less than a cent
    6. Repeat until either side runs out

    Every iteration fully settles at least one participant, so n non-zero
    balances need at most n - 1 payments. Exact matches settle two at once.

    Time complexity is O(n log n) (sorting), space O(n).

    Input that does not sum to zero yields a partial (or empty) plan rather
    than an error; use validate_settlements to detect it.

    Args:
        balances: Balances as a list or a user ID mapping

    Returns:
        Payments in the order they were matched
    """
    entries = _as_list(balances)

    if len(entries) < 2:
        return []

    if all(b.net_amount == 0 for b in entries):
        return []

    creditors = sorted(
        (_Position(b.user_id, b.net_amount) for b in entries if b.net_amount >= CENT),
        key=lambda p: p.amount,
        reverse=True,
    )
    debtors = sorted(
        (_Position(b.user_id, -b.net_amount) for b in entries if b.net_amount <= -CENT),
        key=lambda p: p.amount,
        reverse=True,
    )

    settlements: list[Settlement] = []
    i = 0  # creditor cursor
    j = 0  # debtor cursor

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        settle_amount = min(creditor.amount, debtor.amount)

        settlements.append(
            Settlement(
                from_user=debtor.user_id,
                to_user=creditor.user_id,
                amount=round_to_two(settle_amount),
            )
        )

        creditor.amount -= settle_amount
        debtor.amount -= settle_amount

        if creditor.amount < CENT:
            i += 1
        if debtor.amount < CENT:
            j += 1

    if i < len(creditors) or j < len(debtors):
        logger.warning(
            f"Balances do not sum to zero: {len(creditors) - i} creditor(s) and "
            f"{len(debtors) - j} debtor(s) left unsettled"
        )

    return settlements


def minimize_settlements_by_extremes(balances: BalanceInput) -> list[Settlement]:
    """
    Alternative planner that always pairs the current extremes.

    Each round picks the participant owed the most and the one owing the
    most, settles between them, and drops whoever reaches zero. Produces
    the same payment count as minimize_settlements but rescans the working
    set each round (O(n^2)).
    """
    remaining: dict[str, Decimal] = {
        b.user_id: b.net_amount for b in _as_list(balances) if abs(b.net_amount) >= CENT
    }

    settlements: list[Settlement] = []

    while len(remaining) > 1:
        creditor_id = max(remaining, key=lambda uid: remaining[uid])
        debtor_id = min(remaining, key=lambda uid: remaining[uid])

        credit = remaining[creditor_id]
        debt = -remaining[debtor_id]
        if credit <= 0 or debt <= 0:
            logger.warning(
                f"Balances do not sum to zero: {len(remaining)} participant(s) "
                f"left unsettled"
            )
            break

        settle_amount = min(credit, debt)
        settlements.append(
            Settlement(
                from_user=debtor_id,
                to_user=creditor_id,
                amount=round_to_two(settle_amount),
            )
        )

        remaining[creditor_id] = credit - settle_amount
        remaining[debtor_id] = settle_amount - debt

        for user_id in (creditor_id, debtor_id):
            if abs(remaining[user_id]) < CENT:
                del remaining[user_id]

    return settlements


SettlementStrategy = Callable[[BalanceInput], list[Settlement]]

SETTLEMENT_STRATEGIES: dict[str, SettlementStrategy] = {
    "greedy": minimize_settlements,
    "extremes": minimize_settlements_by_extremes,
}


def get_strategy(name: str) -> SettlementStrategy:
    """Look up a settlement planner by name."""
    try:
        return SETTLEMENT_STRATEGIES[name]
    except KeyError:
        raise UnknownStrategyError(name, sorted(SETTLEMENT_STRATEGIES)) from None


def validate_settlements(
    balances: BalanceInput, settlements: Iterable[Settlement]
) -> bool:
    """
    Check that settlements resolve every balance.

    Replays each payment against the original balances (the payer's balance
    goes up, the receiver's goes down) and requires every result to be
    within a cent of zero.
    """
    final: dict[str, Decimal] = {b.user_id: b.net_amount for b in _as_list(balances)}

    for settlement in settlements:
        final[settlement.from_user] = (
            final.get(settlement.from_user, ZERO) + settlement.amount
        )
        final[settlement.to_user] = final.get(settlement.to_user, ZERO) - settlement.amount

    return all(abs(amount) <= CENT for amount in final.values())


def theoretical_minimum(balances: BalanceInput) -> int:
    """
    Lower bound used to judge a plan: n - 1 for n non-zero balances.

    Balances smaller than a cent count as settled.
    """
    non_zero = sum(1 for b in _as_list(balances) if abs(b.net_amount) >= CENT)
    return max(0, non_zero - 1)


def is_optimal_settlement(
    balances: BalanceInput, settlements: list[Settlement]
) -> bool:
    """True if the plan uses exactly theoretical_minimum payments."""
    return len(settlements) == theoretical_minimum(balances)


def total_settlement_volume(settlements: Iterable[Settlement]) -> Decimal:
    """Total amount changing hands across all settlements."""
    return round_to_two(sum((s.amount for s in settlements), ZERO))


def settlements_for_user(
    settlements: Iterable[Settlement], user_id: str
) -> UserSettlements:
    """Split a plan into what a user pays and what they receive."""
    settlements = list(settlements)
    to_pay = [s for s in settlements if s.from_user == user_id]
    to_receive = [s for s in settlements if s.to_user == user_id]

    return UserSettlements(
        user_id=user_id,
        to_pay=to_pay,
        to_receive=to_receive,
        net_to_pay=total_settlement_volume(to_pay),
        net_to_receive=total_settlement_volume(to_receive),
    )


def group_settlements_by_payer(
    settlements: Iterable[Settlement],
) -> dict[str, list[Settlement]]:
    """Group settlements by the paying user, in first-seen order."""
    grouped: dict[str, list[Settlement]] = {}
    for settlement in settlements:
        grouped.setdefault(settlement.from_user, []).append(settlement)
    return grouped
