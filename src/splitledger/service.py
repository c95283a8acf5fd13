"""Service layer that composes the balance engine and settlement planner.

Both components are pure; this module wires them together, picks the
configured planner, and logs what it found. It never raises for
inconsistent ledger data: problems show up as flags on the returned plan.
"""

import logging
from collections.abc import Iterable

from .balances import compute_balances, sort_balances, validate_balance_sum
from .config import Settings
from .models import (
    ExpenseRecord,
    SettlementPlan,
    UserBalance,
    UserSettlements,
)
from .settlements import (
    get_strategy,
    is_optimal_settlement,
    settlements_for_user,
    theoretical_minimum,
    total_settlement_volume,
    validate_settlements,
)

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for turning a group's expense history into a settle-up plan."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings
        self.strategy_name = settings.settlement_strategy
        self.strategy = get_strategy(self.strategy_name)

    def compute_balances(self, expenses: Iterable[ExpenseRecord]) -> list[UserBalance]:
        """
        Compute balances sorted creditors first.

        Logs a warning when the balances don't sum to zero, which points at
        expenses whose split details don't add up to their amount.
        """
        balances = sort_balances(compute_balances(expenses).values())

        if not validate_balance_sum(balances):
            logger.warning(
                "Balances do not sum to zero; some expenses have split details "
                "that don't add up to their amount"
            )

        logger.info(f"Computed balances for {len(balances)} participant(s)")
        return balances

    def plan(self, expenses: Iterable[ExpenseRecord]) -> SettlementPlan:
        """
        Compute balances and the payments that settle them.

        Args:
            expenses: The group's full expense history

        Returns:
            Settlement plan with validation flags
        """
        return self.plan_from_balances(self.compute_balances(expenses))

    def plan_from_balances(self, balances: Iterable[UserBalance]) -> SettlementPlan:
        """
        Plan settlements for balances computed elsewhere.

        Args:
            balances: Net balances per participant

        Returns:
            Settlement plan with validation flags
        """
        balances = list(balances)
        settlements = self.strategy(balances)

        plan = SettlementPlan(
            strategy=self.strategy_name,
            balances=balances,
            settlements=settlements,
            total_volume=total_settlement_volume(settlements),
            theoretical_minimum=theoretical_minimum(balances),
            is_balanced=validate_balance_sum(balances),
            is_valid=validate_settlements(balances, settlements),
            is_optimal=is_optimal_settlement(balances, settlements),
        )

        if not plan.is_valid:
            logger.warning(
                "Settlement plan leaves balances unresolved; input balances "
                "are inconsistent"
            )

        logger.info(
            f"Planned {len(settlements)} settlement(s) using '{self.strategy_name}', "
            f"volume: {self.settings.currency_symbol}{plan.total_volume}"
        )

        return plan

    def settlements_for_user(
        self, expenses: Iterable[ExpenseRecord], user_id: str
    ) -> UserSettlements:
        """What a single participant pays and receives under the plan."""
        plan = self.plan(expenses)
        return settlements_for_user(plan.settlements, user_id)
