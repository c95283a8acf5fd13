"""splitledger - Shared-expense balances and minimal settle-up plans."""

__version__ = "0.1.0"

from .balances import (
    compute_balances,
    compute_balances_sorted,
    get_creditors,
    get_debtors,
    get_user_balance,
    validate_balance_sum,
)
from .config import Settings, load_settings
from .models import (
    ExpenseRecord,
    Settlement,
    SettlementPlan,
    ShareDetail,
    UserBalance,
    UserSettlements,
)
from .money import round_to_two
from .service import LedgerService
from .settlements import (
    minimize_settlements,
    settlements_for_user,
    theoretical_minimum,
    total_settlement_volume,
    validate_settlements,
)
from .splits import calculate_split

__all__ = [
    "compute_balances",
    "compute_balances_sorted",
    "get_creditors",
    "get_debtors",
    "get_user_balance",
    "validate_balance_sum",
    "Settings",
    "load_settings",
    "ExpenseRecord",
    "Settlement",
    "SettlementPlan",
    "ShareDetail",
    "UserBalance",
    "UserSettlements",
    "round_to_two",
    "LedgerService",
    "minimize_settlements",
    "settlements_for_user",
    "theoretical_minimum",
    "total_settlement_volume",
    "validate_settlements",
    "calculate_split",
]
