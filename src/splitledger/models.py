"""Pydantic domain models for splitledger."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SplitType = Literal["equal", "exact", "percentage", "custom"]


class _LedgerModel(BaseModel):
    """Accepts both snake_case and the camelCase keys used by the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Expense Models
# ============================================================================


class ShareDetail(_LedgerModel):
    """One participant's share of an expense."""

    amount: Decimal | None = None
    percentage: Decimal | None = None  # percentage splits only
    shares: Decimal | None = None  # custom (share-based) splits only
    is_settled: bool = False


class ExpenseRecord(_LedgerModel):
    """An expense as handed over by the persistence layer.

    Positivity of ``amount`` and presence of ``paid_by``/``participants`` are
    deliberately not validated here. Records failing those checks are
    skipped by the balance engine instead of rejecting the whole ledger.
    """

    expense_id: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    paid_by: str | None = None
    participants: list[str] = Field(default_factory=list)
    split_details: dict[str, ShareDetail | None] = Field(default_factory=dict)

    @field_validator("participants", mode="before")
    @classmethod
    def _null_participants(cls, v):
        return [] if v is None else v

    @field_validator("split_details", mode="before")
    @classmethod
    def _null_split_details(cls, v):
        return {} if v is None else v

    def share_for(self, user_id: str) -> Decimal | None:
        """Explicit owed share for a participant, or None if unspecified."""
        detail = self.split_details.get(user_id)
        if detail is None:
            return None
        return detail.amount


# ============================================================================
# Balance Models
# ============================================================================


class UserBalance(_LedgerModel):
    """Net position of a participant (paid - owed).

    Positive = owed money (creditor), negative = owes money (debtor).
    """

    user_id: str
    net_amount: Decimal
    total_paid: Decimal = Decimal("0")
    total_owed: Decimal = Decimal("0")

    @property
    def is_creditor(self) -> bool:
        return self.net_amount > 0

    @property
    def is_debtor(self) -> bool:
        return self.net_amount < 0

    @property
    def is_settled(self) -> bool:
        return self.net_amount == 0


# ============================================================================
# Settlement Models
# ============================================================================


class Settlement(_LedgerModel):
    """A planned payment from a debtor to a creditor."""

    model_config = ConfigDict(frozen=True)

    from_user: str  # debtor
    to_user: str  # creditor
    amount: Decimal


class UserSettlements(_LedgerModel):
    """The part of a settlement plan that concerns one participant."""

    user_id: str
    to_pay: list[Settlement] = Field(default_factory=list)
    to_receive: list[Settlement] = Field(default_factory=list)
    net_to_pay: Decimal = Decimal("0")
    net_to_receive: Decimal = Decimal("0")


class SettlementPlan(_LedgerModel):
    """Balances and the payments that resolve them, with sanity checks.

    - is_balanced: balances sum to zero within a cent
    - is_valid: replaying the settlements zeroes every balance
    - is_optimal: settlement count equals n - 1 for n non-zero balances
    """

    strategy: str
    balances: list[UserBalance]
    settlements: list[Settlement]
    total_volume: Decimal
    theoretical_minimum: int
    is_balanced: bool
    is_valid: bool
    is_optimal: bool
