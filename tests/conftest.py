"""Shared fixtures for splitledger tests."""

import random
from decimal import Decimal

import pytest

from splitledger.models import ExpenseRecord
from splitledger.splits import calculate_split


def build_random_ledger(seed: int) -> list[ExpenseRecord]:
    """Generate a ledger whose split details always add up to the amount."""
    rng = random.Random(seed)
    people = [f"user{i}" for i in range(rng.randint(2, 8))]
    expenses = []
    for n in range(rng.randint(1, 20)):
        participants = rng.sample(people, rng.randint(1, len(people)))
        amount = Decimal(rng.randint(1, 100_000)) / 100
        if rng.random() < 0.5:
            details = calculate_split("equal", amount, participants)
        else:
            weights = {p: rng.randint(1, 5) for p in participants}
            details = calculate_split("custom", amount, participants, weights)
        expenses.append(
            ExpenseRecord(
                expense_id=f"exp{n}",
                amount=amount,
                paid_by=rng.choice(people),
                participants=participants,
                split_details=details,
            )
        )
    return expenses


@pytest.fixture
def random_ledger():
    """Factory for seeded, self-consistent expense ledgers."""
    return build_random_ledger
