"""Split calculator: divide an expense amount between its participants.

Produces the ``split_details`` mapping consumed by the balance engine.
Unlike the engine, this is a validating boundary: bad input raises
SplitValidationError.
"""

from collections.abc import Mapping, Sequence
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from .exceptions import SplitValidationError
from .models import ShareDetail, SplitType
from .money import CENT, ZERO, round_to_two, to_decimal

Number = Decimal | float | int | str


def _validate_amount(amount: Number) -> Decimal:
    try:
        value = to_decimal(amount)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise SplitValidationError("Amount must be a valid number") from e
    if not value.is_finite():
        raise SplitValidationError("Amount must be a valid number")
    if value <= 0:
        raise SplitValidationError("Amount must be greater than 0")
    return value


def _validate_participants(participants: Sequence[str]) -> None:
    if not participants:
        raise SplitValidationError("At least one participant is required")
    if len(set(participants)) != len(participants):
        raise SplitValidationError("Duplicate participants not allowed")


def _per_participant_values(
    participants: Sequence[str],
    values: Mapping[str, Number] | None,
    label: str,
) -> dict[str, Decimal]:
    """Look up a finite, non-negative value for every participant."""
    if values is None:
        raise SplitValidationError(f"{label.capitalize()} must be provided")

    result: dict[str, Decimal] = {}
    for user_id in participants:
        raw = values.get(user_id)
        try:
            value = to_decimal(raw) if raw is not None else None
        except (InvalidOperation, ValueError, TypeError):
            value = None
        if value is None or not value.is_finite():
            raise SplitValidationError(
                f"Missing or invalid {label} for participant: {user_id}"
            )
        if value < 0:
            raise SplitValidationError(
                f"{label.capitalize()} cannot be negative for participant: {user_id}"
            )
        result[user_id] = value
    return result


def _allocate(total: Decimal, weights: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """
    Divide ``total`` in proportion to ``weights``.

    Shares are floored to the cent, so they never add up to more than the
    total. The leftover cents go to the last participant with a positive
    weight, which keeps zero-weight participants at exactly zero.
    """
    weight_sum = sum(weights.values(), ZERO)
    allocation = {
        user_id: (total * weight / weight_sum).quantize(CENT, rounding=ROUND_FLOOR)
        for user_id, weight in weights.items()
    }

    remainder = round_to_two(total - sum(allocation.values(), ZERO))
    receiver = [user_id for user_id, weight in weights.items() if weight > 0][-1]
    allocation[receiver] = round_to_two(allocation[receiver] + remainder)
    return allocation


def calculate_equal_split(
    amount: Number, participants: Sequence[str]
) -> dict[str, ShareDetail]:
    """
    Split an amount equally.

    Each share is floored to the cent; the leftover cents go to the first
    participant so that shares always sum to the amount.

    Example:
        calculate_equal_split(10, ["a", "b", "c"])
        # a: 3.34, b: 3.33, c: 3.33
    """
    total = _validate_amount(amount)
    _validate_participants(participants)

    count = len(participants)
    base_share = (total / count).quantize(CENT, rounding=ROUND_FLOOR)
    remainder = round_to_two(total - base_share * count)

    return {
        user_id: ShareDetail(
            amount=round_to_two(base_share + remainder) if index == 0 else base_share
        )
        for index, user_id in enumerate(participants)
    }


def calculate_exact_split(
    amount: Number,
    participants: Sequence[str],
    exact_amounts: Mapping[str, Number] | None,
) -> dict[str, ShareDetail]:
    """Split using caller-given amounts, which must add up to the total."""
    total = _validate_amount(amount)
    _validate_participants(participants)
    amounts = _per_participant_values(participants, exact_amounts, "amount")

    amounts_sum = round_to_two(sum(amounts.values(), ZERO))
    if abs(amounts_sum - round_to_two(total)) > CENT:
        raise SplitValidationError(
            f"Exact amounts sum ({amounts_sum}) doesn't match total ({total})"
        )

    return {
        user_id: ShareDetail(amount=round_to_two(amounts[user_id]))
        for user_id in participants
    }


def calculate_percentage_split(
    amount: Number,
    participants: Sequence[str],
    percentages: Mapping[str, Number] | None,
) -> dict[str, ShareDetail]:
    """
    Split by percentage (0-100 each, summing to 100).

    Shares are floored to the cent; leftover cents go to the last
    participant with a non-zero percentage.
    """
    total = _validate_amount(amount)
    _validate_participants(participants)
    pcts = _per_participant_values(participants, percentages, "percentage")

    for user_id, pct in pcts.items():
        if pct > 100:
            raise SplitValidationError(
                f"Percentage must be between 0 and 100 for participant: {user_id}"
            )

    total_pct = sum(pcts.values(), ZERO)
    if abs(total_pct - 100) > CENT:
        raise SplitValidationError(
            f"Percentages must sum to 100 (current: {round_to_two(total_pct)})"
        )

    allocation = _allocate(total, pcts)
    return {
        user_id: ShareDetail(amount=allocation[user_id], percentage=pcts[user_id])
        for user_id in participants
    }


def calculate_custom_split(
    amount: Number,
    participants: Sequence[str],
    shares: Mapping[str, Number] | None,
) -> dict[str, ShareDetail]:
    """
    Split proportionally to a number of shares per participant.

    Rounded the same way as calculate_percentage_split, so a participant
    with zero shares owes nothing.
    """
    total = _validate_amount(amount)
    _validate_participants(participants)
    weights = _per_participant_values(participants, shares, "shares")

    total_shares = sum(weights.values(), ZERO)
    if total_shares == 0:
        raise SplitValidationError("Total shares must be greater than 0")

    allocation = _allocate(total, weights)
    return {
        user_id: ShareDetail(amount=allocation[user_id], shares=weights[user_id])
        for user_id in participants
    }


def calculate_split(
    split_type: SplitType,
    amount: Number,
    participants: Sequence[str],
    split_input: Mapping[str, Number] | None = None,
) -> dict[str, ShareDetail]:
    """Dispatch to the calculator for ``split_type``."""
    if split_type == "equal":
        return calculate_equal_split(amount, participants)

    if split_input is None and split_type in ("exact", "percentage", "custom"):
        required = {
            "exact": "Exact amounts",
            "percentage": "Percentages",
            "custom": "Shares",
        }[split_type]
        raise SplitValidationError(f"{required} required for {split_type} split")

    if split_type == "exact":
        return calculate_exact_split(amount, participants, split_input)
    if split_type == "percentage":
        return calculate_percentage_split(amount, participants, split_input)
    if split_type == "custom":
        return calculate_custom_split(amount, participants, split_input)

    raise SplitValidationError(f"Invalid split type: {split_type}")
