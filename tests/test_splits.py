"""Tests for the split calculator."""

from decimal import Decimal

import pytest

from splitledger.exceptions import SplitValidationError
from splitledger.money import round_to_two, to_decimal, within_tolerance
from splitledger.splits import (
    calculate_custom_split,
    calculate_equal_split,
    calculate_exact_split,
    calculate_percentage_split,
    calculate_split,
)


def amounts(details) -> dict[str, Decimal]:
    return {user_id: detail.amount for user_id, detail in details.items()}


class TestRoundToTwo:
    """Shared rounding primitive."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("2.345"), Decimal("2.35")),
            (Decimal("-2.345"), Decimal("-2.35")),
            (Decimal("2.344"), Decimal("2.34")),
            (1.005, Decimal("1.01")),
            (10, Decimal("10.00")),
        ],
    )
    def test_half_away_from_zero(self, value, expected):
        assert round_to_two(value) == expected

    def test_to_decimal_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal("2.50") == Decimal("2.50")

    def test_within_tolerance_is_strict(self):
        assert within_tolerance(Decimal("0.009"))
        assert within_tolerance(Decimal("-0.009"))
        assert not within_tolerance(Decimal("0.01"))


class TestEqualSplit:
    """Equal splits with leftover cents on the first participant."""

    def test_even_division(self):
        details = calculate_equal_split(100, ["a", "b", "c", "d"])
        assert amounts(details) == {
            "a": Decimal("25"),
            "b": Decimal("25"),
            "c": Decimal("25"),
            "d": Decimal("25"),
        }

    def test_remainder_to_first(self):
        details = calculate_equal_split(Decimal("10.00"), ["a", "b", "c"])

        assert amounts(details) == {
            "a": Decimal("3.34"),
            "b": Decimal("3.33"),
            "c": Decimal("3.33"),
        }
        assert sum(amounts(details).values()) == Decimal("10.00")

    def test_single_participant(self):
        assert amounts(calculate_equal_split(7.5, ["a"])) == {"a": Decimal("7.50")}

    @pytest.mark.parametrize(
        "amount,participants,message",
        [
            (0, ["a"], "greater than 0"),
            (-1, ["a"], "greater than 0"),
            ("abc", ["a"], "valid number"),
            (float("nan"), ["a"], "valid number"),
            (10, [], "At least one participant"),
            (10, ["a", "a"], "Duplicate participants"),
        ],
    )
    def test_invalid_input(self, amount, participants, message):
        with pytest.raises(SplitValidationError, match=message):
            calculate_equal_split(amount, participants)


class TestExactSplit:
    """Caller-provided amounts."""

    def test_valid(self):
        details = calculate_exact_split(100, ["a", "b", "c"], {"a": 50, "b": 30, "c": 20})
        assert amounts(details) == {"a": 50, "b": 30, "c": 20}

    def test_within_one_cent(self):
        details = calculate_exact_split(
            Decimal("10.00"), ["a", "b"], {"a": "5.00", "b": "4.99"}
        )
        assert details["b"].amount == Decimal("4.99")

    def test_sum_mismatch(self):
        with pytest.raises(SplitValidationError, match="doesn't match total"):
            calculate_exact_split(100, ["a", "b"], {"a": 50, "b": 40})

    def test_missing_participant_amount(self):
        with pytest.raises(SplitValidationError, match="participant: b"):
            calculate_exact_split(100, ["a", "b"], {"a": 100})

    def test_negative_amount(self):
        with pytest.raises(SplitValidationError, match="cannot be negative"):
            calculate_exact_split(100, ["a", "b"], {"a": 110, "b": -10})


class TestPercentageSplit:
    """Percentages with the last participant absorbing rounding."""

    def test_valid(self):
        details = calculate_percentage_split(
            1000, ["a", "b", "c"], {"a": 50, "b": 30, "c": 20}
        )

        assert amounts(details) == {"a": 500, "b": 300, "c": 200}
        assert details["a"].percentage == Decimal("50")

    def test_thirds_sum_to_total(self):
        details = calculate_percentage_split(
            100, ["a", "b", "c"], {"a": "33.33", "b": "33.33", "c": "33.34"}
        )

        assert sum(amounts(details).values()) == Decimal("100")
        assert details["c"].amount == Decimal("33.34")

    def test_must_sum_to_100(self):
        with pytest.raises(SplitValidationError, match="must sum to 100"):
            calculate_percentage_split(100, ["a", "b"], {"a": 50, "b": 40})

    def test_out_of_range(self):
        with pytest.raises(SplitValidationError, match="between 0 and 100"):
            calculate_percentage_split(100, ["a", "b"], {"a": 150, "b": 0})

    def test_tiny_amount_never_negative(self):
        details = calculate_percentage_split(
            "0.03", ["a", "b", "c"], {"a": 50, "b": 50, "c": 0}
        )

        assert amounts(details) == {
            "a": Decimal("0.01"),
            "b": Decimal("0.02"),
            "c": Decimal("0.00"),
        }

    def test_sum_slightly_over_100(self):
        """A tolerated 100.01 total still divides the amount exactly."""
        details = calculate_percentage_split(
            1000, ["a", "b", "c"], {"a": "50.01", "b": 50, "c": 0}
        )

        assert all(d.amount >= 0 for d in details.values())
        assert sum(amounts(details).values()) == Decimal("1000")
        assert details["c"].amount == 0


class TestCustomSplit:
    """Share-weighted splits."""

    def test_valid(self):
        details = calculate_custom_split(1000, ["a", "b", "c"], {"a": 2, "b": 1, "c": 1})

        assert amounts(details) == {"a": 500, "b": 250, "c": 250}
        assert details["a"].shares == Decimal("2")

    def test_remainder_to_last(self):
        details = calculate_custom_split(10, ["a", "b", "c"], {"a": 1, "b": 1, "c": 1})

        assert amounts(details) == {
            "a": Decimal("3.33"),
            "b": Decimal("3.33"),
            "c": Decimal("3.34"),
        }

    def test_zero_total_shares(self):
        with pytest.raises(SplitValidationError, match="Total shares"):
            calculate_custom_split(10, ["a", "b"], {"a": 0, "b": 0})

    def test_zero_weight_last_participant(self):
        """Leftover cents never land on a participant with zero shares."""
        details = calculate_split(
            "custom", "0.03", ["a", "b", "c"], {"a": 1, "b": 1, "c": 0}
        )

        assert amounts(details) == {
            "a": Decimal("0.01"),
            "b": Decimal("0.02"),
            "c": Decimal("0.00"),
        }


class TestCalculateSplitDispatch:
    """Dispatch over split types."""

    def test_equal_ignores_input(self):
        details = calculate_split("equal", 90, ["a", "b", "c"], {"a": 1})
        assert amounts(details) == {"a": 30, "b": 30, "c": 30}

    @pytest.mark.parametrize(
        "split_type,message",
        [
            ("exact", "Exact amounts required"),
            ("percentage", "Percentages required"),
            ("custom", "Shares required"),
        ],
    )
    def test_input_required(self, split_type, message):
        with pytest.raises(SplitValidationError, match=message):
            calculate_split(split_type, 90, ["a", "b"])

    def test_unknown_type(self):
        with pytest.raises(SplitValidationError, match="Invalid split type"):
            calculate_split("ratio", 90, ["a"], {"a": 1})  # type: ignore[arg-type]
