"""Tests for swap sizing."""

from decimal import Decimal

import pytest

from autoswap.amount import compute_swap_amount, format_amount
from autoswap.errors import InsufficientBalanceError


class TestComputeSwapAmount:
    """Tests for compute_swap_amount."""

    def test_one_sol(self):
        """5% of 1 SOL is 0.05."""
        assert compute_swap_amount(Decimal("1.0")) == Decimal("0.05")

    def test_floors_to_five_decimals(self):
        amount = compute_swap_amount(Decimal("1.23456789"))
        # 1.23456789 * 0.05 = 0.0617283945
        assert amount == Decimal("0.06172")

    def test_tiny_balance_rejected(self):
        with pytest.raises(InsufficientBalanceError) as exc_info:
            compute_swap_amount(Decimal("0.004"))
        assert exc_info.value.reason == "insufficient balance after reserve"

    def test_zero_balance_rejected(self):
        with pytest.raises(InsufficientBalanceError):
            compute_swap_amount(Decimal("0"))

    @pytest.mark.parametrize("balance", ["0.05", "0.09", "0.1"])
    def test_share_not_above_reserve_rejected(self, balance):
        """Balances whose 5% does not exceed the reserve never trade."""
        with pytest.raises(InsufficientBalanceError):
            compute_swap_amount(Decimal(balance))

    @pytest.mark.parametrize(
        "balance", ["0.105", "0.2", "0.73", "1", "3.5", "12.000000001", "1000"]
    )
    def test_amount_bounded_by_reserve(self, balance):
        balance = Decimal(balance)
        amount = compute_swap_amount(balance)

        assert amount > 0
        assert amount <= balance - Decimal("0.005")
        assert amount <= balance * Decimal("0.05")

    def test_clamped_when_reserve_would_be_breached(self):
        """A large fraction is clamped so the reserve stays in the wallet."""
        amount = compute_swap_amount(
            Decimal("0.01"), fraction=Decimal("0.9"), reserve=Decimal("0.005")
        )
        assert amount == Decimal("0.005")

    def test_custom_policy(self):
        amount = compute_swap_amount(
            Decimal("10"), fraction=Decimal("0.1"), reserve=Decimal("0.01")
        )
        assert amount == Decimal("1")


class TestFormatAmount:
    """Tests for the fixed-point amount string."""

    def test_nine_fraction_digits(self):
        assert format_amount(Decimal("0.05")) == "0.050000000"

    def test_small_amount_not_scientific(self):
        assert format_amount(Decimal("0.00001")) == "0.000010000"

    def test_whole_number(self):
        assert format_amount(Decimal("2")) == "2.000000000"
