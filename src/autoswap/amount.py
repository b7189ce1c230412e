"""Swap sizing: a fixed share of the native balance, keeping a reserve."""

from decimal import ROUND_FLOOR, Decimal

from autoswap.errors import InsufficientBalanceError

DEFAULT_FRACTION = Decimal("0.05")
DEFAULT_RESERVE = Decimal("0.005")

# Sizing is floored to 5 decimals, the trading agent receives 9
SIZING_QUANTUM = Decimal("0.00001")
AMOUNT_QUANTUM = Decimal("0.000000001")


def compute_swap_amount(
    balance: Decimal,
    fraction: Decimal = DEFAULT_FRACTION,
    reserve: Decimal = DEFAULT_RESERVE,
) -> Decimal:
    """Return how much of ``balance`` to trade.

    The raw amount is ``balance * fraction``. It must exceed the reserve,
    is floored to 5 decimals and never leaves less than ``reserve`` in the
    wallet.

    Raises:
        InsufficientBalanceError: If nothing can be traded
    """
    balance = Decimal(balance)
    raw = balance * fraction

    if raw - reserve <= 0:
        raise InsufficientBalanceError()

    amount = max(Decimal("0"), raw.quantize(SIZING_QUANTUM, rounding=ROUND_FLOOR))
    if amount > balance - reserve:
        amount = max(Decimal("0"), balance - reserve)

    if amount <= 0:
        raise InsufficientBalanceError()

    return amount


def format_amount(amount: Decimal) -> str:
    """Serialize an amount as a fixed-point string with 9 fractional digits."""
    return format(Decimal(amount).quantize(AMOUNT_QUANTUM, rounding=ROUND_FLOOR), "f")
