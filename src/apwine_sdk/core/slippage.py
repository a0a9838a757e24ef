"""Slippage and pro-rata helpers working on raw integer token amounts."""

from decimal import Decimal
from typing import Tuple

from .exceptions import ValidationError


def _slippage_ratio(slippage: float) -> Tuple[int, int]:
    value = Decimal(str(slippage))
    if not Decimal(0) <= value < Decimal(100):
        raise ValidationError(
            "Slippage tolerance must be a percentage in [0, 100)",
            field='slippage_tolerance',
            value=slippage
        )
    numerator, denominator = value.as_integer_ratio()
    return numerator, denominator * 100


def min_amount_with_slippage(amount: int, slippage: float) -> int:
    """Smallest acceptable amount when receiving ``amount``, e.g. 0.5 -> 99.5%, rounded down."""
    numerator, denominator = _slippage_ratio(slippage)
    return amount * (denominator - numerator) // denominator


def max_amount_with_slippage(amount: int, slippage: float) -> int:
    """Largest acceptable amount when sending ``amount``, e.g. 0.5 -> 100.5%, rounded up."""
    numerator, denominator = _slippage_ratio(slippage)
    return -(-amount * (denominator + numerator) // denominator)


def pro_rata(balance: int, share: int, total: int, round_up: bool = False) -> int:
    """``balance * share / total`` in integer arithmetic."""
    if total <= 0:
        raise ValidationError("Total supply must be positive", field='total', value=total)
    if round_up:
        return -(-balance * share // total)
    return balance * share // total
