"""Procedure price arithmetic"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    """Decimal from a DB/JSON number; floats go through str to avoid binary noise"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def apply_discount(base_price: Number, discount_percent: Optional[Number] = None) -> Decimal:
    """
    Final amount of `base_price` after a percentage discount, rounded to cents.

    A missing discount counts as 0.

    Raises:
        ValueError: discount outside 0-100 or negative price
    """
    base = to_decimal(base_price)
    discount = to_decimal(discount_percent)

    if base < 0:
        raise ValueError(f"Valor base negativo: {base}")
    if discount < 0 or discount > HUNDRED:
        raise ValueError(f"Desconto fora do intervalo 0-100: {discount}")

    amount = base * (HUNDRED - discount) / HUNDRED
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
