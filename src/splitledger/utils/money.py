from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

AmountLike = Union[Decimal, int, str]

HUNDRED = Decimal(100)


def _to_decimal(value: AmountLike) -> Decimal:
    # bool is an int subclass and float is binary; neither is a money value
    if isinstance(value, (bool, float)):
        raise ValueError(f"{type(value).__name__} is not accepted as a decimal amount")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Cannot parse amount {value!r}") from exc
    else:
        raise ValueError(f"Unsupported amount type {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def parse_amount(value: AmountLike, minor_unit: Decimal) -> Decimal:
    """Parse a money amount and express it in whole minor units.

    Values carrying more precision than ``minor_unit`` are rejected instead
    of rounded, so callers never lose a fraction of a cent silently.
    """
    amount = _to_decimal(value)
    try:
        quantized = amount.quantize(minor_unit)
    except InvalidOperation as exc:
        raise ValueError(f"Amount {value!r} is out of range") from exc
    if quantized != amount:
        raise ValueError(f"Amount {value!r} has more precision than {minor_unit}")
    return quantized


def parse_percentage(value: AmountLike) -> Decimal:
    return _to_decimal(value)
