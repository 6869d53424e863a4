"""Parsing of resource quantities such as ``2.1G`` or ``5Gi``."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction

_BINARY_SUFFIXES = {
    "Ki": 2**10,
    "Mi": 2**20,
    "Gi": 2**30,
    "Ti": 2**40,
    "Pi": 2**50,
    "Ei": 2**60,
}

_DECIMAL_SUFFIXES = {
    "n": Fraction(1, 10**9),
    "u": Fraction(1, 10**6),
    "m": Fraction(1, 10**3),
    "": Fraction(1),
    "k": Fraction(10**3),
    "M": Fraction(10**6),
    "G": Fraction(10**9),
    "T": Fraction(10**12),
    "P": Fraction(10**15),
    "E": Fraction(10**18),
}

_NUMBER = re.compile(r"([+-]?)(\d+\.?\d*|\.\d+)(.*)", re.ASCII | re.DOTALL)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)", re.ASCII)
_MAX_EXPONENT = 1000


class QuantityError(ValueError):
    """Raised when a quantity string cannot be parsed."""


@dataclass(frozen=True)
class Quantity:
    """An exact resource amount."""

    amount: Fraction

    def milli_value(self) -> int:
        """Return the amount in thousandths, rounded up."""
        return math.ceil(self.amount * 1000)

    def value(self) -> int:
        """Return the amount as an integer, rounded up."""
        return math.ceil(self.amount)


def _multiplier(suffix: str) -> Fraction:
    if suffix in _BINARY_SUFFIXES:
        return Fraction(_BINARY_SUFFIXES[suffix])
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent:
        power = int(exponent.group(1))
        if abs(power) > _MAX_EXPONENT:
            raise QuantityError(f"exponent out of range in suffix {suffix!r}")
        return Fraction(10) ** power
    if suffix in _DECIMAL_SUFFIXES:
        return _DECIMAL_SUFFIXES[suffix]
    raise QuantityError(f"unknown quantity suffix {suffix!r}")


def parse_quantity(text: str) -> Quantity:
    """Parse a quantity string into a :class:`Quantity`."""
    match = _NUMBER.fullmatch(text)
    if not match:
        raise QuantityError(f"invalid quantity {text!r}")
    sign, number, suffix = match.groups()
    try:
        amount = Fraction(Decimal(number))
    except InvalidOperation as exc:
        raise QuantityError(f"invalid quantity {text!r}") from exc
    amount *= _multiplier(suffix)
    if sign == "-":
        amount = -amount
    return Quantity(amount)