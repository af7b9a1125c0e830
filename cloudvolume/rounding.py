"""Storage quantities and rounding them up to a provider's allocation unit.

Cloud providers allocate disks in different units: some take whole GiB,
others take bytes. These helpers work out how many allocation units are
needed to hold a requested quantity.
"""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass, field
from fractions import Fraction

GB = 1000 * 1000 * 1000
GIB = 1024 * 1024 * 1024
MB = 1000 * 1000
MIB = 1024 * 1024
KB = 1000
KIB = 1024

MAX_INT64 = 2**63 - 1
MAX_INT32 = 2**31 - 1

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

_QUANTITY = re.compile(
    r"(?P<sign>[+-]?)"
    r"(?P<number>\d+(?:\.\d*)?|\.\d+)"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[eE][+-]?\d+|[numkMGTPE])?"
)

# Quantities finer than a nano unit are rounded up to it.
_NANO = 10**9


class QuantityOverflowError(OverflowError):
    """A quantity is too large for the requested integer width."""


def _round_away_from_zero(value: Fraction) -> int:
    return math.ceil(value) if value >= 0 else -math.ceil(-value)


@dataclass(frozen=True)
class Quantity:
    """An exact storage amount, as written in a resource request."""

    amount: Fraction
    text: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.text or str(self.amount)

    def cmp_int(self, other: int) -> int:
        """Compare with an integer: -1 if smaller, 0 if equal, 1 if larger."""
        if self.amount < other:
            return -1
        if self.amount > other:
            return 1
        return 0

    def value(self) -> int:
        """Return the amount as a whole number, rounded up."""
        return _round_away_from_zero(self.amount)


def parse_quantity(text: str) -> Quantity:
    """Parse a quantity such as ``1.2Gi``, ``1000k`` or ``987m``."""
    stripped = text.strip()
    match = _QUANTITY.fullmatch(stripped)
    if match is None:
        raise ValueError(f"quantities must match the regular expression: {text!r}")
    number = Fraction(match["number"])
    suffix = match["suffix"] or ""
    if suffix in _BINARY_SUFFIXES:
        multiplier = Fraction(_BINARY_SUFFIXES[suffix])
    elif suffix in _DECIMAL_SUFFIXES:
        multiplier = _DECIMAL_SUFFIXES[suffix]
    else:
        multiplier = Fraction(10) ** int(suffix[1:])
    amount = number * multiplier
    if match["sign"] == "-":
        amount = -amount
    nanos = amount * _NANO
    if nanos.denominator != 1:
        amount = Fraction(_round_away_from_zero(nanos), _NANO)
    return Quantity(amount, stripped)


def _round_up_size_int64(size: Quantity, allocation_unit_bytes: int) -> int:
    if size.cmp_int(MAX_INT64) >= 0:
        raise QuantityOverflowError(f"quantity {size} is too great, overflows int64")
    volume_size_bytes = size.value()
    if volume_size_bytes < 0:
        return -(-volume_size_bytes // allocation_unit_bytes)
    return -(-volume_size_bytes // allocation_unit_bytes)


def _round_up_size_int32(size: Quantity, allocation_unit_bytes: int) -> int:
    rounded = _round_up_size_int64(size, allocation_unit_bytes)
    if rounded > MAX_INT32:
        raise QuantityOverflowError(f"quantity {size} is too great, overflows int32")
    return rounded


def _round_up_size_int(size: Quantity, allocation_unit_bytes: int) -> int:
    if sys.maxsize <= MAX_INT32:
        return _round_up_size_int32(size, allocation_unit_bytes)
    return _round_up_size_int64(size, allocation_unit_bytes)


def round_up_to_gib(size: Quantity) -> int:
    """Round *size* up to whole GiB."""
    return _round_up_size_int64(size, GIB)


def round_up_to_mb(size: Quantity) -> int:
    """Round *size* up to whole MB."""
    return _round_up_size_int64(size, MB)


def round_up_to_mib(size: Quantity) -> int:
    """Round *size* up to whole MiB."""
    return _round_up_size_int64(size, MIB)


def round_up_to_kb(size: Quantity) -> int:
    """Round *size* up to whole KB."""
    return _round_up_size_int64(size, KB)


def round_up_to_kib(size: Quantity) -> int:
    """Round *size* up to whole KiB."""
    return _round_up_size_int64(size, KIB)


def round_up_to_b(size: Quantity) -> int:
    """Round *size* up to whole bytes."""
    return _round_up_size_int64(size, 1)


def round_up_to_gib_int(size: Quantity) -> int:
    """Round *size* up to whole GiB, limited to the platform's int width."""
    return _round_up_size_int(size, GIB)


def round_up_to_mb_int(size: Quantity) -> int:
    """Round *size* up to whole MB, limited to the platform's int width."""
    return _round_up_size_int(size, MB)


def round_up_to_mib_int(size: Quantity) -> int:
    """Round *size* up to whole MiB, limited to the platform's int width."""
    return _round_up_size_int(size, MIB)


def round_up_to_kb_int(size: Quantity) -> int:
    """Round *size* up to whole KB, limited to the platform's int width."""
    return _round_up_size_int(size, KB)


def round_up_to_kib_int(size: Quantity) -> int:
    """Round *size* up to whole KiB, limited to the platform's int width."""
    return _round_up_size_int(size, KIB)


def round_up_to_gib_int32(size: Quantity) -> int:
    """Round *size* up to whole GiB, failing if the result exceeds int32."""
    return _round_up_size_int32(size, GIB)