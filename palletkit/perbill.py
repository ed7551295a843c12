"""Fixed-point fraction in parts per billion, saturating at one whole."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

U128_MAX = 2**128 - 1


def _div_nearest_down(numerator: int, denominator: int) -> int:
    """Divide, rounding to nearest; exact halves round down."""
    quotient, remainder = divmod(numerator, denominator)
    if remainder * 2 > denominator:
        quotient += 1
    return quotient


def _div_nearest_up(numerator: int, denominator: int) -> int:
    """Divide, rounding to nearest; exact halves round up."""
    quotient, remainder = divmod(numerator, denominator)
    if remainder * 2 >= denominator:
        quotient += 1
    return quotient


@dataclass(frozen=True, order=True)
class Perbill:
    """A fraction between zero and one, stored as parts of one billion."""

    parts: int = 0

    ACCURACY: ClassVar[int] = 1_000_000_000

    def __post_init__(self) -> None:
        if not isinstance(self.parts, int) or not 0 <= self.parts <= self.ACCURACY:
            raise ValueError(
                f"parts must be an integer in 0..={self.ACCURACY}, got {self.parts!r}"
            )

    @classmethod
    def from_parts(cls, parts: int) -> Perbill:
        """Build from raw parts, saturating at one whole."""
        if parts < 0:
            raise ValueError("parts cannot be negative")
        return cls(min(parts, cls.ACCURACY))

    @classmethod
    def from_percent(cls, percent: int) -> Perbill:
        """Build from a whole percentage, saturating at 100%."""
        if percent < 0:
            raise ValueError("percent cannot be negative")
        return cls(min(percent, 100) * (cls.ACCURACY // 100))

    @classmethod
    def from_rational(cls, numerator: int, denominator: int) -> Perbill:
        """Approximate ``numerator / denominator``, rounding down.

        Ratios above one, and a zero denominator, give one whole.
        """
        if numerator < 0 or denominator < 0:
            raise ValueError("numerator and denominator cannot be negative")
        if denominator == 0 or numerator >= denominator:
            return cls.one()
        return cls(numerator * cls.ACCURACY // denominator)

    @classmethod
    def zero(cls) -> Perbill:
        return cls(0)

    @classmethod
    def one(cls) -> Perbill:
        return cls(cls.ACCURACY)

    def is_zero(self) -> bool:
        return self.parts == 0

    def checked_add(self, other: Perbill) -> Perbill | None:
        """Sum of both fractions, or ``None`` if it exceeds one whole."""
        total = self.parts + other.parts
        if total > self.ACCURACY:
            return None
        return Perbill(total)

    def saturating_reciprocal_mul(self, value: int) -> int:
        """Multiply ``value`` by the reciprocal of this fraction.

        Rounds to the nearest integer and saturates at the 128-bit maximum.
        """
        if value < 0:
            raise ValueError("value cannot be negative")
        if self.parts == 0:
            return U128_MAX if value else 0
        return min(_div_nearest_up(value * self.ACCURACY, self.parts), U128_MAX)

    def __mul__(self, value: int) -> int:
        """Apply this fraction to an integer amount, rounding to nearest."""
        if not isinstance(value, int) or isinstance(value, bool):
            return NotImplemented
        if value < 0:
            raise ValueError("value cannot be negative")
        return _div_nearest_down(value * self.parts, self.ACCURACY)

    def __rmul__(self, value: int) -> int:
        return self.__mul__(value)

    def __truediv__(self, other: Perbill) -> Perbill:
        """Ratio of two fractions, saturating at one whole."""
        if not isinstance(other, Perbill):
            return NotImplemented
        return Perbill.from_rational(self.parts, other.parts)