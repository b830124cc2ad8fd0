"""Exact fixed-width fraction arithmetic.

A :class:`Fraction` keeps an unsigned numerator and denominator (each limited
to 32 bits) and a separate sign flag.  The pair ``(0, 0)`` is the canonical
zero.  Every arithmetic result is reduced by its GCD before it is returned,
and any exact intermediate value that does not fit the 32-bit range raises
:class:`~eqsolver.errors.FractionOverflow` instead of wrapping around.
"""

from __future__ import annotations

from dataclasses import dataclass

from sympy import Rational

from eqsolver.errors import FractionOverflow

UINT32_MAX = 2**32 - 1
INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)


@dataclass(frozen=True)
class Fraction:
    """Immutable signed fraction with unsigned 32-bit magnitudes."""

    numerator: int = 0
    denominator: int = 0
    negative: bool = False

    @property
    def signed_numerator(self) -> int:
        return -self.numerator if self.negative else self.numerator

    def __str__(self) -> str:
        if is_zero(self):
            return "0"
        sign = "-" if self.negative else ""
        if self.denominator == 1:
            return f"{sign}{self.numerator}"
        return f"{sign}{self.numerator}/{self.denominator}"


ZERO = Fraction(0, 0, False)
ONE = Fraction(1, 1, False)


# ── Construction & conversion ───────────────────────────────────────────

def from_int(value: int) -> Fraction:
    """Return ``value/1``, or canonical zero when *value* is 0."""
    if value == 0:
        return ZERO
    _check_unsigned("from_int", abs(value))
    return Fraction(abs(value), 1, value < 0)


def from_parts(numerator: int, denominator: int) -> Fraction:
    """Build an unreduced fraction from two signed integers.

    A zero denominator (or a zero numerator) yields canonical zero; the
    sign is negative when exactly one of the parts is negative.
    """
    if denominator == 0 or numerator == 0:
        return ZERO
    _check_unsigned("from_parts", abs(numerator))
    _check_unsigned("from_parts", abs(denominator))
    return Fraction(abs(numerator), abs(denominator),
                    (numerator < 0) != (denominator < 0))


def to_rational(value: Fraction) -> Rational:
    if is_zero(value):
        return Rational(0)
    return Rational(value.signed_numerator, value.denominator)


def is_zero(value: Fraction) -> bool:
    return value.numerator == 0


def is_one(value: Fraction) -> bool:
    """True only for the exact representation ``+1/1``."""
    return value.numerator == 1 and value.denominator == 1 and not value.negative


# ── Overflow checks ─────────────────────────────────────────────────────

def _check_unsigned(operation: str, value: int) -> int:
    if value > UINT32_MAX:
        raise FractionOverflow(operation, value, "unsigned 32-bit")
    return value


def _check_signed(operation: str, value: int) -> int:
    if value > INT32_MAX or value < INT32_MIN:
        raise FractionOverflow(operation, value, "signed 32-bit")
    return value


# ── Arithmetic ──────────────────────────────────────────────────────────

def _gcd(a: int, b: int) -> int:
    while b:
        a, b = b, a % b
    return a


def reduce(value: Fraction) -> Fraction:
    """Reduce *value* to lowest terms.

    Zero (either part 0) becomes canonical zero, ``n/n`` becomes ``±1/1``,
    anything else is divided through by the Euclidean GCD.  The sign is
    preserved for nonzero values.
    """
    if value.numerator == 0 or value.denominator == 0:
        return ZERO
    if value.numerator == value.denominator:
        return Fraction(1, 1, value.negative)
    gcd = _gcd(value.numerator, value.denominator)
    return Fraction(value.numerator // gcd, value.denominator // gcd,
                    value.negative)


def negate(value: Fraction) -> Fraction:
    if is_zero(value):
        return ZERO
    return Fraction(value.numerator, value.denominator, not value.negative)


def multiply(a: Fraction, b: Fraction) -> Fraction:
    """Return ``a * b`` reduced.

    Raises :class:`FractionOverflow` when either product exceeds
    ``UINT32_MAX``.  A malformed result (nonzero numerator over a zero
    denominator) returns *a* unaltered.
    """
    numerator = _check_unsigned("multiply", a.numerator * b.numerator)
    denominator = _check_unsigned("multiply", a.denominator * b.denominator)
    if numerator != 0 and denominator == 0:
        return a
    return reduce(Fraction(numerator, denominator, a.negative != b.negative))


def divide(a: Fraction, b: Fraction) -> Fraction:
    """Return ``a / b`` reduced, computed by cross-multiplication.

    Same overflow and zero-denominator policy as :func:`multiply`; dividing
    by zero hands back the dividend unaltered.
    """
    numerator = _check_unsigned("divide", a.numerator * b.denominator)
    denominator = _check_unsigned("divide", a.denominator * b.numerator)
    if numerator != 0 and denominator == 0:
        return a
    return reduce(Fraction(numerator, denominator, a.negative != b.negative))


def add(a: Fraction, b: Fraction) -> Fraction:
    """Return ``a + b`` reduced.

    Canonical zero is the identity.  Two non-negative operands are summed
    against the unsigned bound; once either operand is negative every
    intermediate (both signed numerators, both cross terms and the sum) must
    stay inside the signed 32-bit range.
    """
    if is_zero(a):
        return b
    if is_zero(b):
        return a

    if not a.negative and not b.negative:
        numerator = _check_unsigned(
            "add", a.numerator * b.denominator + b.numerator * a.denominator)
        negative = False
    else:
        num1 = _check_signed("add", a.signed_numerator)
        num2 = _check_signed("add", b.signed_numerator)
        term1 = _check_signed("add", num1 * b.denominator)
        term2 = _check_signed("add", num2 * a.denominator)
        total = _check_signed("add", term1 + term2)
        numerator = abs(total)
        negative = total < 0

    denominator = _check_unsigned("add", a.denominator * b.denominator)
    if numerator != 0 and denominator == 0:
        return a
    return reduce(Fraction(numerator, denominator, negative))


def subtract(a: Fraction, b: Fraction) -> Fraction:
    return add(a, negate(b))
