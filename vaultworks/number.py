"""Fixed-point integer arithmetic for converting between ledger decimals and wide integers.

Ledger decimals are signed 128-bit integers scaled by 10**18. For precise curve
maths they are widened to Python integers shifted left by a number of
precision bits, operated on, and then rounded back.
"""

from __future__ import annotations

from decimal import Context, Decimal

DECIMAL_PLACES = 18
I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1

_CONTEXT = Context(prec=120)


def _truncating_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def decimal_to_raw(d) -> int:
    """Return the signed 128-bit fixed-point integer for a decimal value."""
    value = Decimal(repr(d)) if isinstance(d, float) else Decimal(d)
    if not value.is_finite():
        raise ValueError(f"not a finite decimal: {d!r}")
    scaled = value.scaleb(DECIMAL_PLACES, _CONTEXT)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"more than {DECIMAL_PLACES} decimal places: {d!r}")
    raw = int(scaled)
    if not I128_MIN <= raw <= I128_MAX:
        raise OverflowError(f"decimal out of range: {d!r}")
    return raw


def decimal_from_raw(raw: int) -> Decimal:
    """Return the decimal value of a signed 128-bit fixed-point integer."""
    if not I128_MIN <= raw <= I128_MAX:
        raise OverflowError(f"raw decimal out of range: {raw}")
    return Decimal(raw).scaleb(-DECIMAL_PLACES, _CONTEXT)


def bigint_to_number(b: int, precision_bits: int) -> int:
    """Widen an integer by shifting in `precision_bits` fractional bits."""
    return b << precision_bits


def bigint_from_number(b: int, precision_bits: int) -> int:
    """Drop the fractional bits of a widened integer, rounding half away from zero."""
    if precision_bits <= 0:
        return b
    shifted = b >> (precision_bits - 1)
    # Only a positive odd remainder bit rounds up; negative values floor.
    if shifted > 0 and shifted % 2 == 1:
        shifted += 1
    return shifted >> 1


def nth_root(value: int, n: int) -> int:
    """Return the principal n-th root of an integer, truncated toward zero."""
    if n == 0:
        raise ValueError("root degree cannot be zero")
    if value < 0:
        if n % 2 == 0:
            raise ValueError("no even root of a negative number")
        return -nth_root(-value, n)
    if n == 1 or value < 2:
        return value
    guess = 1 << -(-value.bit_length() // n)
    while True:
        better = ((n - 1) * guess + value // guess ** (n - 1)) // n
        if better >= guess:
            return guess
        guess = better


def pow_nd(base: int, n: int, d: int) -> int:
    """Return base raised to n, then the truncated d-th root of that."""
    return nth_root(base**n, d)


def number_from_decimal(d, precision_bits: int) -> int:
    """Widen a decimal into a number with `precision_bits` fractional bits."""
    return bigint_to_number(decimal_to_raw(d), precision_bits)


def decimal_from_number(b: int, precision_bits: int) -> Decimal:
    """Round a widened number back into a decimal.

    Only the low 128 bits of the rounded value are kept, read as a signed
    two's-complement integer.
    """
    raw = bigint_from_number(b, precision_bits) & ((1 << 128) - 1)
    if raw > I128_MAX:
        raw -= 1 << 128
    return decimal_from_raw(raw)


def scaled_power(scale: int, base_n: int, base_d: int, exp_n: int, exp_d: int) -> int:
    """Return scale * (base_n / base_d) ** (exp_n / exp_d) in integer arithmetic."""
    numerator = pow_nd(base_n, exp_n, exp_d)
    denominator = pow_nd(base_d, exp_n, exp_d)
    if denominator == 0:
        raise ZeroDivisionError("scaled_power divide by zero")
    return _truncating_div(scale * numerator, denominator)