"""Arbitrary-precision numeric substrate built on mpmath.

Every function accepts anything :func:`D` understands (int, float, str,
``decimal.Decimal``, ``fractions.Fraction``, mpmath numbers) and returns a
real ``mpmath.mpf``. Operations outside their real domain return ``nan``
rather than a complex number, so formulas stay on the real line.

Hyper-operations (tetration and friends) use the linear approximation of the
super-logarithm: ``slog(x) = x - 1`` on ``[0, 1]``, extended by
``slog(x) = 1 + slog(log_b x)`` above and ``slog(x) = slog(b**x) - 1`` below.
Non-integer tower heights are defined through that approximation, so
``slog(tetrate(b, h, p)) == slog(p) + h``.
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import Any

import mpmath

from . import config
from .config import MAX_TETRATION_ITERATIONS, OVERFLOW_EXPONENT, PRECISION

mpmath.mp.dps = PRECISION

mpf = mpmath.mpf
inf = mpmath.inf
nan = mpmath.nan

ZERO = mpf(0)
ONE = mpf(1)
TEN = mpf(10)


def D(value: Any) -> mpmath.mpf:
    """Convert a plain numeric value to an ``mpf``."""
    if isinstance(value, mpmath.mpf):
        return value
    if isinstance(value, mpmath.mpc):
        return _real(value)
    if isinstance(value, bool):
        return mpf(int(value))
    if isinstance(value, Fraction):
        return mpf(value.numerator) / value.denominator
    if isinstance(value, Decimal):
        return mpf(str(value))
    return mpf(value)


def _real(value: Any) -> mpmath.mpf:
    """Drop a negligible imaginary part; anything truly complex becomes nan."""
    if isinstance(value, mpmath.mpc):
        if value.imag == 0 or abs(value.imag) <= mpmath.eps * max(ONE, abs(value.real)):
            return mpf(value.real)
        return nan
    return mpf(value)


def is_nan(value: Any) -> bool:
    return mpmath.isnan(D(value))


def is_inf(value: Any) -> bool:
    return mpmath.isinf(D(value))


def eq(a: Any, b: Any) -> bool:
    return D(a) == D(b)


def to_string(value: Any, precision: int | None = None) -> str:
    """Format a value with ``precision`` significant digits (default: OUTPUT_PRECISION)."""
    if precision is None:
        precision = config.OUTPUT_PRECISION
    return mpmath.nstr(D(value), precision)


# Arithmetic


def add(a: Any, b: Any) -> mpmath.mpf:
    return D(a) + D(b)


def sub(a: Any, b: Any) -> mpmath.mpf:
    return D(a) - D(b)


def mul(a: Any, b: Any) -> mpmath.mpf:
    return D(a) * D(b)


def div(a: Any, b: Any) -> mpmath.mpf:
    a, b = D(a), D(b)
    if b == 0:
        if a == 0 or mpmath.isnan(a):
            return nan
        return inf if a > 0 else -inf
    return a / b


def neg(value: Any) -> mpmath.mpf:
    return -D(value)


def recip(value: Any) -> mpmath.mpf:
    return div(ONE, value)


# Rounding


def absolute(value: Any) -> mpmath.mpf:
    return mpmath.fabs(D(value))


def sign(value: Any) -> mpmath.mpf:
    return mpf(mpmath.sign(D(value)))


def rounded(value: Any) -> mpmath.mpf:
    """Round half up, the way game UIs round (2.5 -> 3, -2.5 -> -2)."""
    return mpmath.floor(D(value) + mpf("0.5"))


def floor(value: Any) -> mpmath.mpf:
    return mpmath.floor(D(value))


def ceil(value: Any) -> mpmath.mpf:
    return mpmath.ceil(D(value))


def trunc(value: Any) -> mpmath.mpf:
    x = D(value)
    return mpmath.floor(x) if x >= 0 else mpmath.ceil(x)


# Exponential family


def power(base: Any, exponent: Any) -> mpmath.mpf:
    b, e = D(base), D(exponent)
    if mpmath.isnan(b) or mpmath.isnan(e):
        return nan
    if b == 0 and e < 0:
        return inf
    if b < 0 and e != mpmath.floor(e):
        return nan
    return _real(mpmath.power(b, e))


def pow10(value: Any) -> mpmath.mpf:
    return power(TEN, value)


def pow_base(value: Any, base: Any) -> mpmath.mpf:
    """``base ** value``."""
    return power(base, value)


def root(value: Any, degree: Any) -> mpmath.mpf:
    x, n = D(value), D(degree)
    if mpmath.isnan(x) or mpmath.isnan(n):
        return nan
    integral_degree = mpmath.isfinite(n) and n > 0 and n == mpmath.floor(n)
    if x < 0 and integral_degree and int(n) % 2 == 1:
        return -root(-x, n)
    # mpmath.root is exact on perfect powers, x ** (1/n) is not when 1/n is inexact
    if x >= 0 and integral_degree and mpmath.isfinite(x):
        return mpf(mpmath.root(x, int(n)))
    return power(x, recip(n))


def sqrt(value: Any) -> mpmath.mpf:
    return root(value, 2)


def cbrt(value: Any) -> mpmath.mpf:
    return root(value, 3)


def exp(value: Any) -> mpmath.mpf:
    return mpmath.exp(D(value))


# Logarithmic family


def ln(value: Any) -> mpmath.mpf:
    x = D(value)
    if x < 0 or mpmath.isnan(x):
        return nan
    return mpmath.ln(x)


def log(value: Any, base: Any) -> mpmath.mpf:
    return div(ln(value), ln(base))


def log2(value: Any) -> mpmath.mpf:
    return log(value, 2)


def log10(value: Any) -> mpmath.mpf:
    x = D(value)
    if x < 0 or mpmath.isnan(x):
        return nan
    return mpmath.log10(x)


def plog10(value: Any) -> mpmath.mpf:
    """log10 that treats negative inputs as zero output."""
    x = D(value)
    if x < 0:
        return ZERO
    return log10(x)


def abslog10(value: Any) -> mpmath.mpf:
    x = absolute(value)
    if x == 0:
        return nan
    return log10(x)


# Trigonometric and hyperbolic


def sin(value: Any) -> mpmath.mpf:
    return mpmath.sin(D(value))


def cos(value: Any) -> mpmath.mpf:
    return mpmath.cos(D(value))


def tan(value: Any) -> mpmath.mpf:
    return mpmath.tan(D(value))


def asin(value: Any) -> mpmath.mpf:
    return _real(mpmath.asin(D(value)))


def acos(value: Any) -> mpmath.mpf:
    return _real(mpmath.acos(D(value)))


def atan(value: Any) -> mpmath.mpf:
    return mpmath.atan(D(value))


def sinh(value: Any) -> mpmath.mpf:
    return mpmath.sinh(D(value))


def cosh(value: Any) -> mpmath.mpf:
    return mpmath.cosh(D(value))


def tanh(value: Any) -> mpmath.mpf:
    return mpmath.tanh(D(value))


def asinh(value: Any) -> mpmath.mpf:
    return mpmath.asinh(D(value))


def acosh(value: Any) -> mpmath.mpf:
    return _real(mpmath.acosh(D(value)))


def atanh(value: Any) -> mpmath.mpf:
    x = D(value)
    if abs(x) == 1:
        return inf if x > 0 else -inf
    return _real(mpmath.atanh(x))


# Special functions


def gamma(value: Any) -> mpmath.mpf:
    x = D(value)
    if x <= 0 and x == mpmath.floor(x):
        # poles at the non-positive integers
        return nan
    return _real(mpmath.gamma(x))


def factorial(value: Any) -> mpmath.mpf:
    return gamma(D(value) + 1)


def lngamma(value: Any) -> mpmath.mpf:
    x = D(value)
    if x <= 0:
        return nan
    return _real(mpmath.loggamma(x))


def lambertw(value: Any) -> mpmath.mpf:
    """Principal branch of the Lambert W function."""
    x = D(value)
    if mpmath.isinf(x) and x > 0:
        return inf
    if x < -mpmath.exp(-1):
        return nan
    return _real(mpmath.lambertw(x))


def ssqrt(value: Any) -> mpmath.mpf:
    """Super square root: the ``y`` with ``y ** y == value``."""
    x = D(value)
    if mpmath.isinf(x) and x > 0:
        return inf
    if x < mpmath.exp(-mpmath.exp(-1)):
        return nan
    if x == 1:
        return ONE
    lx = mpmath.ln(x)
    return lx / lambertw(lx)


# Hyper-operations


def _exp_base(base: mpmath.mpf, exponent: mpmath.mpf) -> mpmath.mpf:
    """``base ** exponent`` that saturates to inf/0 instead of allocating giant exponents."""
    if base > 0 and base != 1:
        magnitude = exponent * mpmath.log(base, 2)
        if magnitude > OVERFLOW_EXPONENT:
            return inf
        if magnitude < -OVERFLOW_EXPONENT:
            return ZERO
    return power(base, exponent)


def _iterate_exp(base: mpmath.mpf, value: mpmath.mpf, steps: int) -> mpmath.mpf:
    for _ in range(min(steps, MAX_TETRATION_ITERATIONS)):
        previous = value
        value = _exp_base(base, value)
        if mpmath.isinf(value) or mpmath.isnan(value) or value == previous:
            break
    return value


def _iterate_log(base: mpmath.mpf, value: mpmath.mpf, steps: int) -> mpmath.mpf:
    for _ in range(min(steps, MAX_TETRATION_ITERATIONS)):
        previous = value
        value = log(value, base)
        if mpmath.isinf(value) or mpmath.isnan(value) or value == previous:
            break
    return value


def slog(value: Any, base: Any = 10) -> mpmath.mpf:
    """Super-logarithm (inverse of tetration in the height) for ``base > 1``."""
    x, b = D(value), D(base)
    if b <= 1 or mpmath.isnan(x):
        return nan
    if mpmath.isinf(x):
        return inf if x > 0 else mpf(-2)
    result = ZERO
    if x < 0:
        x = power(b, x)
        result -= 1
    while x > 1:
        x = log(x, b)
        result += 1
    return result + x - 1


def _super_exp(height: mpmath.mpf, base: mpmath.mpf) -> mpmath.mpf:
    """Inverse of :func:`slog`: tetration of ``base`` with payload 1."""
    if mpmath.isnan(height):
        return nan
    if height <= -2:
        return -inf
    if height <= -1:
        return log(_super_exp(height + 1, base), base)
    if height <= 0:
        return height + 1
    whole = mpmath.floor(height)
    frac = height - whole
    if frac == 0:
        return _iterate_exp(base, ONE, int(whole))
    return _iterate_exp(base, frac, int(whole) + 1)


def tetrate(base: Any, height: Any = 2, payload: Any = 1) -> mpmath.mpf:
    """``base ^ base ^ ... ^ payload`` with ``height`` copies of ``base``."""
    b, h, p = D(base), D(height), D(payload)
    if mpmath.isnan(b) or mpmath.isnan(h) or mpmath.isnan(p):
        return nan
    if mpmath.isinf(h):
        return inf if h > 0 else nan
    if h == mpmath.floor(h):
        if h >= 0:
            return _iterate_exp(b, p, int(h))
        return _iterate_log(b, p, int(-h))
    if b <= 1:
        return nan
    return _super_exp(slog(p, b) + h, b)


def iteratedexp(base: Any, height: Any = 2, payload: Any = 1) -> mpmath.mpf:
    return tetrate(base, height, payload)


def iteratedlog(value: Any, base: Any = 10, times: Any = 1) -> mpmath.mpf:
    """Apply ``log_base`` ``times`` times (fractional times via the super-logarithm)."""
    x, b, t = D(value), D(base), D(times)
    if t == mpmath.floor(t):
        if t >= 0:
            return _iterate_log(b, x, int(t))
        return _iterate_exp(b, x, int(-t))
    if b <= 1:
        return nan
    return _super_exp(slog(x, b) - t, b)


def layeradd(value: Any, diff: Any, base: Any = 10) -> mpmath.mpf:
    """Add ``diff`` to the super-logarithm of ``value``."""
    return tetrate(base, diff, value)


def layeradd10(value: Any, diff: Any) -> mpmath.mpf:
    return layeradd(value, diff, TEN)


def pentate(base: Any, height: Any = 2, payload: Any = 1) -> mpmath.mpf:
    b, h, p = D(base), D(height), D(payload)
    whole = mpmath.floor(h)
    frac = h - whole
    if frac != 0:
        if p == 1:
            whole += 1
            p = frac
        else:
            p = layeradd(p, frac, b)
    result = p
    for _ in range(min(max(int(whole), 0), MAX_TETRATION_ITERATIONS)):
        previous = result
        result = tetrate(b, result, ONE)
        if mpmath.isinf(result) or mpmath.isnan(result) or result == previous:
            break
    return result


# Comparison family


def minimum(a: Any, b: Any) -> mpmath.mpf:
    a, b = D(a), D(b)
    return a if a <= b else b


def maximum(a: Any, b: Any) -> mpmath.mpf:
    a, b = D(a), D(b)
    return a if a >= b else b


def minabs(a: Any, b: Any) -> mpmath.mpf:
    """Whichever argument is closer to zero."""
    a, b = D(a), D(b)
    return b if abs(a) > abs(b) else a


def maxabs(a: Any, b: Any) -> mpmath.mpf:
    """Whichever argument is further from zero."""
    a, b = D(a), D(b)
    return b if abs(a) < abs(b) else a


def clamp_min(value: Any, lower: Any) -> mpmath.mpf:
    return maximum(value, lower)


def clamp_max(value: Any, upper: Any) -> mpmath.mpf:
    return minimum(value, upper)


def clamp(value: Any, lower: Any, upper: Any) -> mpmath.mpf:
    return minimum(maximum(value, lower), upper)
