"""Text and SymPy front end for formulas.

This module handles:
- Input validation (length, forbidden tokens, nesting depth)
- Parsing formula text with SymPy's ``parse_expr``
- Converting SymPy expressions into :class:`Formula` trees
- Converting formulas back into SymPy expressions for display
"""

from __future__ import annotations

from tokenize import TokenError
from typing import Any

import mpmath
import sympy as sp
from sympy import parse_expr

from . import numeric as N
from .computable import Ref, unref
from .config import (
    ALLOWED_SYMPY_NAMES,
    DEFAULT_VARIABLE,
    MAX_EXPRESSION_DEPTH,
    MAX_INPUT_LENGTH,
    PRECISION,
    TRANSFORMATIONS,
)
from .formula import Formula
from .logging_config import get_logger
from .types import ValidationError

logger = get_logger("parser")

# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "compile",
    "globals",
    "locals",
)

_UNARY_FUNCTIONS = {
    sp.exp: "exp",
    sp.sin: "sin",
    sp.cos: "cos",
    sp.tan: "tan",
    sp.asin: "asin",
    sp.acos: "acos",
    sp.atan: "atan",
    sp.sinh: "sinh",
    sp.cosh: "cosh",
    sp.tanh: "tanh",
    sp.asinh: "asinh",
    sp.acosh: "acosh",
    sp.atanh: "atanh",
    sp.Abs: "abs",
    sp.sign: "sign",
    sp.floor: "floor",
    sp.ceiling: "ceil",
    sp.gamma: "gamma",
    sp.loggamma: "lngamma",
    sp.factorial: "factorial",
    sp.LambertW: "lambertw",
}


def validate_input(text: str) -> str:
    """Check formula text before handing it to SymPy.

    Args:
        text: Raw formula text

    Returns:
        The stripped text

    Raises:
        ValidationError: If the text is empty, too long or contains a forbidden token
    """
    text = (text or "").strip()
    if not text:
        raise ValidationError("Input cannot be empty", "EMPTY_INPUT")
    if len(text) > MAX_INPUT_LENGTH:
        raise ValidationError(f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG")
    lowered = text.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning("Rejected input containing forbidden token %r", tok)
            raise ValidationError(f"Input contains forbidden token: {tok}", "FORBIDDEN_TOKEN")
    return text


def _check_depth(expr: sp.Basic, depth: int = 0) -> None:
    if depth > MAX_EXPRESSION_DEPTH:
        raise ValidationError(
            f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)", "TOO_DEEP"
        )
    for arg in expr.args:
        _check_depth(arg, depth + 1)


def parse_formula(
    text: str,
    variable: Any = None,
    *,
    symbol: str = DEFAULT_VARIABLE,
    values: dict[str, Any] | None = None,
) -> Formula:
    """Parse formula text such as ``"(x + 1)^2"`` into a :class:`Formula`.

    Args:
        text: Formula text. ``^`` means power and implicit multiplication is allowed
        variable: Computable backing the variable; a fresh ``Ref(0)`` if omitted
        symbol: Name of the variable in the text
        values: Extra named inputs (plain values or computables)

    Returns:
        The parsed formula

    Raises:
        ValidationError: If the text cannot be parsed or uses unsupported constructs
    """
    text = validate_input(text)
    values = values or {}
    local_dict = dict(ALLOWED_SYMPY_NAMES)
    local_dict[symbol] = sp.Symbol(symbol)
    for name in values:
        local_dict[name] = sp.Symbol(name)
    try:
        expr = parse_expr(text, local_dict=local_dict, transformations=TRANSFORMATIONS)
    except (SyntaxError, TokenError, TypeError, ValueError, AttributeError) as exc:
        raise ValidationError(f"Could not parse '{text}': {exc}", "PARSE_ERROR") from exc
    if not isinstance(expr, sp.Expr):
        raise ValidationError(f"'{text}' is not a numeric expression", "PARSE_ERROR")
    _check_depth(expr)
    if variable is None:
        variable = Ref(0)
    result = from_sympy(expr, variable, symbol=symbol, values=values)
    logger.debug("Parsed %r into %r", text, result)
    return result


def from_sympy(
    expr: sp.Basic,
    variable: Any,
    *,
    symbol: str = DEFAULT_VARIABLE,
    values: dict[str, Any] | None = None,
) -> Formula:
    """Convert a SymPy expression into a formula over ``variable``."""
    converted = _convert(expr, variable, symbol, values or {})
    if isinstance(converted, Formula):
        return converted
    return Formula.constant(converted)


def _convert(expr: sp.Basic, variable: Any, symbol: str, values: dict[str, Any]) -> Any:
    """Convert one node; numbers stay plain values so they become raw inputs."""
    if isinstance(expr, sp.Symbol):
        if expr.name == symbol:
            return Formula.variable(variable)
        if expr.name in values:
            return Formula.constant(values[expr.name])
        raise ValidationError(f"Unknown symbol '{expr.name}'", "UNKNOWN_SYMBOL")
    if isinstance(expr, sp.Integer):
        return N.D(int(expr))
    if isinstance(expr, sp.Rational):
        return N.div(int(expr.p), int(expr.q))
    if expr.is_Number or isinstance(expr, sp.NumberSymbol):
        return N.D(str(sp.N(expr, PRECISION)))

    def convert(arg: sp.Basic) -> Any:
        return _convert(arg, variable, symbol, values)

    if isinstance(expr, sp.Add):
        terms = list(expr.args)
        result = convert(terms[0])
        for term in terms[1:]:
            if term.could_extract_minus_sign():
                result = Formula.sub(result, convert(-term))
            else:
                result = Formula.add(result, convert(term))
        return result
    if isinstance(expr, sp.Mul):
        factors = list(expr.args)
        if factors[0] == -1:
            rest = sp.Mul(*factors[1:], evaluate=False) if len(factors) > 2 else factors[1]
            return Formula.neg(convert(rest))
        result = convert(factors[0])
        for factor in factors[1:]:
            if isinstance(factor, sp.Pow) and factor.exp == -1:
                result = Formula.div(result, convert(factor.base))
            else:
                result = Formula.mul(result, convert(factor))
        return result
    if isinstance(expr, sp.Pow):
        base, exponent = expr.args
        if base == sp.E:
            return Formula.exp(convert(exponent))
        if exponent == -1:
            return Formula.recip(convert(base))
        if isinstance(exponent, sp.Rational) and exponent.p == 1 and exponent.q > 1:
            return Formula.root(convert(base), int(exponent.q))
        return Formula.pow(convert(base), convert(exponent))
    if isinstance(expr, sp.log):
        if len(expr.args) == 2:
            return Formula.log(convert(expr.args[0]), convert(expr.args[1]))
        return Formula.ln(convert(expr.args[0]))
    if isinstance(expr, (sp.Min, sp.Max)):
        name = "min" if isinstance(expr, sp.Min) else "max"
        args = [convert(arg) for arg in expr.args]
        result = args[0]
        for arg in args[1:]:
            result = Formula(
                [result if isinstance(result, Formula) else Formula.constant(result), arg],
                name,
            )
        return result
    for func, name in _UNARY_FUNCTIONS.items():
        if isinstance(expr, func) and len(expr.args) == 1:
            return Formula([convert(expr.args[0])], name)
    raise ValidationError(f"Unsupported expression '{expr}'", "UNSUPPORTED")


def _to_sympy_number(value: Any) -> sp.Expr:
    value = N.D(value)
    if mpmath.isnan(value):
        return sp.nan
    if mpmath.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    if value == mpmath.floor(value):
        return sp.Integer(int(value))
    return sp.Float(mpmath.nstr(value, 15), 15)


_SYMPY_BUILDERS = {
    "add": lambda a, b: a + b,
    "sub": lambda a, b: a - b,
    "mul": lambda a, b: a * b,
    "div": lambda a, b: a / b,
    "neg": lambda a: -a,
    "recip": lambda a: 1 / a,
    "abs": sp.Abs,
    "sign": sp.sign,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "pow": lambda a, b: a**b,
    "pow10": lambda a: sp.Integer(10) ** a,
    "pow_base": lambda a, b: b**a,
    "root": lambda a, b: a ** (1 / b),
    "exp": sp.exp,
    "ln": sp.log,
    "log": sp.log,
    "log2": lambda a: sp.log(a, 2),
    "log10": lambda a: sp.log(a, 10),
    "min": sp.Min,
    "max": sp.Max,
    "clamp_min": sp.Max,
    "clamp_max": sp.Min,
    "clamp": lambda a, lower, upper: sp.Min(sp.Max(a, lower), upper),
    "factorial": sp.factorial,
    "gamma": sp.gamma,
    "lngamma": sp.loggamma,
    "lambertw": sp.LambertW,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "asinh": sp.asinh,
    "acosh": sp.acosh,
    "atanh": sp.atanh,
}


def to_sympy(formula: Formula, symbol: str = DEFAULT_VARIABLE) -> sp.Expr:
    """Convert a formula into a SymPy expression, mainly for display.

    Operations without a SymPy counterpart (tetration, step, ...) become
    undefined functions named after the operation. Computable inputs are
    read at their current value.
    """
    x = sp.Symbol(symbol)

    def convert(source: Any) -> sp.Expr:
        if not isinstance(source, Formula):
            return _to_sympy_number(unref(source))
        if source.operation is None:
            if source.innermost_variable is not None and source.has_variable():
                return x
            return convert(source.inputs[0])
        args = [convert(arg) for arg in source.inputs]
        builder = _SYMPY_BUILDERS.get(source.operation.name)
        if builder is None:
            return sp.Function(source.operation.name)(*args)
        return builder(*args)

    return convert(formula)
