"""Public API for the formula engine - returns structured results instead of raising.

Every function accepts either a :class:`Formula` or formula text. Text is
parsed with its variable set to ``current``; a ``Formula`` keeps reading its
own variable cell and ignores ``current``.
"""

from __future__ import annotations

from typing import Any

from . import numeric as N
from .computable import Ref
from .formula import Formula
from .logging_config import get_logger
from .parser import parse_formula
from .purchase import Resource, calculate_cost, calculate_max_affordable
from .types import EvalResult, FormulaError, PurchaseResult, ValidationError

logger = get_logger("api")


def _as_formula(formula: Formula | str, current: Any = 0) -> Formula:
    if isinstance(formula, Formula):
        return formula
    return parse_formula(formula, Ref(N.D(current)))


def _eval_result(value: Any) -> EvalResult:
    return EvalResult(ok=True, result=N.to_string(value), approx=float(value))


def _eval_failure(exc: FormulaError | ValidationError) -> EvalResult:
    logger.info("Formula request failed [%s]: %s", exc.code, exc.message)
    return EvalResult(ok=False, error=exc.message, code=exc.code)


def evaluate(formula: Formula | str, variable: Any = None, current: Any = 0) -> EvalResult:
    """Evaluate a formula.

    Args:
        formula: Formula or formula text (e.g., "(x+1)^2")
        variable: Optional override for the variable's value
        current: Variable value used when parsing text

    Returns:
        EvalResult with the value

    Example:
        >>> from formula_pkg.api import evaluate
        >>> evaluate("(x+1)^2", 3).result
        '16.0'
    """
    try:
        return _eval_result(_as_formula(formula, current).evaluate(variable))
    except (FormulaError, ValidationError) as exc:
        return _eval_failure(exc)


def invert(formula: Formula | str, value: Any) -> EvalResult:
    """Solve for the variable value at which the formula equals ``value``."""
    try:
        return _eval_result(_as_formula(formula).invert(value))
    except (FormulaError, ValidationError) as exc:
        return _eval_failure(exc)


def integral(formula: Formula | str, variable: Any = None, current: Any = 0) -> EvalResult:
    """Evaluate the antiderivative of a formula (without constant of integration)."""
    try:
        return _eval_result(_as_formula(formula, current).evaluate_integral(variable))
    except (FormulaError, ValidationError) as exc:
        return _eval_failure(exc)


def invert_integral(formula: Formula | str, value: Any) -> EvalResult:
    """Solve for the variable value at which the antiderivative equals ``value``."""
    try:
        return _eval_result(_as_formula(formula).invert_integral(value))
    except (FormulaError, ValidationError) as exc:
        return _eval_failure(exc)


def cost(
    formula: Formula | str, amount: Any, current: Any = 0, spend_resources: bool = True
) -> PurchaseResult:
    """Price ``amount`` purchases starting from ``current``.

    Example:
        >>> from formula_pkg.api import cost
        >>> cost("2x + 3", 2).amount
        '10.0'
    """
    try:
        value = calculate_cost(_as_formula(formula, current), amount, spend_resources)
    except (FormulaError, ValidationError) as exc:
        logger.info("Cost request failed [%s]: %s", exc.code, exc.message)
        return PurchaseResult(
            ok=False,
            result_type="cost",
            spend_resources=spend_resources,
            error=exc.message,
            code=exc.code,
        )
    return PurchaseResult(
        ok=True,
        result_type="cost",
        amount=N.to_string(value),
        spend_resources=spend_resources,
    )


def max_affordable(
    formula: Formula | str, balance: Any, current: Any = 0, spend_resources: bool = True
) -> PurchaseResult:
    """How many purchases ``balance`` affords, starting from ``current``.

    Example:
        >>> from formula_pkg.api import max_affordable
        >>> max_affordable("x^2", 100, spend_resources=False).amount
        '10.0'
    """
    try:
        value = calculate_max_affordable(
            _as_formula(formula, current), Resource(value=balance), spend_resources
        )
    except (FormulaError, ValidationError) as exc:
        logger.info("Max affordable request failed [%s]: %s", exc.code, exc.message)
        return PurchaseResult(
            ok=False,
            result_type="max_affordable",
            spend_resources=spend_resources,
            error=exc.message,
            code=exc.code,
        )
    return PurchaseResult(
        ok=True,
        result_type="max_affordable",
        amount=N.to_string(value),
        spend_resources=spend_resources,
    )
