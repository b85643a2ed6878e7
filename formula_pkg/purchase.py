"""Bulk purchase helpers built on formula inversion and integration.

With ``spend_resources`` enabled every purchase is paid for, so the cost of
buying ``n`` levels is the definite integral of the cost formula over the
purchased range. With it disabled each level is priced at today's marginal
cost, which is much cheaper to compute for large numbers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import mpmath

from . import numeric as N
from .computable import unref
from .formula import Formula
from .logging_config import get_logger
from .types import FormulaError

logger = get_logger("purchase")


@dataclass
class Resource:
    """A spendable balance. Anything with a ``value`` attribute works as well."""

    name: str = "points"
    value: Any = 0


def _current_variable(formula: Formula) -> mpmath.mpf:
    if formula.innermost_variable is None:
        return N.ZERO
    return N.D(unref(formula.innermost_variable))


def calculate_max_affordable(
    formula: Formula, resource: Any, spend_resources: Any = True
) -> mpmath.mpf:
    """Calculate how many purchases the resource's balance can afford.

    Args:
        formula: Cost formula whose variable is the number already purchased
        resource: Object exposing the current balance as ``value``
        spend_resources: Whether each purchase spends the resource. May be a computable

    Returns:
        Number of additional purchases that can be afforded

    Raises:
        FormulaError: If the formula lacks the capability the chosen mode needs
    """
    balance = N.D(unref(resource.value))
    if unref(spend_resources):
        if not formula.is_integrable() or not formula.is_integral_invertible():
            raise FormulaError(
                "Cannot calculate max affordable of formula with non-invertible integral",
                "INTEGRAL_NOT_INVERTIBLE",
            )
        total = formula.invert_integral(N.add(balance, formula.evaluate_integral()))
        amount = N.sub(N.floor(total), _current_variable(formula))
    else:
        if not formula.is_invertible():
            raise FormulaError(
                "Cannot calculate max affordable of non-invertible formula",
                "NOT_INVERTIBLE",
            )
        amount = N.floor(formula.invert(balance))
    logger.debug("Max affordable with balance %s: %s", N.to_string(balance), N.to_string(amount))
    return amount


def calculate_cost(formula: Formula, amount: Any, spend_resources: Any = True) -> mpmath.mpf:
    """Calculate the cost of buying ``amount`` more purchases.

    Args:
        formula: Cost formula whose variable is the number already purchased
        amount: Number of purchases to price
        spend_resources: Integrate over the purchased range instead of using the spot price

    Returns:
        The total cost
    """
    new_value = N.add(amount, _current_variable(formula))
    if unref(spend_resources):
        cost = N.sub(formula.evaluate_integral(new_value), formula.evaluate_integral())
    else:
        cost = formula.evaluate(new_value)
    logger.debug("Cost of %s purchases: %s", N.to_string(amount), N.to_string(cost))
    return cost
