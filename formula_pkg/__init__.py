"""Formula engine: invertible and integrable cost formulas for incremental games."""

__all__ = [
    "config",
    "numeric",
    "computable",
    "operations",
    "formula",
    "factories",
    "purchase",
    "parser",
    "api",
    "cli",
    "types",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "Formula",
    "Ref",
    "Resource",
    "calculate_cost",
    "calculate_max_affordable",
    "parse_formula",
    "FormulaError",
    "ValidationError",
    "Capability",
]

from .computable import Ref, unref
from .factories import *  # noqa: F401,F403
from .formula import Formula
from .parser import parse_formula, to_sympy
from .purchase import Resource, calculate_cost, calculate_max_affordable
from .types import Capability, EvalResult, FormulaError, PurchaseResult, ValidationError
