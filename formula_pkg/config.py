"""Centralized configuration for the formula engine.

This module defines:
- Numeric precision for the mpmath substrate
- Limits for hyper-operations (tetration iterations, overflow threshold)
- Input validation limits for the text parser
- Allowed SymPy names and parse transformations
- Output formatting and logging defaults

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with FORMULA_)
"""

import os

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("formula-engine")
except Exception:
    # Fallback if package not installed
    VERSION = "0.1.0"

# Numeric substrate
PRECISION = int(os.getenv("FORMULA_PRECISION", "50"))  # mpmath decimal places
MAX_TETRATION_ITERATIONS = int(
    os.getenv("FORMULA_MAX_TETRATION_ITERATIONS", "10000")
)  # cap for integer-height towers that converge instead of overflowing
OVERFLOW_EXPONENT = float(
    os.getenv("FORMULA_OVERFLOW_EXPONENT", "1e15")
)  # towers whose next exponent exceeds this many binary digits become inf

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("FORMULA_MAX_INPUT_LENGTH", "1000"))  # characters
MAX_EXPRESSION_DEPTH = int(os.getenv("FORMULA_MAX_EXPRESSION_DEPTH", "100"))

# Output
OUTPUT_PRECISION = int(os.getenv("FORMULA_OUTPUT_PRECISION", "15"))

# Logging
LOG_LEVEL = os.getenv("FORMULA_LOG_LEVEL", "WARNING")

# Default name of the free variable in parsed formulas
DEFAULT_VARIABLE = os.getenv("FORMULA_DEFAULT_VARIABLE", "x")

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "E": sp.E,
    "sqrt": sp.sqrt,
    "cbrt": sp.cbrt,
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
    "log": sp.log,
    "ln": sp.log,
    "exp": sp.exp,
    "Abs": sp.Abs,
    "abs": sp.Abs,  # lowercase alias for convenience
    "sign": sp.sign,
    "floor": sp.floor,
    "ceiling": sp.ceiling,
    "ceil": sp.ceiling,
    "gamma": sp.gamma,
    "loggamma": sp.loggamma,
    "factorial": sp.factorial,
    "LambertW": sp.LambertW,
    "lambertw": sp.LambertW,
    "Min": sp.Min,
    "min": sp.Min,
    "Max": sp.Max,
    "max": sp.Max,
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)
