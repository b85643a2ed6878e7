"""Command line interface for the formula engine.

Examples:
    python -m formula_pkg evaluate "(x+1)^2" --at 3
    python -m formula_pkg invert "(x+1)^2" 16
    python -m formula_pkg cost "2x + 3" 5 --current 10
    python -m formula_pkg max-affordable "x^2" 100 --no-spend --format json
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from . import api
from .config import VERSION
from .parser import parse_formula, to_sympy
from .types import EvalResult, PurchaseResult, ValidationError


def print_result(res: EvalResult | PurchaseResult, output_format: str = "human") -> None:
    """Print an API result as JSON or as a single human readable line."""
    if output_format == "json":
        print(json.dumps(res.to_dict()))
        return
    if not res.ok:
        print(f"Error [{res.code}]: {res.error}")
        return
    if isinstance(res, PurchaseResult):
        print(res.amount)
    else:
        print(res.result)


def _show(text: str, output_format: str) -> int:
    try:
        formula = parse_formula(text)
    except ValidationError as exc:
        print_result(EvalResult(ok=False, error=exc.message, code=exc.code), output_format)
        return 1
    info: dict[str, Any] = {
        "ok": True,
        "expression": str(to_sympy(formula)),
        "has_variable": formula.has_variable(),
        "invertible": formula.is_invertible(),
        "integrable": formula.is_integrable(),
        "integral_invertible": formula.is_integral_invertible(),
    }
    if output_format == "json":
        print(json.dumps(info))
    else:
        print(info["expression"])
        for key in ("has_variable", "invertible", "integrable", "integral_invertible"):
            print(f"  {key}: {'yes' if info[key] else 'no'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="formula", description="Invertible cost formulas")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument("-v", "--version", action="store_true", help="Show program version")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")

    commands = parser.add_subparsers(dest="command")

    evaluate = commands.add_parser("evaluate", help="Evaluate a formula")
    evaluate.add_argument("formula")
    evaluate.add_argument("--at", type=str, help="Value of the variable (default: 0)")

    invert = commands.add_parser("invert", help="Solve for the variable")
    invert.add_argument("formula")
    invert.add_argument("value")

    integral = commands.add_parser("integral", help="Evaluate the antiderivative")
    integral.add_argument("formula")
    integral.add_argument("--at", type=str, help="Value of the variable (default: 0)")
    integral.add_argument(
        "--invert", type=str, metavar="VALUE", help="Invert the antiderivative at VALUE instead"
    )

    for name, amount_help in (
        ("cost", "Number of purchases to price"),
        ("max-affordable", "Balance available to spend"),
    ):
        sub = commands.add_parser(name, help=amount_help)
        sub.add_argument("formula")
        sub.add_argument("amount", help=amount_help)
        sub.add_argument("--current", type=str, default="0", help="Purchases already made")
        sub.add_argument(
            "--no-spend",
            dest="spend_resources",
            action="store_false",
            help="Price every purchase at the current marginal cost",
        )

    show = commands.add_parser("show", help="Show a parsed formula and its capabilities")
    show.add_argument("formula")
    return parser


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the formula CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    from .logging_config import setup_logging

    setup_logging(level=args.log_level, log_file=args.log_file)

    import formula_pkg.config as _config

    if args.precision and args.precision > 0:
        _config.OUTPUT_PRECISION = int(args.precision)
    if args.version:
        print(VERSION)
        return 0
    if args.command is None:
        parser.print_help()
        return 1
    if args.command == "show":
        return _show(args.formula, args.format)

    if args.command == "evaluate":
        res = api.evaluate(args.formula, current=args.at or 0)
    elif args.command == "invert":
        res = api.invert(args.formula, args.value)
    elif args.command == "integral":
        if args.invert is not None:
            res = api.invert_integral(args.formula, args.invert)
        else:
            res = api.integral(args.formula, current=args.at or 0)
    elif args.command == "cost":
        res = api.cost(args.formula, args.amount, args.current, args.spend_resources)
    else:
        res = api.max_affordable(args.formula, args.amount, args.current, args.spend_resources)
    print_result(res, args.format)
    return 0 if res.ok else 1
