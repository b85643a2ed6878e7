"""Type definitions, capability flags, errors and result dataclasses."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class Capability(enum.Flag):
    """What a formula node supports, computed once when the node is built."""

    NONE = 0
    EVALUABLE = enum.auto()
    INVERTIBLE = enum.auto()
    INTEGRABLE = enum.auto()
    INTEGRAL_INVERTIBLE = enum.auto()


@dataclass
class EvalResult:
    """Result of evaluating, inverting or integrating a formula."""

    ok: bool
    result: str | None = None
    approx: float | None = None
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.approx is not None:
            result_dict["approx"] = self.approx
        if self.error is not None:
            result_dict["error"] = self.error
        if self.code is not None:
            result_dict["code"] = self.code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, code={self.code!r})"
        parts = [f"ok={self.ok}"]
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.approx is not None:
            parts.append(f"approx={self.approx!r}")
        return f"EvalResult({', '.join(parts)})"


@dataclass
class PurchaseResult:
    """Result of a purchase calculation (cost or max affordable)."""

    ok: bool
    result_type: str  # "cost" or "max_affordable"
    amount: str | None = None
    spend_resources: bool = True
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {
            "ok": self.ok,
            "type": self.result_type,
            "spend_resources": self.spend_resources,
        }
        if self.amount is not None:
            result_dict["amount"] = self.amount
        if self.error is not None:
            result_dict["error"] = self.error
        if self.code is not None:
            result_dict["code"] = self.code
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return (
                f"PurchaseResult(ok=False, result_type={self.result_type!r}, "
                f"error={self.error!r}, code={self.code!r})"
            )
        return (
            f"PurchaseResult(ok=True, result_type={self.result_type!r}, "
            f"amount={self.amount!r}, spend_resources={self.spend_resources!r})"
        )


class FormulaError(Exception):
    """Raised when a formula cannot perform the requested operation."""

    def __init__(self, message: str, code: str = "FORMULA_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(Exception):
    """Raised when formula text fails validation or parsing."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
