"""Test that API functions return typed dataclasses."""

from formula_pkg.api import cost, evaluate, integral, invert, invert_integral, max_affordable
from formula_pkg.computable import Ref
from formula_pkg.formula import Formula
from formula_pkg.types import EvalResult, PurchaseResult


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_evaluate_returns_eval_result(self):
        result = evaluate("(x+1)^2", 3)
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.result == "16.0"
        assert result.approx == 16.0

    def test_evaluate_uses_current(self):
        assert evaluate("(x+1)^2", current=4).approx == 25.0

    def test_evaluate_accepts_formula(self):
        f = Formula.variable(Ref(2)).mul(5)
        assert evaluate(f).approx == 10.0

    def test_evaluate_error_returns_eval_result(self):
        result = evaluate("__import__('os')")
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.code == "FORBIDDEN_TOKEN"
        assert result.error is not None

    def test_invert(self):
        result = invert("(x+1)^2", 16)
        assert result.ok is True
        assert abs(result.approx - 3) < 1e-12

    def test_invert_failure(self):
        result = invert("floor(x)", 3)
        assert result.ok is False
        assert result.code == "NOT_INVERTIBLE"

    def test_integral(self):
        result = integral("2x + 3", 2)
        assert result.ok is True
        assert abs(result.approx - 10) < 1e-12

    def test_integral_nested_failure(self):
        result = integral("exp(x^2)", 1)
        assert result.ok is False
        assert result.code == "NESTED_COMPLEX"

    def test_invert_integral(self):
        result = invert_integral("x", 8)
        assert result.ok is True
        assert abs(result.approx - 4) < 1e-12

    def test_cost_returns_purchase_result(self):
        result = cost("2x + 3", 2)
        assert isinstance(result, PurchaseResult)
        assert result.ok is True
        assert result.result_type == "cost"
        assert result.amount == "10.0"

    def test_cost_spot_price(self):
        result = cost("2x + 3", 2, current=1, spend_resources=False)
        assert result.amount == "9.0"
        assert result.spend_resources is False

    def test_max_affordable(self):
        result = max_affordable("x^2", 100, spend_resources=False)
        assert result.ok is True
        assert result.result_type == "max_affordable"
        assert result.amount == "10.0"

    def test_max_affordable_failure(self):
        result = max_affordable("sin(x)", 10)
        assert result.ok is False
        assert result.code == "INTEGRAL_NOT_INVERTIBLE"
        assert result.amount is None

    def test_to_dict(self):
        data = evaluate("y").to_dict()
        assert data == {"ok": False, "error": "Unknown symbol 'y'", "code": "UNKNOWN_SYMBOL"}
        data = max_affordable("x^2", 100, spend_resources=False).to_dict()
        assert data["type"] == "max_affordable"
        assert data["amount"] == "10.0"
