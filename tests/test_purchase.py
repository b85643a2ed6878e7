"""Unit tests for the bulk purchase helpers."""

import unittest
from types import SimpleNamespace

import mpmath
import pytest

from formula_pkg.computable import Ref
from formula_pkg.formula import Formula
from formula_pkg.purchase import Resource, calculate_cost, calculate_max_affordable
from formula_pkg.types import FormulaError


class TestMaxAffordable(unittest.TestCase):
    """Test calculate_max_affordable in both modes."""

    def test_square_without_spending(self):
        f = Formula.variable(Ref(0)).pow(2)
        self.assertEqual(calculate_max_affordable(f, Resource(value=100), False), 10)

    def test_square_with_spending(self):
        f = Formula.variable(Ref(0)).pow(2)
        # integral of x^2 from 0 to 6 is 72, to 7 is 114.33
        self.assertEqual(calculate_max_affordable(f, Resource(value=100)), 6)

    def test_offset_by_current_purchases(self):
        cell = Ref(3)
        f = Formula.variable(cell).pow(2)
        # integral from 3 to 6 is 63, to 7 is 105.33
        self.assertEqual(calculate_max_affordable(f, Resource(value=100)), 3)

    def test_any_object_with_value(self):
        f = Formula.variable(Ref(0)).mul(2).add(3)
        resource = SimpleNamespace(value=Ref(40))
        # x^2 + 3x <= 40 -> x = 5
        self.assertEqual(calculate_max_affordable(f, resource), 5)

    def test_live_spend_flag(self):
        f = Formula.variable(Ref(0)).pow(2)
        spend = Ref(False)
        resource = Resource(value=100)
        self.assertEqual(calculate_max_affordable(f, resource, spend), 10)
        spend.value = True
        self.assertEqual(calculate_max_affordable(f, resource, spend), 6)

    def test_missing_capabilities(self):
        x = Formula.variable(Ref(0))
        with self.assertRaises(FormulaError) as ctx:
            calculate_max_affordable(x.floor(), Resource(value=10), False)
        self.assertEqual(ctx.exception.code, "NOT_INVERTIBLE")
        with self.assertRaises(FormulaError) as ctx:
            calculate_max_affordable(x.sin(), Resource(value=10), True)
        self.assertEqual(ctx.exception.code, "INTEGRAL_NOT_INVERTIBLE")


class TestCost(unittest.TestCase):
    """Test calculate_cost in both modes."""

    def setUp(self):
        self.cell = Ref(2)
        self.f = Formula.variable(self.cell).mul(2).add(3)

    def test_integral_difference(self):
        # (25 + 15) - (4 + 6)
        cost = calculate_cost(self.f, 3)
        self.assertTrue(mpmath.almosteq(cost, 30))
        expected = self.f.evaluate_integral(5) - self.f.evaluate_integral()
        self.assertEqual(cost, expected)

    def test_spot_price(self):
        self.assertEqual(calculate_cost(self.f, 3, False), 13)

    def test_monotonic(self):
        f = Formula.variable(Ref(0)).add(1).pow(2)
        costs = [calculate_cost(f, n) for n in range(10)]
        self.assertEqual(costs[0], 0)
        for previous, current in zip(costs, costs[1:]):
            self.assertLessEqual(previous, current)

    def test_max_affordable_is_affordable(self):
        f = Formula.variable(Ref(0)).mul(3).add(1).pow(2)
        resource = Resource(value=5000)
        amount = calculate_max_affordable(f, resource)
        self.assertLessEqual(calculate_cost(f, amount), 5000)
        self.assertGreater(calculate_cost(f, amount + 1), 5000)


def _level():
    return Formula.variable(Ref(0))


class TestIntegerBoundaries:
    """Budgets landing exactly on a whole number of purchases."""

    @pytest.mark.parametrize(
        "build, balance, expected",
        [
            (lambda x: x.pow(3), 1000, 10),
            (lambda x: x.pow(3), 999, 9),
            (lambda x: x.mul(5).pow(3), 1000, 2),
            (lambda x: x.pow(4), 81, 3),
            (lambda x: x.pow(5), 243, 3),
            (lambda x: Formula.pow_base(3, x), 343, 7),
            (lambda x: x.cbrt(), 4, 64),
        ],
    )
    def test_spot_price(self, build, balance, expected):
        f = build(_level())
        assert calculate_max_affordable(f, Resource(value=balance), False) == expected

    @pytest.mark.parametrize(
        "build, balance, expected",
        [
            # x^3 / 3
            (lambda x: x.pow(2), 9, 3),
            # x^4 / 4
            (lambda x: x.pow(3), 4, 2),
            (lambda x: x.pow(3), 64, 4),
            (lambda x: x.pow(3), 63, 3),
            (lambda x: Formula.pow_base(3, x), 64, 4),
            # 4x^3 / 3
            (lambda x: x.mul(2).pow(2), 36, 3),
        ],
    )
    def test_with_spending(self, build, balance, expected):
        f = build(_level())
        assert calculate_max_affordable(f, Resource(value=balance)) == expected


if __name__ == "__main__":
    unittest.main()
