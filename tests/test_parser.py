"""Unit tests for parsing formula text and converting to SymPy."""

import unittest

import mpmath
import sympy as sp

from formula_pkg.computable import Ref
from formula_pkg.formula import Formula
from formula_pkg.parser import parse_formula, to_sympy, validate_input
from formula_pkg.types import ValidationError


class TestParsing(unittest.TestCase):
    """Test text to formula conversion."""

    def test_square_of_increment(self):
        f = parse_formula("(x+1)^2")
        self.assertEqual(f.evaluate(3), 16)
        self.assertTrue(f.is_invertible())
        self.assertTrue(mpmath.almosteq(f.invert(16), 3))

    def test_implicit_multiplication(self):
        f = parse_formula("2x + 3")
        self.assertEqual(f.evaluate(2), 7)
        self.assertTrue(f.is_integral_invertible())

    def test_variable_cell(self):
        cell = Ref(5)
        f = parse_formula("x^2", cell)
        self.assertIs(f.innermost_variable, cell)
        self.assertEqual(f.evaluate(), 25)

    def test_subtraction_and_negation(self):
        self.assertEqual(parse_formula("x - 1").evaluate(4), 3)
        self.assertEqual(parse_formula("1 - x").evaluate(4), -3)
        self.assertEqual(parse_formula("-x").evaluate(4), -4)

    def test_division_and_reciprocal(self):
        self.assertEqual(parse_formula("1/x").evaluate(4), mpmath.mpf("0.25"))
        f = parse_formula("5/(x+1)")
        self.assertEqual(f.evaluate(4), 1)
        self.assertTrue(f.is_integral_invertible())

    def test_roots(self):
        f = parse_formula("sqrt(x)")
        self.assertEqual(f.operation.name, "root")
        self.assertTrue(mpmath.almosteq(f.evaluate(9), 3))
        self.assertTrue(mpmath.almosteq(parse_formula("cbrt(x)").evaluate(27), 3))

    def test_functions(self):
        self.assertTrue(mpmath.almosteq(parse_formula("exp(2*x)").evaluate(1), mpmath.e**2))
        self.assertTrue(mpmath.almosteq(parse_formula("log(x)").evaluate(mpmath.e), 1))
        self.assertTrue(mpmath.almosteq(parse_formula("sin(x)").evaluate(0), 0))
        self.assertEqual(parse_formula("floor(x)").evaluate(2.7), 2)
        self.assertEqual(parse_formula("abs(x)").evaluate(-3), 3)
        self.assertEqual(parse_formula("max(x, 5)").evaluate(3), 5)

    def test_named_values(self):
        rate = Ref(3)
        f = parse_formula("a*x", values={"a": rate})
        self.assertEqual(f.evaluate(2), 6)
        rate.value = 4
        self.assertEqual(f.evaluate(2), 8)

    def test_constants(self):
        self.assertTrue(mpmath.almosteq(parse_formula("pi*x").evaluate(1), mpmath.pi))
        self.assertEqual(parse_formula("7").evaluate(), 7)
        self.assertFalse(parse_formula("7").has_variable())

    def test_custom_symbol(self):
        f = parse_formula("level^2 + 1", symbol="level")
        self.assertEqual(f.evaluate(3), 10)


class TestValidation(unittest.TestCase):
    """Test rejected inputs and their codes."""

    def assert_code(self, text, code, **kwargs):
        with self.assertRaises(ValidationError) as ctx:
            parse_formula(text, **kwargs)
        self.assertEqual(ctx.exception.code, code)

    def test_empty(self):
        self.assert_code("   ", "EMPTY_INPUT")

    def test_too_long(self):
        self.assert_code("x+" * 600 + "1", "TOO_LONG")

    def test_forbidden_token(self):
        self.assert_code("__import__('os')", "FORBIDDEN_TOKEN")
        self.assert_code("eval(x)", "FORBIDDEN_TOKEN")

    def test_unknown_symbol(self):
        self.assert_code("y + 1", "UNKNOWN_SYMBOL")

    def test_parse_error(self):
        self.assert_code("x + * 2", "PARSE_ERROR")

    def test_unsupported(self):
        self.assert_code("zeta(x)", "UNSUPPORTED")

    def test_validate_input_strips(self):
        self.assertEqual(validate_input("  x+1 "), "x+1")


class TestToSympy(unittest.TestCase):
    """Test formula to SymPy conversion."""

    def test_round_trip(self):
        x = sp.Symbol("x")
        expr = to_sympy(parse_formula("(x+1)^2"))
        self.assertEqual(sp.simplify(expr - (x + 1) ** 2), 0)

    def test_chained_formula(self):
        x = sp.Symbol("x")
        f = Formula.variable(Ref(0)).mul(2).add(3).exp()
        self.assertEqual(sp.simplify(to_sympy(f) - sp.exp(2 * x + 3)), 0)

    def test_operations_without_sympy_counterpart(self):
        f = Formula.variable(Ref(0)).tetrate()
        expr = to_sympy(f)
        self.assertEqual(str(expr.func), "tetrate")

    def test_fractional_constant(self):
        f = Formula.variable(Ref(0)).mul(0.5)
        self.assertIn("0.5", str(to_sympy(f)))


if __name__ == "__main__":
    unittest.main()
