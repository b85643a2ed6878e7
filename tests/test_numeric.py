"""Unit tests for the mpmath numeric substrate."""

import unittest
from decimal import Decimal
from fractions import Fraction

import mpmath

from formula_pkg import numeric as N


def close(a, b, eps=1e-12):
    return mpmath.almosteq(N.D(a), N.D(b), rel_eps=eps, abs_eps=eps)


class TestConversion(unittest.TestCase):
    """Test conversion of plain values."""

    def test_plain_values(self):
        self.assertEqual(N.D(3), 3)
        self.assertEqual(N.D("2.5"), mpmath.mpf("2.5"))
        self.assertEqual(N.D(Fraction(1, 4)), mpmath.mpf("0.25"))
        self.assertEqual(N.D(Decimal("1.5")), mpmath.mpf("1.5"))
        self.assertEqual(N.D(True), 1)

    def test_to_string(self):
        self.assertEqual(N.to_string(16), "16.0")
        self.assertEqual(N.to_string(mpmath.mpf(1) / 3, 5), "0.33333")


class TestArithmetic(unittest.TestCase):
    """Test arithmetic edge cases."""

    def test_division_by_zero(self):
        self.assertEqual(N.div(1, 0), mpmath.inf)
        self.assertTrue(N.is_inf(N.div(1, 0)))
        self.assertEqual(N.div(-1, 0), -mpmath.inf)
        self.assertTrue(N.is_nan(N.div(0, 0)))

    def test_rounding(self):
        self.assertEqual(N.rounded(2.5), 3)
        self.assertEqual(N.rounded(-2.5), -2)
        self.assertEqual(N.trunc(-2.7), -2)
        self.assertEqual(N.trunc(2.7), 2)
        self.assertEqual(N.sign(-4), -1)

    def test_powers_and_roots(self):
        self.assertTrue(N.is_nan(N.power(-8, 0.5)))
        self.assertEqual(N.power(0, -1), mpmath.inf)
        self.assertTrue(close(N.root(-8, 3), -2))
        self.assertTrue(close(N.sqrt(16), 4))
        self.assertTrue(close(N.pow_base(3, 2), 8))
        self.assertTrue(close(N.pow10(3), 1000))

    def test_logs(self):
        self.assertTrue(close(N.log(8, 2), 3))
        self.assertTrue(N.is_nan(N.ln(-1)))
        self.assertEqual(N.plog10(-5), 0)
        self.assertTrue(N.is_nan(N.abslog10(0)))
        self.assertTrue(close(N.abslog10(-100), 2))

    def test_out_of_domain_is_nan(self):
        self.assertTrue(N.is_nan(N.asin(2)))
        self.assertTrue(N.is_nan(N.acosh(0)))
        self.assertTrue(N.is_nan(N.gamma(0)))
        self.assertTrue(N.is_nan(N.gamma(-3)))


class TestSpecialFunctions(unittest.TestCase):
    """Test gamma family, Lambert W and super root."""

    def test_factorial(self):
        self.assertTrue(close(N.factorial(5), 120))
        self.assertTrue(close(N.lngamma(5), mpmath.log(24)))

    def test_lambertw(self):
        w = N.lambertw(1)
        self.assertTrue(close(w * mpmath.exp(w), 1))
        self.assertTrue(N.is_nan(N.lambertw(-1)))

    def test_exact_integer_roots(self):
        self.assertEqual(N.root(1000, 3), 10)
        self.assertEqual(N.root(81, 4), 3)
        self.assertEqual(N.root(243, 5), 3)
        self.assertEqual(N.root(-27, 3), -3)
        self.assertEqual(N.floor(N.cbrt(1000)), 10)
        self.assertTrue(close(N.root(8, 1.5), 4))

    def test_ssqrt(self):
        self.assertTrue(close(N.ssqrt(27), 3))
        self.assertTrue(close(N.ssqrt(4), 2))
        self.assertEqual(N.ssqrt(1), 1)


class TestHyperOperations(unittest.TestCase):
    """Test tetration and its relatives."""

    def test_integer_tetration(self):
        self.assertTrue(close(N.tetrate(2, 3), 16))
        self.assertTrue(close(N.tetrate(3, 2), 27))
        self.assertTrue(close(N.tetrate(2, 2, 3), 256))
        self.assertEqual(N.tetrate(5, 0, 7), 7)

    def test_tetration_overflows_to_inf(self):
        self.assertEqual(N.tetrate(10, 10), mpmath.inf)

    def test_slog_inverts_tetration(self):
        for height in (0.5, 1.5, 2.25):
            self.assertTrue(close(N.slog(N.tetrate(10, height)), height, 1e-9))

    def test_iteratedlog(self):
        self.assertTrue(close(N.iteratedlog(mpmath.mpf(10) ** 10, 10, 2), 1))
        self.assertTrue(close(N.iteratedlog(100, 10, -1), mpmath.mpf(10) ** 100))

    def test_layeradd(self):
        self.assertTrue(close(N.layeradd10(1, 2), mpmath.mpf(10) ** 10))
        self.assertTrue(close(N.layeradd10(100, -1), 2))
        self.assertTrue(close(N.layeradd(3, 1, 2), 8))

    def test_pentate(self):
        # 2 pentated to 2 is 2 tetrated to 2
        self.assertTrue(close(N.pentate(2, 2), 4))
        self.assertTrue(close(N.pentate(2, 3), 65536))


class TestComparisons(unittest.TestCase):
    """Test the min/max/clamp family."""

    def test_clamps(self):
        self.assertEqual(N.clamp(5, 0, 3), 3)
        self.assertEqual(N.clamp(-1, 0, 3), 0)
        self.assertEqual(N.clamp_min(1, 2), 2)
        self.assertEqual(N.clamp_max(1, 2), 1)

    def test_abs_variants(self):
        self.assertEqual(N.minabs(-2, 3), -2)
        self.assertEqual(N.maxabs(-5, 3), -5)
        self.assertEqual(N.minimum(4, 2), 2)
        self.assertEqual(N.maximum(4, 2), 4)


if __name__ == "__main__":
    unittest.main()
