"""Unit tests for solver module."""

import itertools
import unittest

import pytest

from kuadrat_pkg import config
from kuadrat_pkg.solver import (
    classify,
    compute_discriminant,
    exact_roots,
    real_roots,
    solve,
    solve_quadratic,
)
from kuadrat_pkg.types import (
    REGIME_COMPLEX,
    REGIME_DISTINCT_REAL,
    REGIME_REPEATED_REAL,
    REGIMES,
    Coefficients,
    DomainError,
    SolutionSet,
    ValidationError,
)


def _split_complex(root: str) -> tuple[str, str, str]:
    """Split "p + qi" into (p, sign, q)."""
    for sign in (" + ", " - "):
        if sign in root:
            real, imag = root.split(sign)
            return real, sign.strip(), imag.rstrip("i")
    raise AssertionError(f"Not a complex root: {root!r}")


class TestRegimes(unittest.TestCase):
    """Test the three solution regimes."""

    def test_distinct_real_roots(self):
        result = solve_quadratic(1, -3, 2)
        self.assertIsInstance(result, SolutionSet)
        self.assertEqual(result.regime, REGIME_DISTINCT_REAL)
        # "+" branch first
        self.assertEqual(result.solutions, ("2", "1"))
        self.assertEqual(result.discriminant, 1.0)
        self.assertEqual(result.discriminant_text, "1")

    def test_repeated_root(self):
        result = solve_quadratic(1, 2, 1)
        self.assertEqual(result.regime, REGIME_REPEATED_REAL)
        self.assertEqual(result.solutions, ("-1", "-1"))
        self.assertEqual(result.discriminant_text, "0")

    def test_complex_roots(self):
        result = solve_quadratic(1, 0, 1)
        self.assertEqual(result.regime, REGIME_COMPLEX)
        self.assertEqual(result.solutions, ("0 + 1i", "0 - 1i"))
        self.assertEqual(result.discriminant_text, "-4")

    def test_complex_roots_fractional(self):
        result = solve_quadratic(1, 1, 1)
        self.assertEqual(result.regime, REGIME_COMPLEX)
        self.assertEqual(result.solutions, ("-0.50 + 0.87i", "-0.50 - 0.87i"))

    def test_complex_roots_negative_leading_coefficient(self):
        # q = sqrt(-D) / (2a) is negative here; "+" still comes first
        result = solve_quadratic(-1, 0, -1)
        self.assertEqual(result.regime, REGIME_COMPLEX)
        self.assertEqual(result.solutions, ("0 + 1i", "0 - 1i"))
        self.assertEqual(result.exact, ("i", "-i"))

    def test_exact_order_negative_leading_coefficient(self):
        self.assertEqual(exact_roots(Coefficients(-1, 0, -1)), ("i", "-i"))
        # Real roots keep the raw "+" branch first, as the numeric path does
        self.assertEqual(exact_roots(Coefficients(-1, 0, 4)), ("-2", "2"))
        self.assertEqual(solve_quadratic(-1, 0, 4).solutions, ("-2", "2"))

    def test_zero_b_and_c_gives_repeated_zero(self):
        for a in (1, 2, -3, 0.5):
            result = solve_quadratic(a, 0, 0)
            self.assertEqual(result.regime, REGIME_REPEATED_REAL)
            self.assertEqual(result.solutions, ("0", "0"))

    def test_irrational_roots_rounded(self):
        result = solve_quadratic(1, 0, -2)
        self.assertEqual(result.regime, REGIME_DISTINCT_REAL)
        self.assertEqual(result.solutions, ("1.41", "-1.41"))


class TestDomain(unittest.TestCase):
    """Test the degree-2 requirement."""

    def test_zero_leading_coefficient(self):
        with self.assertRaises(DomainError) as ctx:
            solve_quadratic(0, 2, 3)
        self.assertEqual(ctx.exception.code, "LEADING_ZERO")

    def test_domain_error_is_validation_error(self):
        with self.assertRaises(ValidationError):
            solve_quadratic(0, 0, 0)
        with self.assertRaises(ValidationError):
            solve_quadratic(-0.0, 1, 1)

    def test_integer_beyond_float_range(self):
        for args in ((10**400, 1, 1), (1, -(10**400), 1)):
            with self.assertRaises(ValidationError) as ctx:
                solve_quadratic(*args)
            self.assertEqual(ctx.exception.code, "NON_FINITE")

    def test_non_finite_coefficient(self):
        with self.assertRaises(ValidationError) as ctx:
            solve_quadratic(1, float("nan"), 1)
        self.assertEqual(ctx.exception.code, "NON_FINITE")


class TestDiscriminant(unittest.TestCase):
    """Test discriminant computation and classification."""

    def test_compute(self):
        self.assertEqual(compute_discriminant(1, -3, 2), 1.0)
        self.assertEqual(compute_discriminant(1, 0, 1), -4.0)

    def test_classify_signs(self):
        self.assertEqual(classify(5.0), REGIME_DISTINCT_REAL)
        self.assertEqual(classify(0.0), REGIME_REPEATED_REAL)
        self.assertEqual(classify(-1e-300), REGIME_COMPLEX)

    def test_negative_zero_is_zero(self):
        self.assertEqual(classify(-0.0), REGIME_REPEATED_REAL)

    def test_nan_is_distinct_real(self):
        self.assertEqual(classify(float("nan")), REGIME_DISTINCT_REAL)


class TestOverflow(unittest.TestCase):
    """Overflow surfaces in the rendered strings instead of raising."""

    def test_infinite_roots(self):
        result = solve_quadratic(1e-300, 1e200, 1)
        self.assertEqual(result.regime, REGIME_DISTINCT_REAL)
        self.assertEqual(result.discriminant_text, "inf")
        self.assertEqual(result.solutions, ("inf", "-inf"))

    def test_nan_discriminant(self):
        result = solve_quadratic(1e200, 1e200, 1e200)
        self.assertEqual(result.regime, REGIME_DISTINCT_REAL)
        self.assertEqual(result.discriminant_text, "nan")
        self.assertEqual(result.solutions, ("nan", "nan"))
        self.assertEqual(result.equation, "1.00e+200x² + 1.00e+200x + 1.00e+200 = 0")


class TestRendering(unittest.TestCase):
    """Test equation rendering."""

    def test_equation_signs(self):
        self.assertEqual(solve_quadratic(1, -3, 2).equation, "1x² - 3x + 2 = 0")
        self.assertEqual(solve_quadratic(-2, 3, -4).equation, "-2x² + 3x - 4 = 0")

    def test_equation_fractional(self):
        self.assertEqual(solve_quadratic(2.5, 0, -1).equation, "2.50x² + 0x - 1 = 0")

    def test_rendering_is_stable(self):
        first = solve_quadratic(0.3, -1.7, 0.2)
        second = solve_quadratic(0.3, -1.7, 0.2)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_to_dict(self):
        body = solve_quadratic(1, -3, 2).to_dict()
        self.assertEqual(body["status"], "success")
        self.assertEqual(body["type"], "distinct_real")
        self.assertEqual(body["discriminant"], "1")
        self.assertEqual(body["solutions"], ["2", "1"])
        self.assertEqual(body["equation"], "1x² - 3x + 2 = 0")


class TestExactRoots(unittest.TestCase):
    """Test the SymPy rendering of exact roots."""

    def test_rational_roots(self):
        self.assertEqual(exact_roots(Coefficients(1, -3, 2)), ("2", "1"))

    def test_irrational_roots(self):
        self.assertEqual(exact_roots(Coefficients(1, 0, -2)), ("√(2)", "-√(2)"))

    def test_imaginary_roots(self):
        self.assertEqual(exact_roots(Coefficients(1, 0, 1)), ("i", "-i"))

    def test_disabled(self):
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr(config, "EXACT_ROOTS_ENABLED", False)
            self.assertIsNone(solve_quadratic(1, 0, -2).exact)


def test_real_roots():
    assert real_roots(Coefficients(1, -3, 2)) == (2.0, 1.0)
    assert real_roots(Coefficients(1, 2, 1)) == (-1.0,)
    assert real_roots(Coefficients(1, 0, 1)) == ()


def test_solve_accepts_coefficients():
    result = solve(Coefficients(1.0, -3.0, 2.0))
    assert result.coefficients == Coefficients(1.0, -3.0, 2.0)
    assert result.solutions == ("2", "1")


def test_invariants_over_small_integer_coefficients():
    """Regime follows the sign of D, two roots always, shapes per regime."""
    values = range(-3, 4)
    for a, b, c in itertools.product(values, values, values):
        if a == 0:
            continue
        result = solve_quadratic(a, b, c)
        d = b * b - 4 * a * c
        assert result.regime in REGIMES
        assert len(result.solutions) == 2
        if d > 0:
            assert result.regime == REGIME_DISTINCT_REAL
        elif d == 0:
            assert result.regime == REGIME_REPEATED_REAL
            assert result.solutions[0] == result.solutions[1]
        else:
            assert result.regime == REGIME_COMPLEX
            real1, sign1, imag1 = _split_complex(result.solutions[0])
            real2, sign2, imag2 = _split_complex(result.solutions[1])
            assert real1 == real2
            assert imag1 == imag2
            assert (sign1, sign2) == ("+", "-")
