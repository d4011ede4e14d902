"""Core quadratic equation solving module.

This module provides:
- Discriminant computation and regime classification
- Root computation with IEEE-754 double semantics
- Rendering of the equation, discriminant and roots
- An exact (SymPy) rendering of the roots as supplementary output

The numeric path is authoritative. Overflow and underflow are not
guarded: infinities and NaN surface in the rendered strings instead of
raising. The failures are a zero leading coefficient and integers too
large to convert to float.
"""

from __future__ import annotations

import math

import sympy as sp

from . import config
from .logging_config import get_logger
from .parser import (
    coerce_number,
    format_complex,
    format_equation,
    format_number,
    prettify_expr,
)
from .types import (
    REGIME_COMPLEX,
    REGIME_DISTINCT_REAL,
    REGIME_REPEATED_REAL,
    Coefficients,
    DomainError,
    SolutionSet,
)

logger = get_logger("solver")


def compute_discriminant(a: float, b: float, c: float) -> float:
    """Return ``b**2 - 4*a*c`` in float arithmetic."""
    return b * b - 4.0 * a * c


def classify(discriminant: float) -> str:
    """Map the sign of the discriminant to a regime label.

    ``-0.0`` compares equal to zero and lands in the repeated-root regime.
    A NaN discriminant (only reachable through overflow) is neither
    negative nor zero and is reported as two distinct real roots.
    """
    if discriminant < 0:
        return REGIME_COMPLEX
    if discriminant == 0:
        return REGIME_REPEATED_REAL
    return REGIME_DISTINCT_REAL


def _real_roots(a: float, b: float, discriminant: float) -> tuple[float, float]:
    root = math.sqrt(discriminant)
    return (-b + root) / (2 * a), (-b - root) / (2 * a)


def real_roots(coefficients: Coefficients) -> tuple[float, ...]:
    """Return the real roots as floats (two, one or none), ``+`` branch first."""
    a, b, c = coefficients.as_tuple()
    discriminant = compute_discriminant(a, b, c)
    regime = classify(discriminant)
    if regime == REGIME_DISTINCT_REAL:
        return _real_roots(a, b, discriminant)
    if regime == REGIME_REPEATED_REAL:
        return (-b / (2 * a),)
    return ()


def _to_rational(value: float) -> sp.Rational:
    return sp.Rational(repr(value))


def exact_roots(coefficients: Coefficients) -> tuple[str, str] | None:
    """Render both roots in exact form using SymPy.

    The float coefficients are read back through their shortest decimal
    representation, so 0.1 becomes 1/10 rather than its binary expansion.
    Root order matches the numeric path: ``+`` branch first for real
    roots, positive imaginary part first for complex ones.

    Returns:
        Two prettified strings, or None when the exact form is unavailable
    """
    try:
        a, b, c = (_to_rational(value) for value in coefficients.as_tuple())
        disc = b**2 - 4 * a * c
        root = sp.sqrt(disc)
        if disc < 0 and a < 0:
            # Keep the positive imaginary part on the first root
            root = -root
        first = (-b + root) / (2 * a)
        second = (-b - root) / (2 * a)
        return prettify_expr(str(first)), prettify_expr(str(second))
    except (TypeError, ValueError, ArithmeticError) as e:
        logger.debug(f"Exact form unavailable for {coefficients}: {e}")
        return None


def solve_quadratic(a: float, b: float, c: float) -> SolutionSet:
    """Solve ``a*x**2 + b*x + c = 0``.

    Args:
        a: Leading coefficient, must be non-zero
        b: Linear coefficient
        c: Constant term

    Returns:
        SolutionSet with the regime, discriminant and two rendered roots

    Raises:
        DomainError: if a == 0
        ValidationError: NON_FINITE for values outside the float range

    Example:
        >>> solve_quadratic(1, -3, 2).solutions
        ('2', '1')
        >>> solve_quadratic(1, 0, 1).solutions
        ('0 + 1i', '0 - 1i')
    """
    if a == 0:
        raise DomainError()
    return solve(
        Coefficients(coerce_number(a, "a"), coerce_number(b, "b"), coerce_number(c, "c"))
    )


def solve(coefficients: Coefficients) -> SolutionSet:
    """Solve an already validated coefficient triple."""
    a, b, c = coefficients.as_tuple()
    discriminant = compute_discriminant(a, b, c)
    regime = classify(discriminant)

    if regime == REGIME_DISTINCT_REAL:
        x1, x2 = _real_roots(a, b, discriminant)
        solutions = (format_number(x1), format_number(x2))
    elif regime == REGIME_REPEATED_REAL:
        root = format_number(-b / (2 * a))
        solutions = (root, root)
    else:
        real = -b / (2 * a)
        imag = math.sqrt(-discriminant) / (2 * a)
        # For a < 0, imag is negative; the first root always takes "+"
        solutions = (
            format_complex(real, abs(imag)),
            format_complex(real, -abs(imag)),
        )

    exact = exact_roots(coefficients) if config.EXACT_ROOTS_ENABLED else None
    result = SolutionSet(
        coefficients=coefficients,
        equation=format_equation(coefficients),
        regime=regime,
        discriminant=discriminant,
        discriminant_text=format_number(discriminant),
        solutions=solutions,
        exact=exact,
    )
    logger.debug(f"Solved {result.equation}: {result.regime} {result.solutions}")
    return result
