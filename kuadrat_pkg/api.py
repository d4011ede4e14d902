"""Public API for Kuadrat - returns structured objects without side effects."""

from __future__ import annotations

from .parser import parse_coefficients
from .plotting import plot_parabola
from .solver import solve as _solve
from .solver import solve_quadratic
from .types import PlotResult, SolutionSet, ValidationError


def solve(a: float, b: float, c: float) -> SolutionSet:
    """Solve ``a*x**2 + b*x + c = 0`` for numeric coefficients.

    Args:
        a: Leading coefficient (non-zero)
        b: Linear coefficient
        c: Constant term

    Returns:
        SolutionSet with regime, discriminant and two rendered roots

    Raises:
        DomainError: if a == 0

    Example:
        >>> from kuadrat_pkg.api import solve
        >>> result = solve(1, -3, 2)
        >>> print(result.regime, result.solutions)
        distinct_real ('2', '1')
        >>> solve(1, 2, 1).solutions
        ('-1', '-1')
    """
    return solve_quadratic(a, b, c)


def solve_text(a_text: str, b_text: str, c_text: str) -> SolutionSet:
    """Validate raw text fields and solve.

    Args:
        a_text: Text for coefficient a (e.g., "1", "-3.5", "1/2")
        b_text: Text for coefficient b
        c_text: Text for coefficient c

    Returns:
        SolutionSet

    Raises:
        ValidationError: for empty, unparsable or non-finite input, or a == 0

    Example:
        >>> from kuadrat_pkg.api import solve_text
        >>> solve_text("1", "0", "1").solutions
        ('0 + 1i', '0 - 1i')
    """
    return _solve(parse_coefficients(a_text, b_text, c_text))


def validate_coefficients(
    a_text: str, b_text: str, c_text: str
) -> tuple[bool, str | None]:
    """Validate raw coefficient text without solving.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from kuadrat_pkg.api import validate_coefficients
        >>> validate_coefficients("1", "2", "3")
        (True, None)
        >>> validate_coefficients("0", "2", "3")
        (False, 'Coefficient a cannot be zero')
    """
    try:
        parse_coefficients(a_text, b_text, c_text)
        return True, None
    except ValidationError as e:
        return False, e.message


def plot(
    result: SolutionSet, output_file: str | None = None, ascii: bool = False
) -> PlotResult:
    """Plot the parabola of a solved equation.

    Args:
        result: A SolutionSet returned by solve() or solve_text()
        output_file: PNG path (required unless ascii=True)
        ascii: Return an ASCII sketch instead of writing an image

    Returns:
        PlotResult with the written path or the ASCII text
    """
    return plot_parabola(result, output_file=output_file, ascii=ascii)
