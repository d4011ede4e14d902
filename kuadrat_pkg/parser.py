"""Input parsing and result formatting module.

This module handles:
- Coefficient text validation (empty, too long, non-numeric, non-finite)
- Plain decimal parsing with a SymPy fallback for simple expressions
  such as "1/2", "sqrt(2)" or "2^3"
- Number formatting with a fixed, byte-stable policy
- Equation and root rendering (superscripts, signs, imaginary unit)
"""

from __future__ import annotations

import math
import re
from typing import Any

import sympy as sp
from sympy import parse_expr
from sympy.parsing.sympy_parser import TokenError

from . import config
from .logging_config import get_logger
from .types import Coefficients, DomainError, ValidationError

logger = get_logger("parser")

_DECIMAL_COMMA_RE = re.compile(r"^[+-]?\d+,\d+$")

# Names the parse_expr transformations emit with evaluate=False
_SYMPY_GLOBALS = {
    "__builtins__": {},
    "Integer": sp.Integer,
    "Float": sp.Float,
    "Rational": sp.Rational,
    "Symbol": sp.Symbol,
    "Add": sp.Add,
    "Mul": sp.Mul,
    "Pow": sp.Pow,
}


def superscriptify(input_str: str) -> str:
    """Convert numeric string to Unicode superscript characters.

    Args:
        input_str: Input string with digits and '-' (e.g., "123", "-5")

    Returns:
        String with superscript Unicode characters (e.g., "¹²³", "⁻⁵")
    """
    mapping = {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "-": "⁻",
    }
    return "".join(mapping.get(char, char) for char in input_str)


def format_superscript(expr_str: str) -> str:
    """Replace Python power notation (**) with Unicode superscripts.

    Args:
        expr_str: Expression string (e.g., "x**2", "x**-3")

    Returns:
        String with superscripts (e.g., "x²", "x⁻³")
    """
    return re.sub(r"\*\*(\-?\d+)", lambda m: superscriptify(m.group(1)), expr_str)


def prettify_expr(expr_str: str) -> str:
    """Convert a SymPy expression string to a more readable format.

    Replaces 'sqrt(' with '√', '*' with '×' and the imaginary unit 'I' with 'i'.

    Args:
        expr_str: Expression string (e.g., "-1/2 + sqrt(3)*I/2")

    Returns:
        Prettified string (e.g., "-1/2 + √(3)×i/2")
    """
    result = format_superscript(expr_str)
    result = re.sub(r"sqrt\(([^)]+)\)", r"√(\1)", result)
    result = re.sub(r"\bI\b", "i", result)
    result = result.replace("*", "×")
    return result


def format_number(val: Any, decimals: int | None = None) -> str:
    """Format a numeric value with the fixed output policy.

    Integral values print without a fractional part, other values with
    ``decimals`` fixed digits, and magnitudes at or above
    SCIENTIFIC_THRESHOLD in scientific notation. Non-finite values print
    as "inf", "-inf" or "nan". Negative zero never keeps its sign.

    Args:
        val: Numeric value to format
        decimals: Digits after the decimal point (default: OUTPUT_DECIMALS)

    Returns:
        Formatted string representation of the number
    """
    if decimals is None:
        decimals = config.OUTPUT_DECIMALS
    value = float(val)
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if abs(value) >= config.SCIENTIFIC_THRESHOLD:
        return f"{value:.{decimals}e}"
    if value.is_integer():
        return str(int(value))
    text = f"{value:.{decimals}f}"
    if text.startswith("-") and float(text) == 0:
        text = text[1:]
    return text


def format_equation(coefficients: Coefficients, decimals: int | None = None) -> str:
    """Render ``a·x² + b·x + c = 0`` using the unrounded coefficient signs.

    The signs of b and c are folded into the operators, so (1, -3, 2)
    renders as "1x² - 3x + 2 = 0".
    """
    a, b, c = coefficients.as_tuple()

    def term(value: float) -> tuple[str, str]:
        sign = "-" if value < 0 else "+"
        return sign, format_number(abs(value), decimals)

    b_sign, b_text = term(b)
    c_sign, c_text = term(c)
    leading = format_number(a, decimals) + format_superscript("x**2")
    return f"{leading} {b_sign} {b_text}x {c_sign} {c_text} = 0"


def format_complex(real: float, imag: float, decimals: int | None = None) -> str:
    """Render a complex root as ``p + qi`` or ``p - qi``.

    The sign bit of ``imag`` decides the operator, so -0.0 renders as "- 0i".
    """
    sign = "-" if math.copysign(1.0, imag) < 0 else "+"
    return f"{format_number(real, decimals)} {sign} {format_number(abs(imag), decimals)}i"


def _validate_expression_tree(expr: Any, name: str, depth: int = 0) -> None:
    """Validate an unevaluated coefficient expression before evaluating it.

    Only numbers, the whitelisted constants and +, *, ** are allowed.
    Exponents must evaluate to a magnitude of at most MAX_EXPONENT.
    """
    if depth > config.MAX_EXPRESSION_DEPTH:
        raise ValidationError(
            f"Coefficient {name} is too deeply nested", "INVALID_NUMBER"
        )
    if isinstance(expr, (sp.Number, sp.NumberSymbol)):
        return
    if isinstance(expr, (sp.Add, sp.Mul)):
        for arg in expr.args:
            _validate_expression_tree(arg, name, depth + 1)
        return
    if isinstance(expr, sp.Pow):
        base, exponent = expr.args
        _validate_expression_tree(base, name, depth + 1)
        _validate_expression_tree(exponent, name, depth + 1)
        exponent_value = sp.N(exponent)
        if not exponent_value.is_real or abs(exponent_value) > config.MAX_EXPONENT:
            raise ValidationError(
                f"Coefficient {name} has an exponent out of range", "INVALID_NUMBER"
            )
        return
    raise ValidationError(
        f"Coefficient {name} is not a valid number", "INVALID_NUMBER"
    )


def _parse_with_sympy(text: str, name: str) -> float:
    """Evaluate a coefficient written as a small expression (e.g., "1/2").

    Only the names in ALLOWED_SYMPY_NAMES resolve; unknown names become
    free symbols or fail to resolve, and both are rejected.
    """
    try:
        expr = parse_expr(
            text,
            local_dict=dict(config.ALLOWED_SYMPY_NAMES),
            global_dict=dict(_SYMPY_GLOBALS),
            transformations=config.TRANSFORMATIONS,
            evaluate=False,
        )
    except (
        SyntaxError,
        TokenError,
        NameError,
        TypeError,
        ValueError,
        AttributeError,
        ZeroDivisionError,
    ) as e:
        logger.debug(f"Coefficient {name} rejected by parser: {text!r} ({e})")
        raise ValidationError(
            f"Coefficient {name} is not a valid number: {text!r}", "INVALID_NUMBER"
        ) from e

    if not isinstance(expr, sp.Expr) or expr.free_symbols:
        raise ValidationError(
            f"Coefficient {name} is not a valid number: {text!r}", "INVALID_NUMBER"
        )
    _validate_expression_tree(expr, name)

    try:
        value = sp.N(expr)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ValidationError(
            f"Coefficient {name} is not a valid number: {text!r}", "INVALID_NUMBER"
        ) from e
    if value.has(sp.zoo, sp.nan, sp.oo, sp.S.NegativeInfinity):
        raise ValidationError(
            f"Coefficient {name} must be a finite number: {text!r}", "NON_FINITE"
        )
    if not value.is_real:
        raise ValidationError(
            f"Coefficient {name} must be a real number: {text!r}", "INVALID_NUMBER"
        )
    return float(value)


def coerce_number(value: float, name: str) -> float:
    """Convert an int or float coefficient to float.

    Integers beyond the float range are rejected like infinities.
    """
    try:
        return float(value)
    except OverflowError as e:
        raise ValidationError(
            f"Coefficient {name} must be a finite number: out of range", "NON_FINITE"
        ) from e


def parse_coefficient(text: str | None, name: str) -> float:
    """Parse one coefficient field into a finite float.

    Args:
        text: Raw text typed by the user
        name: Field name used in error messages ("a", "b" or "c")

    Returns:
        The parsed value

    Raises:
        ValidationError: EMPTY_INPUT, TOO_LONG, INVALID_NUMBER or NON_FINITE
    """
    if text is None or not str(text).strip():
        raise ValidationError(
            f"Please enter a value for coefficient {name}", "EMPTY_INPUT"
        )
    raw = str(text).strip()
    if len(raw) > config.MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Coefficient {name} is too long (max {config.MAX_INPUT_LENGTH} characters)",
            "TOO_LONG",
        )
    if "_" in raw:
        # float() and the tokenizer both read "1_000" as 1000
        raise ValidationError(
            f"Coefficient {name} is not a valid number: {raw!r}", "INVALID_NUMBER"
        )
    if _DECIMAL_COMMA_RE.match(raw):
        raw = raw.replace(",", ".")

    try:
        value = float(raw)
    except ValueError:
        value = _parse_with_sympy(raw, name)

    if not math.isfinite(value):
        raise ValidationError(
            f"Coefficient {name} must be a finite number: {raw!r}", "NON_FINITE"
        )
    return value


def parse_coefficients(
    a_text: str | None, b_text: str | None, c_text: str | None
) -> Coefficients:
    """Validate three raw text fields and build a Coefficients value.

    Raises:
        ValidationError: for any unparsable field, or LEADING_ZERO when a == 0
    """
    a = parse_coefficient(a_text, "a")
    b = parse_coefficient(b_text, "b")
    c = parse_coefficient(c_text, "c")
    if a == 0:
        raise DomainError()
    return Coefficients(a, b, c)
