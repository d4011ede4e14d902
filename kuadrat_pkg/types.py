"""Type definitions, result dataclasses and error types for consistent API responses."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

REGIME_DISTINCT_REAL = "distinct_real"
REGIME_REPEATED_REAL = "repeated_real"
REGIME_COMPLEX = "complex"

REGIMES = (REGIME_DISTINCT_REAL, REGIME_REPEATED_REAL, REGIME_COMPLEX)


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class DomainError(ValidationError):
    """Raised by the solver when the equation is not of degree 2."""

    def __init__(
        self, message: str = "Coefficient a cannot be zero", code: str = "LEADING_ZERO"
    ):
        super().__init__(message, code)


class TransportError(Exception):
    """Raised when the solver could not be reached or did not answer."""

    def __init__(
        self, message: str, code: str = "TRANSPORT_ERROR", transient: bool = False
    ):
        self.message = message
        self.code = code
        self.transient = transient
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Coefficients:
    """The (a, b, c) triple of ``a*x**2 + b*x + c = 0``."""

    a: float
    b: float
    c: float

    def __post_init__(self) -> None:
        for name in ("a", "b", "c"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValidationError(
                    f"Coefficient {name} must be a finite number", "NON_FINITE"
                )
        if self.a == 0:
            raise DomainError()

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.a, self.b, self.c)

    def to_dict(self) -> dict[str, float]:
        return {"a": self.a, "b": self.b, "c": self.c}


@dataclass(frozen=True)
class SolutionSet:
    """Result of solving one quadratic equation."""

    coefficients: Coefficients
    equation: str
    regime: str  # "distinct_real", "repeated_real", "complex"
    discriminant: float
    discriminant_text: str
    solutions: tuple[str, str]
    exact: tuple[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the response body of a successful solve."""
        return {
            "status": "success",
            "equation": self.equation,
            "type": self.regime,
            "discriminant": self.discriminant_text,
            "solutions": list(self.solutions),
            "exact": list(self.exact) if self.exact is not None else None,
        }

    def __repr__(self) -> str:
        return (
            f"SolutionSet(equation={self.equation!r}, regime={self.regime!r}, "
            f"discriminant={self.discriminant_text!r}, solutions={self.solutions!r})"
        )


@dataclass
class PlotResult:
    """Result of plotting a parabola."""

    ok: bool
    path: str | None = None
    text: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.path is not None:
            result_dict["path"] = self.path
        if self.text is not None:
            result_dict["text"] = self.text
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict
