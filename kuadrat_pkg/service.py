"""Request/response boundary of the solver.

A request is a mapping with fields ``a``, ``b`` and ``c``; the response is
a plain dict ready for JSON:

    {"status": "success", "equation", "type", "discriminant", "solutions", "exact"}
    {"status": "error", "message", "code"}

The same boundary is used by the worker process and by any other
transport that forwards requests to the engine.
"""

from __future__ import annotations

from typing import Any

from .logging_config import get_logger
from .parser import coerce_number, parse_coefficient
from .solver import compute_discriminant, solve
from .types import (
    REGIMES,
    Coefficients,
    SolutionSet,
    TransportError,
    ValidationError,
)

logger = get_logger("service")


def _coerce_field(payload: dict[str, Any], name: str) -> float:
    value = payload.get(name)
    # bool is an int subclass but never a coefficient
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return coerce_number(value, name)
    if value is None or isinstance(value, str):
        return parse_coefficient(value, name)
    raise ValidationError(
        f"Coefficient {name} is not a valid number: {value!r}", "INVALID_NUMBER"
    )


def coefficients_from_payload(payload: Any) -> Coefficients:
    """Build Coefficients from a request body.

    Raises:
        ValidationError: for a malformed body or invalid coefficients
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", "INVALID_REQUEST")
    a = _coerce_field(payload, "a")
    b = _coerce_field(payload, "b")
    c = _coerce_field(payload, "c")
    return Coefficients(a, b, c)


def error_response(error: ValidationError) -> dict[str, Any]:
    return {"status": "error", "message": error.message, "code": error.code}


def dispatch_solve(payload: Any) -> dict[str, Any]:
    """Handle one solve request and return the response body.

    Validation failures are reported in the body, never raised.
    """
    try:
        coefficients = coefficients_from_payload(payload)
    except ValidationError as e:
        logger.info(f"Rejected request ({e.code}): {e.message}")
        return error_response(e)
    return solve(coefficients).to_dict()


def solution_from_response(data: Any, coefficients: Coefficients) -> SolutionSet:
    """Rebuild a SolutionSet from a success response body.

    Args:
        data: Decoded response body
        coefficients: The coefficients that were sent

    Raises:
        ValidationError: when the body reports a validation failure
        TransportError: when the body is not a well-formed response
    """
    if not isinstance(data, dict):
        raise TransportError("Malformed solver response", "INVALID_OUTPUT")
    if data.get("status") == "error":
        raise ValidationError(
            data.get("message") or "Invalid input", data.get("code") or "VALIDATION_ERROR"
        )
    try:
        solutions = tuple(str(s) for s in data["solutions"])
        regime = data["type"]
        discriminant_text = str(data["discriminant"])
        exact = data.get("exact")
        result = SolutionSet(
            coefficients=coefficients,
            equation=str(data["equation"]),
            regime=regime,
            discriminant=compute_discriminant(*coefficients.as_tuple()),
            discriminant_text=discriminant_text,
            solutions=solutions,
            exact=tuple(str(s) for s in exact) if exact is not None else None,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TransportError(f"Malformed solver response: {e}", "INVALID_OUTPUT") from e
    if data.get("status") != "success" or regime not in REGIMES or len(solutions) != 2:
        raise TransportError("Malformed solver response", "INVALID_OUTPUT")
    return result
