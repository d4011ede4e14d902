"""Kuadrat package: quadratic equation solver, history cache, worker transport and CLI."""

__all__ = [
    "config",
    "parser",
    "solver",
    "history",
    "service",
    "worker",
    "session",
    "plotting",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "solve",
    "solve_text",
    "validate_coefficients",
    "plot",
]
