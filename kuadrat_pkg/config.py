"""Centralized configuration for Kuadrat.

This module defines:
- Output formatting precision
- History cache capacity
- Input validation limits
- Worker transport timeouts and retries
- Logging level (passed on to worker processes)
- Allowed SymPy names and transformations for coefficient expressions

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with KUADRAT_)
"""

import os

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, standard_transformations

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("kuadrat")
except importlib.metadata.PackageNotFoundError:
    # Running from a source checkout
    VERSION = "1.0.0"

# Output formatting
OUTPUT_DECIMALS = int(os.getenv("KUADRAT_OUTPUT_DECIMALS", "2"))
SCIENTIFIC_THRESHOLD = float(
    os.getenv("KUADRAT_SCIENTIFIC_THRESHOLD", "1e15")
)  # magnitudes at or above this render in scientific notation

# History cache
HISTORY_SIZE = int(os.getenv("KUADRAT_HISTORY_SIZE", "5"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("KUADRAT_MAX_INPUT_LENGTH", "64"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("KUADRAT_MAX_EXPRESSION_DEPTH", "20")
)  # tree depth of a coefficient expression
MAX_EXPONENT = int(os.getenv("KUADRAT_MAX_EXPONENT", "1000"))

# Worker transport
WORKER_TIMEOUT = int(os.getenv("KUADRAT_WORKER_TIMEOUT", "10"))  # seconds
WORKER_RETRIES = int(os.getenv("KUADRAT_WORKER_RETRIES", "2"))
SOLVER_MODE = os.getenv("KUADRAT_SOLVER_MODE", "local")  # "local", "worker"

# Logging
LOG_LEVEL = os.getenv("KUADRAT_LOG_LEVEL", "WARNING").upper()

# Exact (symbolic) rendering of roots alongside the numeric ones
EXACT_ROOTS_ENABLED = (
    os.getenv("KUADRAT_EXACT_ROOTS_ENABLED", "true").lower() == "true"
)

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "E": sp.E,
    "sqrt": sp.sqrt,
}

TRANSFORMATIONS = standard_transformations + (convert_xor,)
