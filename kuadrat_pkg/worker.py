"""Run the solver in a child Python process.

The child is started as ``python -m kuadrat_pkg.cli --worker-solve
--payload <json>`` and prints one JSON response body on stdout (see
service.py). Failures to start, finish or answer are reported as
TransportError; a validation failure reported by the child is raised as
ValidationError.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
import time
from typing import Any, Callable

from . import config
from .logging_config import current_level_name, get_logger, relay_worker_log
from .service import dispatch_solve, solution_from_response
from .types import Coefficients, SolutionSet, TransportError

logger = get_logger("worker")


def _build_self_cmd(args: list[str]) -> list[str]:
    if getattr(sys, "frozen", False):
        return [os.path.realpath(sys.argv[0])] + args
    return [sys.executable, "-m", "kuadrat_pkg.cli"] + args


def _retry_with_backoff(
    func: Callable[[], Any],
    max_retries: int = 2,
    initial_delay: float = 0.1,
    max_delay: float = 2.0,
) -> Any:
    """Retry a function with exponential backoff.

    Only TransportError with a transient code is retried; anything else
    propagates on the first failure.

    Args:
        func: Callable that returns a result or raises an exception
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay cap in seconds

    Returns:
        Result from func() if successful

    Raises:
        Last exception if all retries fail
    """
    delay = initial_delay
    for attempt in range(max_retries + 1):
        try:
            return func()
        except TransportError as e:
            if not e.transient or attempt >= max_retries:
                raise
            logger.debug(
                f"Retry attempt {attempt + 1}/{max_retries} after {delay:.2f}s ({e.code})"
            )
            time.sleep(delay)
            delay = min(delay * 2, max_delay)


def worker_solve_main(payload_json: str | None) -> dict[str, Any]:
    """Entry point inside the child: decode the payload and dispatch it."""
    try:
        payload = json.loads(payload_json or "{}")
    except (json.JSONDecodeError, ValueError, TypeError):
        return {
            "status": "error",
            "message": "Request body is not valid JSON",
            "code": "INVALID_REQUEST",
        }
    return dispatch_solve(payload)


def _worker_env() -> dict[str, str]:
    """Environment for the child: importable package, formatting and log level."""
    env = dict(os.environ)
    package_root = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (package_root, env.get("PYTHONPATH")) if p
    )
    env["KUADRAT_OUTPUT_DECIMALS"] = str(config.OUTPUT_DECIMALS)
    env["KUADRAT_EXACT_ROOTS_ENABLED"] = str(config.EXACT_ROOTS_ENABLED).lower()
    env["KUADRAT_LOG_LEVEL"] = current_level_name()
    env["PYTHONIOENCODING"] = "utf-8"
    return env


def _run_worker(payload_json: str, timeout: float) -> str:
    cmd = _build_self_cmd(["--worker-solve", "--payload", payload_json])
    try:
        proc = subprocess.run(
            cmd, capture_output=True, timeout=timeout, env=_worker_env()
        )
    except subprocess.TimeoutExpired as e:
        raise TransportError(
            f"Solver did not answer within {timeout} seconds", "TIMEOUT", transient=True
        ) from e
    except OSError as e:
        logger.error(f"Worker communication error: {e}", exc_info=True)
        raise TransportError(
            "Could not start the solver process", "COMM_ERROR", transient=True
        ) from e
    stderr = proc.stderr.decode("utf-8", errors="replace")
    relay_worker_log(stderr)
    if proc.returncode != 0:
        logger.warning(f"Worker exited with code {proc.returncode}")
        raise TransportError(
            f"Solver process failed (exit code {proc.returncode})", "INVALID_OUTPUT"
        )
    return proc.stdout.decode("utf-8", errors="replace")


def solve_in_worker(
    coefficients: Coefficients, timeout: float | None = None
) -> SolutionSet:
    """Solve ``coefficients`` in a child process.

    Args:
        coefficients: Validated coefficients
        timeout: Seconds to wait for the child (default: WORKER_TIMEOUT)

    Returns:
        The SolutionSet decoded from the child's response

    Raises:
        TransportError: TIMEOUT, COMM_ERROR or INVALID_OUTPUT
        ValidationError: when the child rejects the request
    """
    if timeout is None:
        timeout = config.WORKER_TIMEOUT
    payload_json = json.dumps(coefficients.to_dict())
    stdout_text = _retry_with_backoff(
        lambda: _run_worker(payload_json, timeout), max_retries=config.WORKER_RETRIES
    )
    try:
        data = json.loads(stdout_text)
    except (json.JSONDecodeError, ValueError) as e:
        raise TransportError(f"Invalid worker output: {e}", "INVALID_OUTPUT") from e
    return solution_from_response(data, coefficients)
