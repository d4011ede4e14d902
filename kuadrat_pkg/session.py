"""Solver session: validate, solve, record.

A session sits behind the input form: it takes the three raw
text fields, validates them, hands the coefficients to a backend (the
in-process engine or a worker process), keeps the current result and
pushes every successful result into its history.
"""

from __future__ import annotations

import threading
from typing import Callable

from . import config
from .history import HistoryCache
from .logging_config import get_logger
from .parser import parse_coefficients
from .solver import solve
from .types import Coefficients, SolutionSet, TransportError
from .worker import solve_in_worker

logger = get_logger("session")

Backend = Callable[[Coefficients], SolutionSet]

BACKENDS: dict[str, Backend] = {
    "local": solve,
    "worker": solve_in_worker,
}


class SolverSession:
    """One user's solving session with its own bounded history."""

    def __init__(
        self,
        mode: str | None = None,
        history_size: int | None = None,
        backend: Backend | None = None,
    ) -> None:
        if backend is None:
            mode = mode or config.SOLVER_MODE
            if mode not in BACKENDS:
                raise ValueError(
                    f"Unknown solver mode {mode!r} (expected one of {sorted(BACKENDS)})"
                )
            backend = BACKENDS[mode]
        self._backend = backend
        self._history = HistoryCache(history_size)
        self._current: SolutionSet | None = None
        self._solving = threading.Lock()

    @property
    def history(self) -> HistoryCache:
        return self._history

    @property
    def current(self) -> SolutionSet | None:
        return self._current

    @property
    def solving(self) -> bool:
        return self._solving.locked()

    def submit(
        self, a_text: str | None, b_text: str | None, c_text: str | None
    ) -> SolutionSet:
        """Validate the three fields, solve and record the result.

        Raises:
            ValidationError: invalid input; nothing is recorded
            TransportError: the backend failed, or another solve is in flight
        """
        coefficients = parse_coefficients(a_text, b_text, c_text)
        return self.solve(coefficients)

    def solve(self, coefficients: Coefficients) -> SolutionSet:
        """Solve already validated coefficients and record the result."""
        if not self._solving.acquire(blocking=False):
            raise TransportError(
                "A solve is already in progress", "BUSY", transient=True
            )
        try:
            result = self._backend(coefficients)
        finally:
            self._solving.release()
        self._current = result
        self._history.push(result)
        logger.info(f"Solved {result.equation} ({result.regime})")
        return result

    def reset(self) -> None:
        """Clear the displayed result; history is kept."""
        self._current = None
