"""Command line interface and interactive REPL for Kuadrat."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from . import config
from .logging_config import ROLE_MAIN, ROLE_WORKER, get_logger, setup_logging
from .session import BACKENDS, SolverSession
from .types import TransportError, ValidationError

logger = get_logger("cli")

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 1
EXIT_TRANSPORT_ERROR = 2

REGIME_LABELS = {
    "distinct_real": "two distinct real roots",
    "repeated_real": "one repeated real root",
    "complex": "two complex conjugate roots",
}


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running Kuadrat health check...")
    print("-" * 50)

    import sympy as sp

    print(f"[OK] SymPy {sp.__version__} imported successfully")
    checks_passed += 1

    try:
        from .parser import parse_coefficient

        value = parse_coefficient("1/2", "a")
        if value == 0.5:
            print("[OK] Coefficient parsing works")
            checks_passed += 1
        else:
            print(f"[FAIL] Coefficient parsing failed: expected 0.5, got {value}")
            checks_failed += 1
    except ValidationError as e:
        print(f"[FAIL] Coefficient parsing failed: {e}")
        checks_failed += 1

    from .solver import solve_quadratic

    result = solve_quadratic(1, -3, 2)
    if result.solutions == ("2", "1"):
        print("[OK] Basic solving works")
        checks_passed += 1
    else:
        print(f"[FAIL] Solving check failed: {result}")
        checks_failed += 1

    try:
        from .worker import solve_in_worker

        result = solve_in_worker(result.coefficients)
        if result.solutions == ("2", "1"):
            print("[OK] Worker solving works")
            checks_passed += 1
        else:
            print(f"[FAIL] Worker check failed: {result}")
            checks_failed += 1
    except (TransportError, ValidationError) as e:
        print(f"[FAIL] Worker check failed: {e}")
        checks_failed += 1

    import matplotlib
    import numpy

    print(f"[OK] NumPy {numpy.__version__} available")
    print(f"[OK] Matplotlib {matplotlib.__version__} available")
    checks_passed += 2

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def format_history(session: SolverSession) -> str:
    if session.history.is_empty():
        return "History is empty."
    lines = ["Recent equations:"]
    for index, entry in enumerate(session.history.contents(), start=1):
        lines.append(f"  {index}. {entry.equation}  ->  {', '.join(entry.solutions)}")
    return "\n".join(lines)


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print a response body in the specified format.

    Args:
        res: Response dictionary (success or error body)
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if res.get("status") != "success":
        print("Error:", res.get("message"))
        return
    print(f"Equation: {res['equation']}")
    print(f"Discriminant: {res['discriminant']}")
    print(f"Type: {REGIME_LABELS.get(res['type'], res['type'])}")
    for index, solution in enumerate(res["solutions"], start=1):
        print(f"x{index} = {solution}")
    exact = res.get("exact")
    if exact and list(exact) != list(res["solutions"]):
        print("Exact: " + ", ".join(exact))


def print_help_text() -> None:
    print(
        "Enter the coefficients of a*x^2 + b*x + c = 0 separated by spaces,\n"
        "for example: 1 -3 2   or   1/2 sqrt(2) -1\n"
        "\n"
        "Commands:\n"
        "  history   show the most recent results\n"
        "  reset     clear the current result (history is kept)\n"
        "  help      show this text\n"
        "  quit      leave"
    )


def _solve_and_report(
    session: SolverSession, fields: list[str | None], output_format: str
) -> int:
    try:
        result = session.submit(*fields)
    except ValidationError as e:
        print_result_pretty(
            {"status": "error", "message": e.message, "code": e.code}, output_format
        )
        return EXIT_VALIDATION_ERROR
    except TransportError as e:
        logger.warning(f"Transport failure ({e.code}): {e.message}")
        print_result_pretty(
            {
                "status": "error",
                "message": f"Could not reach the solver: {e.message}",
                "code": e.code,
            },
            output_format,
        )
        return EXIT_TRANSPORT_ERROR
    print_result_pretty(result.to_dict(), output_format)
    return EXIT_OK


def repl_loop(session: SolverSession, output_format: str = "human") -> None:
    """Interactive loop reading one equation per line."""
    print("Kuadrat - quadratic equation solver. Type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        command = raw.lower()
        if command in ("quit", "exit", "q"):
            print("Goodbye.")
            break
        if command == "help":
            print_help_text()
            continue
        if command == "history":
            if output_format == "json":
                print(json.dumps(session.history.to_list(), indent=2, ensure_ascii=False))
            else:
                print(format_history(session))
            continue
        if command == "reset":
            session.reset()
            print("Cleared.")
            continue

        fields = raw.split()
        if len(fields) != 3:
            print("Error: enter exactly three coefficients: a b c")
            continue
        code = _solve_and_report(session, fields, output_format)
        if code == EXIT_OK and output_format == "human":
            print(format_history(session))


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Kuadrat CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 success, 1 invalid input, 2 solver unreachable)
    """
    parser = argparse.ArgumentParser(prog="kuadrat")
    parser.add_argument("--worker-solve", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--payload", type=str, help=argparse.SUPPRESS)
    parser.add_argument("-a", type=str, help="Coefficient a (non-zero)")
    parser.add_argument("-b", type=str, help="Coefficient b")
    parser.add_argument("-c", type=str, help="Coefficient c")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "--worker-mode",
        type=str,
        choices=sorted(BACKENDS),
        help="Solve in this process (local) or in a child process (worker)",
    )
    parser.add_argument(
        "-t", "--timeout", type=int, help="Override worker timeout (seconds)"
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Digits after the decimal point"
    )
    parser.add_argument(
        "--history-size", type=int, help="Number of results kept in history"
    )
    parser.add_argument("--plot", type=str, help="Write a PNG plot of the parabola")
    parser.add_argument(
        "--ascii-plot", action="store_true", help="Print an ASCII plot of the parabola"
    )
    parser.add_argument(
        "--no-exact", action="store_true", help="Do not compute exact root forms"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.LOG_LEVEL,
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        role=ROLE_WORKER if args.worker_solve else ROLE_MAIN,
    )

    # Apply CLI configuration overrides
    if args.timeout and args.timeout > 0:
        config.WORKER_TIMEOUT = int(args.timeout)
    if args.precision is not None and args.precision >= 0:
        config.OUTPUT_DECIMALS = int(args.precision)
    if args.history_size and args.history_size > 0:
        config.HISTORY_SIZE = int(args.history_size)
    if args.worker_mode:
        config.SOLVER_MODE = args.worker_mode
    if args.no_exact:
        config.EXACT_ROOTS_ENABLED = False

    if args.worker_solve:
        from .worker import worker_solve_main

        print(json.dumps(worker_solve_main(args.payload)))
        return EXIT_OK
    if args.version:
        print(config.VERSION)
        return EXIT_OK
    if args.health_check:
        return _health_check()

    session = SolverSession()
    fields = [args.a, args.b, args.c]
    if all(field is None for field in fields):
        repl_loop(session, args.format)
        return EXIT_OK

    code = _solve_and_report(session, fields, args.format)
    if code == EXIT_OK and (args.plot or args.ascii_plot):
        from .plotting import plot_parabola

        plot = plot_parabola(
            session.current, output_file=args.plot, ascii=args.ascii_plot
        )
        if not plot.ok:
            print(f"Plot error: {plot.error}", file=sys.stderr)
        elif plot.text is not None:
            print(plot.text)
        else:
            print(f"Plot saved to: {plot.path}")
    return code


if __name__ == "__main__":
    sys.exit(main_entry())
