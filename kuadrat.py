#!/usr/bin/env python3
"""
Kuadrat - Quadratic Equation Solver

Main entry point for the Kuadrat quadratic equation solver. This file
serves as a thin wrapper that delegates all functionality to the
kuadrat_pkg package.

Usage:
    python kuadrat.py                        # Interactive REPL
    python kuadrat.py -a 1 -b -3 -c 2        # Solve one equation
    python kuadrat.py --help                 # Show help

For PyInstaller:
    pyinstaller --onefile --console --collect-all sympy kuadrat.py
"""

from __future__ import annotations

import sys
from multiprocessing import freeze_support
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Kuadrat.

    Delegates all functionality to the kuadrat_pkg.cli module, which
    handles argument parsing, solving and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    # Call freeze_support early for PyInstaller compatibility
    freeze_support()

    from kuadrat_pkg.cli import main_entry

    return main_entry(argv)


if __name__ == "__main__":
    sys.exit(main())
