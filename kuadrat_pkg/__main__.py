"""Main entry point for running kuadrat_pkg as a module.

This allows running Kuadrat with:
    python -m kuadrat_pkg
    python -m kuadrat_pkg --health-check
    python -m kuadrat_pkg -a 1 -b -3 -c 2

This is equivalent to running:
    python -m kuadrat_pkg.cli
    python kuadrat.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
