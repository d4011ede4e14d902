"""Plotting of the parabola ``y = a*x**2 + b*x + c`` for a solved equation."""

from __future__ import annotations

import math

import matplotlib

matplotlib.use("Agg")  # Non-GUI backend, plots are always written to files
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .logging_config import get_logger  # noqa: E402
from .solver import real_roots  # noqa: E402
from .types import PlotResult, SolutionSet  # noqa: E402

logger = get_logger("plotting")

# Dimensions of the ASCII sketch in characters
ASCII_ROWS = 20
ASCII_COLS = 60


def plot_window(result: SolutionSet) -> tuple[float, float]:
    """Choose an x range centred on the vertex that contains every real root."""
    a, b, _ = result.coefficients.as_tuple()
    vertex = -b / (2 * a)
    roots = real_roots(result.coefficients)
    if roots:
        half_span = max(abs(r - vertex) for r in roots)
    else:
        half_span = math.sqrt(abs(result.discriminant)) / abs(2 * a)
    half_span = max(half_span * 1.5, 1.0)
    return vertex - half_span, vertex + half_span


def _sample(result: SolutionSet, points: int) -> tuple[np.ndarray, np.ndarray]:
    a, b, c = result.coefficients.as_tuple()
    x_min, x_max = plot_window(result)
    if not (math.isfinite(x_min) and math.isfinite(x_max)) or x_min == x_max:
        raise ValueError("coefficients are out of plotting range")
    x_vals = np.linspace(x_min, x_max, points)
    with np.errstate(over="ignore", invalid="ignore"):
        y_vals = a * x_vals**2 + b * x_vals + c
    if not np.all(np.isfinite(y_vals)):
        raise ValueError("function values out of range")
    return x_vals, y_vals


def _ascii_plot(x_vals: np.ndarray, y_vals: np.ndarray) -> str:
    x_min, x_max = float(x_vals[0]), float(x_vals[-1])
    y_min, y_max = float(y_vals.min()), float(y_vals.max())
    y_min, y_max = min(y_min, 0.0), max(y_max, 0.0)
    y_range = y_max - y_min or 1.0

    def to_col(x: float) -> int:
        return round((x - x_min) / (x_max - x_min) * (ASCII_COLS - 1))

    def to_row(y: float) -> int:
        return round((y_max - y) / y_range * (ASCII_ROWS - 1))

    grid = [[" "] * ASCII_COLS for _ in range(ASCII_ROWS)]
    axis_row = to_row(0.0)
    for col in range(ASCII_COLS):
        grid[axis_row][col] = "-"
    if x_min <= 0 <= x_max:
        axis_col = to_col(0.0)
        for row in range(ASCII_ROWS):
            grid[row][axis_col] = "+" if row == axis_row else "|"
    for x, y in zip(x_vals, y_vals):
        grid[to_row(float(y))][to_col(float(x))] = "*"
    return "\n".join("".join(line).rstrip() for line in grid)


def plot_parabola(
    result: SolutionSet,
    output_file: str | None = None,
    ascii: bool = False,
    points: int = 200,
) -> PlotResult:
    """Plot the parabola of a solved equation.

    The window is centred on the vertex and wide enough to show every real
    root. Real roots are marked on the x axis.

    Args:
        result: SolutionSet to plot
        output_file: PNG path for the matplotlib figure
        ascii: If True, return an ASCII sketch instead of writing a file
        points: Number of sample points

    Returns:
        PlotResult with ``path`` (file plot) or ``text`` (ASCII plot)
    """
    if not ascii and not output_file:
        return PlotResult(ok=False, error="An output file is required for image plots")
    try:
        x_vals, y_vals = _sample(result, points)
    except ValueError as e:
        return PlotResult(ok=False, error=f"Cannot plot: {e}")

    if ascii:
        return PlotResult(ok=True, text=_ascii_plot(x_vals, y_vals))

    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        ax.plot(x_vals, y_vals, linewidth=2, color="#2E86AB", label=result.equation)
        roots = real_roots(result.coefficients)
        if roots:
            ax.scatter(
                roots, [0.0] * len(roots), color="#C73E1D", zorder=3, label="real roots"
            )
        ax.set_xlabel("x", fontsize=12, fontweight="bold")
        ax.set_ylabel("y", fontsize=12, fontweight="bold")
        ax.set_title(result.equation, fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, linestyle="-", alpha=0.3)
        ax.axvline(x=0, color="k", linewidth=0.8, linestyle="-", alpha=0.3)
        ax.legend(loc="best", fontsize=10)
        fig.tight_layout()
        fig.savefig(output_file, dpi=150, bbox_inches="tight")
    except OSError as e:
        logger.error(f"Could not write plot to {output_file}: {e}")
        return PlotResult(ok=False, error=f"Could not write plot: {e}")
    finally:
        plt.close(fig)
    logger.info(f"Plot saved to {output_file}")
    return PlotResult(ok=True, path=str(output_file))
