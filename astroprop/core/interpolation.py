"""
Piecewise-linear lookup over tabulated data.

Energy loss modules evaluate a tabulated rate once per candidate per
step, so ``interpolate`` locates the bracketing samples with a binary
search (``numpy.searchsorted``) rather than a linear scan. Outside the
tabulated range the first or last value is returned unchanged; callers
that need an extrapolation must guard the range themselves.

The module also reads and writes the plain text table format used for
loss rate data: lines starting with ``#`` are comments and every other
line carries two whitespace separated numbers. Reading stops silently
at the end of the file or at the first line that does not parse.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def interpolate(x: float, xs: Sequence[float], ys: Sequence[float]) -> float:
    """Linearly interpolate ``ys`` at ``x``.

    Args:
        x: Point at which to evaluate.
        xs: Non-decreasing sample points.
        ys: Values at the sample points.

    Returns:
        ``ys[0]`` for ``x <= xs[0]``, ``ys[-1]`` for ``x >= xs[-1]`` and
        the linear interpolation between the bracketing samples
        otherwise.
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.size == 0 or xs.size != ys.size:
        raise ValueError(f"interpolate: table sizes do not match ({xs.size} x, {ys.size} y)")
    if x <= xs[0]:
        return float(ys[0])
    if x >= xs[-1]:
        return float(ys[-1])
    # xs[i - 1] <= x < xs[i], so the interval has non-zero width
    i = int(np.searchsorted(xs, x, side="right"))
    x0, x1 = xs[i - 1], xs[i]
    y0, y1 = ys[i - 1], ys[i]
    return float(y0 + (x - x0) * (y1 - y0) / (x1 - x0))


def interpolate_equidistant(x: float, lo: float, hi: float, ys: Sequence[float]) -> float:
    """Interpolate ``ys`` sampled at equal spacing between ``lo`` and ``hi``.

    The bracketing index is computed directly from the spacing.
    """
    ys = np.asarray(ys, dtype=np.float64)
    if ys.size == 0:
        raise ValueError("interpolate_equidistant: empty table")
    if x <= lo or ys.size == 1:
        return float(ys[0])
    if x >= hi:
        return float(ys[-1])
    dx = (hi - lo) / (ys.size - 1)
    p = (x - lo) / dx
    i = min(int(p), ys.size - 2)
    t = p - i
    return float(ys[i] + t * (ys[i + 1] - ys[i]))


def load_table(path: str, x_unit: float = 1.0, y_unit: float = 1.0) -> Tuple[np.ndarray, np.ndarray]:
    """Read a two column table and return read-only ``(xs, ys)`` arrays.

    Each column is multiplied by its unit so that the returned values are
    in SI units. Raises ``FileNotFoundError`` naming the file when it
    cannot be opened.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"could not open table file {path}")
    xs, ys = [], []
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            fields = stripped.split()
            try:
                a, b = float(fields[0]), float(fields[1])
            except (IndexError, ValueError):
                logger.debug(f"Stopped reading {path} at malformed line: {stripped!r}")
                break
            xs.append(a * x_unit)
            ys.append(b * y_unit)
    x_arr = np.array(xs, dtype=np.float64)
    y_arr = np.array(ys, dtype=np.float64)
    x_arr.setflags(write=False)
    y_arr.setflags(write=False)
    logger.debug(f"Loaded {x_arr.size} rows from {path}")
    return x_arr, y_arr


def save_table(
    path: str,
    xs: Sequence[float],
    ys: Sequence[float],
    header: Optional[str] = None,
    x_unit: float = 1.0,
    y_unit: float = 1.0,
) -> None:
    """Write ``xs`` and ``ys`` (divided by their units) in the table format.

    Values are written with 17 significant digits so that ``load_table``
    reproduces them exactly.
    """
    if len(xs) != len(ys):
        raise ValueError(f"save_table: table sizes do not match ({len(xs)} x, {len(ys)} y)")
    with open(path, "w", encoding="utf-8") as fh:
        if header:
            for line in header.splitlines():
                fh.write(f"# {line}\n")
        for x, y in zip(xs, ys):
            fh.write(f"{x / x_unit:.17g} {y / y_unit:.17g}\n")
