"""Axis utilities for the lookup table.

Locating a value inside a monotonic grid and recovering the distinct
axis values from the flattened table columns.
"""
import numba
import numpy as np


def _grid_loc_python(xg, x, extrapolate):
    """Bracket search on a monotonic vector (pure Python)."""
    iz = xg.shape[0]
    if iz <= 1:
        return 0, 0.0

    ascending = xg[0] < xg[iz - 1]
    if ascending:
        below = x <= xg[0]
        above = x >= xg[iz - 1]
    else:
        below = x >= xg[0]
        above = x <= xg[iz - 1]

    if below:
        rat = 0.0
        if extrapolate:
            rat = (x - xg[0]) / (xg[1] - xg[0])
        return 0, rat

    if above:
        ix = iz - 2
        rat = 1.0
        if extrapolate:
            rat = (x - xg[ix]) / (xg[iz - 1] - xg[ix])
        return ix, rat

    lo = 0
    hi = iz - 1
    while hi > lo + 1:
        mid = (lo + hi) // 2
        if ascending:
            inside = x >= xg[mid]
        else:
            inside = x <= xg[mid]
        if inside:
            lo = mid
        else:
            hi = mid
    return lo, (x - xg[lo]) / (xg[lo + 1] - xg[lo])


_grid_loc = numba.njit(cache=True)(_grid_loc_python)


def grid_index(grid, x, extrapolate=False):
    """Locate `x` inside a monotonic grid.

    Parameters
    ----------
    grid : array_like
        Strictly increasing or strictly decreasing axis values.
    x : float
        Query value.
    extrapolate : bool
        If True, `rat` is computed from the nearest edge segment when `x`
        lies outside the grid (so it may be < 0 or > 1). Otherwise it is
        clamped to [0, 1].

    Returns
    -------
    ix : int
        Lower bracket index, 0 <= ix <= len(grid) - 2.
    rat : float
        Fractional position, x ~= grid[ix] + rat * (grid[ix+1] - grid[ix]).
    """
    grid = np.ascontiguousarray(grid, dtype=np.float64)
    ix, rat = _grid_loc(grid, float(x), bool(extrapolate))
    return int(ix), float(rat)


def unique_values(values):
    """Return the sorted distinct values of a table column.

    Equality is exact; values that differ in the last bit are kept apart.
    """
    return np.unique(np.asarray(values, dtype=np.float64).ravel())
