"""Akima interpolation returning both value and slope.

Implements the local cubic of Akima (1970) on the segment that brackets
the query point:

    y = y0 + c1*a + c2*a**2 + c3*a**3

where ``a`` is the normalized offset inside the segment. The node slopes
are weighted averages of the neighbouring divided differences, with the
weights favouring the side whose differences change least. This keeps
the interpolant from overshooting near abrupt slope changes.
"""
import numba
import numpy as np

from .grid import _grid_loc

MIN_POINTS = 5


def _akima_python(xtab, ytab, x):
    """Akima value and slope at `x` (pure Python)."""
    nx = ytab.shape[0]
    ix, ax = _grid_loc(xtab, x, True)

    # d[j] is the divided difference of segment ix + j - 2
    d = np.empty(5)
    if ix >= 2 and ix <= nx - 4:
        for j in range(5):
            m = ix + j - 2
            d[j] = (ytab[m + 1] - ytab[m]) / (xtab[m + 1] - xtab[m])
    elif ix <= 1:
        first = 2 - ix
        for j in range(first, 5):
            m = ix + j - 2
            d[j] = (ytab[m + 1] - ytab[m]) / (xtab[m + 1] - xtab[m])
        for j in range(first - 1, -1, -1):
            d[j] = 2.0 * d[j + 1] - d[j + 2]
    else:
        last = nx - ix + 1
        for j in range(last):
            m = ix + j - 2
            d[j] = (ytab[m + 1] - ytab[m]) / (xtab[m + 1] - xtab[m])
        for j in range(last, 5):
            d[j] = 2.0 * d[j - 1] - d[j - 2]

    # Slopes at nodes ix and ix + 1
    t = np.empty(2)
    for i in range(2):
        w1 = abs(d[i + 3] - d[i + 2])
        w0 = abs(d[i + 1] - d[i])
        if w1 + w0 == 0.0:
            t[i] = 0.5 * (d[i + 1] + d[i + 2])
        else:
            t[i] = (w1 * d[i + 1] + w0 * d[i + 2]) / (w1 + w0)

    dx = xtab[ix + 1] - xtab[ix]
    dy = ytab[ix + 1] - ytab[ix]
    c1 = t[0] * dx
    c2 = 3.0 * dy - (c1 + t[1] * dx) - c1
    c3 = -2.0 * dy + (c1 + t[1] * dx)
    y = ytab[ix] + ax * (c1 + ax * (c2 + ax * c3))
    k = (c1 + ax * (2.0 * c2 + 3.0 * c3 * ax)) / dx
    return y, k


_akima = numba.njit(cache=True)(_akima_python)


def akima_with_slope(xtab, ytab, x):
    """Interpolate `ytab(xtab)` at `x` and return value and derivative.

    Parameters
    ----------
    xtab : array_like
        Monotonic abscissae, at least 5 points.
    ytab : array_like
        Ordinates, same length as `xtab`.
    x : float
        Query point. Points outside `xtab` are extrapolated with the cubic
        of the nearest edge segment.

    Returns
    -------
    y : float
        Interpolated value.
    dydx : float
        First derivative of the interpolant at `x`.
    """
    xtab = np.ascontiguousarray(xtab, dtype=np.float64)
    ytab = np.ascontiguousarray(ytab, dtype=np.float64)
    if xtab.shape != ytab.shape or xtab.ndim != 1:
        raise ValueError("xtab and ytab must be 1-D arrays of the same length")
    if xtab.size < MIN_POINTS:
        raise ValueError(
            f"Akima interpolation needs at least {MIN_POINTS} points, got {xtab.size}"
        )
    y, k = _akima(xtab, ytab, float(x))
    return float(y), float(k)


def akima(xtab, ytab, x):
    """Akima interpolated value at `x` (see `akima_with_slope`)."""
    return akima_with_slope(xtab, ytab, x)[0]
