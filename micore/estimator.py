"""Reflectance estimation from the lookup table.

Reflectances at an arbitrary (tau, cder) are obtained by separable bicubic
interpolation: a 1-D Akima interpolation along one axis at each of five
grid levels of the other axis, followed by an Akima interpolation of those
five values. Doing this in both axis orders gives the two Jacobian
columns, each from the pass that differentiates along its own axis, and
two reflectance estimates which are averaged to reduce the directional
bias of the local cubic.

Interpolation happens in the transformed parameter space (see
`micore.transform`), so the Jacobian is
d(ref1, ref2) / d(transformed tau, transformed cder).
"""
import numba
import numpy as np

from .akima import MIN_POINTS, _akima
from .grid import grid_index
from .lut import LUTError
from .transform import ASYM_G, transform_cder, transform_tau

HALF_WINDOW = MIN_POINTS // 2


def window_center(axis, value):
    """Index of the centre of the 5-point interpolation window.

    Parameters
    ----------
    axis : np.ndarray
        Distinct, ascending grid values of one LUT axis.
    value : float
        Physical (untransformed) parameter value.

    Returns
    -------
    int
        Centre index ``c`` with ``2 <= c <= len(axis) - 3``, so that
        ``axis[c-2:c+3]`` stays inside the table.

    Raises
    ------
    LUTError
        If the axis has fewer than 5 values.
    """
    n = len(axis)
    if n < MIN_POINTS:
        raise LUTError(
            f"Too few points in this LUT: {n} grid values on an axis, "
            f"at least {MIN_POINTS} are required"
        )
    ix, _ = grid_index(axis, value)
    if ix < HALF_WINDOW:
        ix = HALF_WINDOW
    elif ix > n - HALF_WINDOW - 1:
        ix = n - HALF_WINDOW - 1
    elif ix > n - 2:
        ix = n - 2
    return ix


def _interpolate_window_python(tau_nodes, cder_nodes, window, ltau, lcder):
    """Bicubic reflectances and Jacobian on a 5x5x2 window (pure Python)."""
    est = np.empty(2)
    k = np.empty((2, 2))
    ytab = np.empty(5)
    levels = np.empty(5)
    for b in range(2):
        # Along cder at each tau level, then along tau
        for i in range(5):
            for j in range(5):
                ytab[j] = window[i, j, b]
            levels[i] = _akima(cder_nodes, ytab, lcder)[0]
        ref_a, slope = _akima(tau_nodes, levels, ltau)
        k[b, 0] = slope

        # Along tau at each cder level, then along cder
        for j in range(5):
            for i in range(5):
                ytab[i] = window[i, j, b]
            levels[j] = _akima(tau_nodes, ytab, ltau)[0]
        ref_b, slope = _akima(cder_nodes, levels, lcder)
        k[b, 1] = slope

        est[b] = 0.5 * (ref_a + ref_b)
    return est, k


_interpolate_window = numba.njit(cache=True)(_interpolate_window_python)


def estimate_reflectances(lut, tau, cder, g=ASYM_G):
    """Estimate reflectances and their Jacobian at (tau, cder).

    Parameters
    ----------
    lut : LookupTable
        Forward-model table with at least 5 values on each axis.
    tau, cder : float
        Physical cloud optical thickness and effective radius.
    g : float
        Asymmetry factor of the tau transform.

    Returns
    -------
    est_refs : np.ndarray, shape (2,)
        Estimated (ref1, ref2).
    k : np.ndarray, shape (2, 2)
        Jacobian, ``k[i, 0] = d ref_i / d t(tau)`` and
        ``k[i, 1] = d ref_i / d t(cder)``.
    """
    itau = window_center(lut.tau_axis, tau)
    icder = window_center(lut.cder_axis, cder)
    tsl = slice(itau - HALF_WINDOW, itau + HALF_WINDOW + 1)
    csl = slice(icder - HALF_WINDOW, icder + HALF_WINDOW + 1)

    tau_nodes = transform_tau(lut.tau_axis[tsl], g)
    cder_nodes = transform_cder(lut.cder_axis[csl])
    window = lut.reflectances[tsl, csl, :].copy()

    return _interpolate_window(
        np.ascontiguousarray(tau_nodes),
        np.ascontiguousarray(cder_nodes),
        window,
        float(transform_tau(tau, g)),
        float(transform_cder(cder)),
    )


class ReflectanceEstimator(object):
    """Reflectance estimator bound to one table and configuration.

    Remembers the last evaluated point: after a rejected Levenberg-Marquardt
    step the driver evaluates the same parameters again, and that call is
    answered from the cache.
    """

    def __init__(self, lut, config):
        self.lut = lut
        self.g = config.asym_g
        self._key = None
        self._value = None
        self.evaluations = 0

    def __call__(self, tau, cder):
        key = (float(transform_tau(tau, self.g)), float(transform_cder(cder)))
        if key != self._key:
            self._value = estimate_reflectances(self.lut, tau, cder, self.g)
            self._key = key
            self.evaluations += 1
        est, k = self._value
        return est.copy(), k.copy()
