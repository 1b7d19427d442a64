"""Forward-model lookup table.

A lookup table (LUT) maps every node of a rectangular grid of cloud optical
thickness (tau) and droplet effective radius (cder) to two modelled
reflectances. Rows are ``(tau, cder, ref1, ref2)``.
"""
import numpy as np

from .grid import unique_values


class LUTError(ValueError):
    """Raised when a lookup table is malformed or too small to invert."""
    pass


class LookupTable(object):
    """Read-only rectangular tau x cder lookup table.

    Rows may be given in any order; they are sorted tau-major, cder-minor so
    that ``reflectances[i, j]`` belongs to ``(tau_axis[i], cder_axis[j])``.

    Parameters
    ----------
    rows : array_like, shape (n, 4)
        Table rows ``(tau, cder, ref1, ref2)``.
    """

    def __init__(self, rows):
        rows = np.array(rows, dtype=np.float64)
        if rows.ndim != 2 or rows.shape[1] != 4:
            raise LUTError(f"LUT rows must have shape (n, 4), got {rows.shape}")
        if rows.shape[0] == 0:
            raise LUTError("LUT is empty")

        order = np.lexsort((rows[:, 1], rows[:, 0]))
        self.rows = rows[order]
        self.rows.flags.writeable = False

        self.tau_axis = unique_values(self.rows[:, 0])
        self.cder_axis = unique_values(self.rows[:, 1])
        n_tau = self.tau_axis.size
        n_cder = self.cder_axis.size
        if n_tau * n_cder != self.rows.shape[0]:
            raise LUTError(
                f"LUT is not a complete grid: {n_tau} tau x {n_cder} cder values "
                f"but {self.rows.shape[0]} rows"
            )
        self.reflectances = self.rows[:, 2:].reshape(n_tau, n_cder, 2)

    def __len__(self):
        return self.rows.shape[0]

    def __repr__(self):
        return (
            f"LookupTable(tau: {self.tau_axis.size} values "
            f"[{self.tau_axis[0]:g}, {self.tau_axis[-1]:g}], "
            f"cder: {self.cder_axis.size} values "
            f"[{self.cder_axis[0]:g}, {self.cder_axis[-1]:g}])"
        )

    @property
    def shape(self):
        "Grid shape (n_tau, n_cder)"
        return self.tau_axis.size, self.cder_axis.size

    @property
    def tau(self):
        return self.rows[:, 0]

    @property
    def cder(self):
        return self.rows[:, 1]

    @property
    def ref1(self):
        return self.rows[:, 2]

    @property
    def ref2(self):
        return self.rows[:, 3]

    def with_surface_albedo(self, albedo):
        """Return a new table with `albedo` added to both reflectances."""
        rows = self.rows.copy()
        rows[:, 2:] += albedo
        return LookupTable(rows)

    def initial_guess(self, observation):
        """First guess of (tau, cder) for an observation.

        Picks the table node closest to the observation after both have been
        normalized by the maximum reflectance of each table column.

        Parameters
        ----------
        observation : array_like, shape (2,)
            Observed reflectances.

        Returns
        -------
        np.ndarray, shape (2,)
            (tau, cder) of the nearest node.
        """
        observation = np.asarray(observation, dtype=np.float64)
        scale = self.rows[:, 2:].max(axis=0)
        dist = (((self.rows[:, 2:] - observation) / scale) ** 2).sum(axis=1)
        nearest = np.argmin(dist)
        return self.rows[nearest, :2].copy()
