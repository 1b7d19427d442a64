"""Shared pytest fixtures for micore tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from micore.config import RetrievalConfig
from micore.lut import LookupTable
from micore.transform import transform_tau

TAU_AXIS = np.array([1.0, 2.0, 4.0, 6.0, 8.0, 10.0, 15.0, 20.0, 30.0, 40.0, 60.0, 80.0, 100.0])
CDER_AXIS = np.array([4.0, 6.0, 8.0, 10.0, 12.0, 15.0, 18.0, 21.0, 25.0, 30.0])


def synthetic_reflectances(tau, cder):
    """Smooth, invertible stand-in for a radiative transfer model.

    ref1 is linear in the transformed parameters, ref2 is not.
    """
    t = transform_tau(np.asarray(tau, dtype=float))
    s = np.sqrt(np.asarray(cder, dtype=float))
    ref1 = 0.85 * t + 0.01 * s
    ref2 = 0.5 * t * np.exp(-0.15 * s) + 0.05
    return ref1, ref2


def make_rows(tau_axis=TAU_AXIS, cder_axis=CDER_AXIS):
    tau, cder = np.meshgrid(tau_axis, cder_axis, indexing="ij")
    tau = tau.ravel()
    cder = cder.ravel()
    ref1, ref2 = synthetic_reflectances(tau, cder)
    return np.column_stack([tau, cder, ref1, ref2])


@pytest.fixture
def lut_rows():
    """Rows of the synthetic 13 x 10 table, tau-major."""
    return make_rows()


@pytest.fixture
def synthetic_lut(lut_rows):
    """Synthetic 13 x 10 LookupTable."""
    return LookupTable(lut_rows)


@pytest.fixture
def default_config():
    """Return a default RetrievalConfig."""
    return RetrievalConfig()


@pytest.fixture
def reflectance_model():
    """The function the synthetic table was built from."""
    return synthetic_reflectances


@pytest.fixture
def make_lut():
    """Factory for synthetic tables with custom axes."""
    def _make(tau_axis=TAU_AXIS, cder_axis=CDER_AXIS):
        return LookupTable(make_rows(tau_axis, cder_axis))
    return _make
