"""Tests for the parameter transform."""

import numpy as np

from micore.transform import (
    ASYM_G,
    inverse,
    inverse_cder,
    inverse_tau,
    transform,
    transform_cder,
    transform_tau,
)


class TestTransform:

    def test_known_values(self):
        """Transform at simple points."""
        assert transform_tau(0.0) == 0.0
        np.testing.assert_allclose(transform_tau(1.0 / (1.0 - ASYM_G)), 0.5)
        np.testing.assert_allclose(transform_cder(16.0), 4.0)

    def test_tau_maps_into_unit_interval(self):
        """Transformed tau increases monotonically inside [0, 1)."""
        t = transform_tau(np.linspace(0.0, 150.0, 301))
        assert np.all(np.diff(t) > 0)
        assert t[0] == 0.0
        assert t[-1] < 1.0

    def test_round_trip(self):
        """inverse(transform(x), 0) recovers x over the physical range."""
        tau = np.linspace(0.0, 150.0, 61)
        cder = np.linspace(0.0, 55.0, 61)
        np.testing.assert_allclose(inverse_tau(transform_tau(tau)), tau,
                                   rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose(inverse_cder(transform_cder(cder)), cder,
                                   rtol=1e-12, atol=1e-12)

    def test_pair_round_trip(self):
        """Pair helpers are inverse to each other."""
        params = np.array([23.5, 11.2])
        np.testing.assert_allclose(inverse(transform(params)), params, rtol=1e-12)

    def test_step_applied_in_transformed_space(self):
        """The step is added before mapping back."""
        t = transform_tau(10.0)
        np.testing.assert_allclose(inverse_tau(t, 0.05), inverse_tau(t + 0.05))
        np.testing.assert_allclose(inverse_cder(3.0, 0.5), 12.25)

    def test_custom_asymmetry(self):
        """Asymmetry factor is a parameter."""
        t = transform_tau(10.0, g=0.5)
        np.testing.assert_allclose(t, 5.0 / 6.0)
        np.testing.assert_allclose(inverse_tau(t, g=0.5), 10.0)

    def test_pole_gives_infinity(self):
        """A shifted value of one maps to infinity without raising."""
        assert np.isinf(inverse_tau(0.75, 0.25))
