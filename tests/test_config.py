"""Tests for RetrievalConfig."""

import numpy as np
import pytest

from micore.config import RetrievalConfig
from micore.transform import ASYM_G


class TestDefaults:

    def test_values(self, default_config):
        """Default constants of the retrieval."""
        c = default_config
        assert c.asym_g == ASYM_G
        assert c.threshold == 1e-13
        assert c.diff_threshold == 1e-13
        assert c.max_iter == 9999
        assert c.stagnation_count == 4
        assert c.bounds == ((0.0, 0.0), (150.0, 55.0))
        assert c.gamma_init == 0.01
        assert c.gamma_decrease == 0.1
        assert c.gamma_increase == 10.0
        assert c.initial_cost == 100.0
        np.testing.assert_array_equal(c.inv_error_covariance, np.eye(2))

    def test_covariance_not_shared(self):
        """Each config gets its own covariance array."""
        a = RetrievalConfig()
        b = RetrievalConfig()
        a.inv_error_covariance[0, 0] = 5.0
        assert b.inv_error_covariance[0, 0] == 1.0


class TestValidation:

    @pytest.mark.parametrize("kwargs", [
        {"max_iter": 0},
        {"stagnation_count": 0},
        {"asym_g": 1.0},
        {"asym_g": -0.1},
        {"tau_min": 10.0, "tau_max": 5.0},
        {"cder_min": -1.0},
        {"cder_min": 60.0},
        {"gamma_init": 0.0},
        {"gamma_decrease": 1.5},
        {"gamma_increase": 0.5},
        {"inv_error_covariance": np.eye(3)},
        {"inv_error_covariance": [[1.0, 0.5], [0.0, 1.0]]},
        {"inv_error_covariance": [[1.0, 2.0], [2.0, 1.0]]},
        {"inv_error_covariance": np.diag([1.0, -0.1])},
    ])
    def test_invalid(self, kwargs):
        """Inconsistent settings are rejected."""
        with pytest.raises(ValueError):
            RetrievalConfig(**kwargs)

    def test_semi_definite_weights(self):
        """A singular but positive semi-definite weight matrix is allowed."""
        c = RetrievalConfig(inv_error_covariance=np.diag([1.0, 0.0]))
        np.testing.assert_array_equal(c.inv_error_covariance, np.diag([1.0, 0.0]))

    def test_coercion(self):
        """Numeric strings are accepted."""
        c = RetrievalConfig(threshold="1e-10", max_iter="50")
        assert c.threshold == 1e-10
        assert c.max_iter == 50


class TestFromYAML:

    def test_sections(self, tmp_path):
        """Values are read from their sections."""
        path = tmp_path / "micore.yaml"
        path.write_text(
            "convergence:\n"
            "  threshold: 1e-12\n"
            "  max_iterations: 200\n"
            "damping:\n"
            "  initial: 0.05\n"
            "bounds:\n"
            "  tau_max: 100\n"
            "physical:\n"
            "  asymmetry_factor: 0.85\n"
            "observation:\n"
            "  inverse_error_covariance: [[2.0, 0.0], [0.0, 0.5]]\n"
            "surface_albedo: 0.03\n"
        )
        config, data = RetrievalConfig.from_yaml(path)
        assert config.threshold == 1e-12
        assert config.max_iter == 200
        assert config.gamma_init == 0.05
        assert config.tau_max == 100.0
        assert config.asym_g == 0.85
        np.testing.assert_array_equal(config.inv_error_covariance,
                                      [[2.0, 0.0], [0.0, 0.5]])
        # Untouched values keep their defaults
        assert config.diff_threshold == 1e-13
        assert data["surface_albedo"] == 0.03

    def test_empty_file(self, tmp_path):
        """An empty file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config, data = RetrievalConfig.from_yaml(path)
        assert config.max_iter == 9999
        assert config.threshold == 1e-13
        assert data == {}
