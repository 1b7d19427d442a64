"""Configuration for micore retrievals."""
from dataclasses import dataclass, field

import numpy as np

from .transform import ASYM_G


_FLOAT_FIELDS = (
    "asym_g",
    "threshold",
    "diff_threshold",
    "tau_min",
    "tau_max",
    "cder_min",
    "cder_max",
    "gamma_init",
    "gamma_decrease",
    "gamma_increase",
    "initial_cost",
)


def _identity():
    return np.eye(2)


@dataclass
class RetrievalConfig:
    """Configuration class for retrievals.

    Every tunable constant of the retrieval lives here, so that a caller can
    override any of them per call.
    """

    # Physical constants
    asym_g: float = ASYM_G  # asymmetry factor used by the tau transform
    # Convergence control
    threshold: float = 1e-13  # cost below which the retrieval has converged
    diff_threshold: float = 1e-13  # cost change regarded as negligible
    max_iter: int = 9999  # iteration cap
    stagnation_count: int = 4  # consecutive negligible changes before stopping
    # Physical bounds of the retrieved parameters
    tau_min: float = 0.0
    tau_max: float = 150.0
    cder_min: float = 0.0  # [um]
    cder_max: float = 55.0  # [um]
    # Levenberg-Marquardt damping
    gamma_init: float = 0.01
    gamma_decrease: float = 0.1  # factor applied after an improving step
    gamma_increase: float = 10.0  # factor applied after a worsening step
    initial_cost: float = 100.0  # "previous" cost seen by the first iteration
    # Inverse of the observation error covariance
    inv_error_covariance: np.ndarray = field(default_factory=_identity)

    def __post_init__(self):
        # YAML reads "1e-13" as a string, so coerce scalar fields explicitly
        for name in _FLOAT_FIELDS:
            setattr(self, name, float(getattr(self, name)))
        self.max_iter = int(self.max_iter)
        self.stagnation_count = int(self.stagnation_count)

        if self.max_iter < 1:
            raise ValueError(f"max_iter must be positive, got {self.max_iter}")
        if self.stagnation_count < 1:
            raise ValueError(
                f"stagnation_count must be positive, got {self.stagnation_count}"
            )
        if not 0.0 <= self.asym_g < 1.0:
            raise ValueError(f"asym_g must lie in [0, 1), got {self.asym_g}")
        if self.tau_min > self.tau_max:
            raise ValueError(
                f"tau_min={self.tau_min} is larger than tau_max={self.tau_max}"
            )
        if self.cder_min < 0.0 or self.cder_min > self.cder_max:
            raise ValueError(
                f"Invalid cder bounds [{self.cder_min}, {self.cder_max}]"
            )
        if self.gamma_init <= 0.0:
            raise ValueError(f"gamma_init must be positive, got {self.gamma_init}")
        if not 0.0 < self.gamma_decrease < 1.0 < self.gamma_increase:
            raise ValueError(
                "Damping factors must satisfy 0 < gamma_decrease < 1 < gamma_increase"
            )
        self.inv_error_covariance = np.asarray(
            self.inv_error_covariance, dtype=np.float64
        )
        if self.inv_error_covariance.shape != (2, 2):
            raise ValueError(
                "inv_error_covariance must be 2x2, got shape "
                f"{self.inv_error_covariance.shape}"
            )
        if not np.allclose(self.inv_error_covariance, self.inv_error_covariance.T):
            raise ValueError("inv_error_covariance must be symmetric")
        scale = np.abs(self.inv_error_covariance).max()
        if np.linalg.eigvalsh(self.inv_error_covariance).min() < -1e-12 * scale:
            raise ValueError("inv_error_covariance must be positive semi-definite")

    @property
    def bounds(self):
        "Lower and upper parameter bounds as ((tau_min, cder_min), (tau_max, cder_max))"
        return (self.tau_min, self.cder_min), (self.tau_max, self.cder_max)

    @classmethod
    def from_yaml(cls, path):
        """Load configuration from a YAML file.

        Parameters
        ----------
        path : str or Path
            Path to the YAML configuration file.

        Returns
        -------
        config : RetrievalConfig
            RetrievalConfig instance with values from the YAML file.
        data : dict
            Full parsed YAML data (includes run parameters not in
            RetrievalConfig, such as a default surface albedo).
        """
        import yaml

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Map YAML keys to dataclass fields, per section
        field_map = {
            "convergence": {
                "threshold": "threshold",
                "difference_threshold": "diff_threshold",
                "max_iterations": "max_iter",
                "stagnation_count": "stagnation_count",
            },
            "damping": {
                "initial": "gamma_init",
                "decrease": "gamma_decrease",
                "increase": "gamma_increase",
                "initial_cost": "initial_cost",
            },
            "bounds": {
                "tau_min": "tau_min",
                "tau_max": "tau_max",
                "cder_min": "cder_min",
                "cder_max": "cder_max",
            },
            "physical": {
                "asymmetry_factor": "asym_g",
            },
            "observation": {
                "inverse_error_covariance": "inv_error_covariance",
            },
        }

        kwargs = {}
        for section, keys in field_map.items():
            values = data.get(section) or {}
            for yaml_key, field_name in keys.items():
                if yaml_key in values:
                    kwargs[field_name] = values[yaml_key]

        return cls(**kwargs), data
