"""Nonlinear transform of the retrieved cloud parameters.

Optical thickness is mapped through the scaled-optical-thickness ratio
``(1-g)tau / (1 + (1-g)tau)`` and effective radius through its square
root. Both compress the strongly skewed physical ranges, so that the
reflectance surfaces are closer to linear and a Gauss-Newton step is
well behaved. All Jacobian and step computations happen in this space.
"""
import numpy as np

ASYM_G = 0.86  # asymmetry factor of cloud droplets


def transform_tau(tau, g=ASYM_G):
    return ((1.0 - g) * tau) / (1.0 + (1.0 - g) * tau)


def transform_cder(cder):
    return np.sqrt(cder)


def inverse_tau(ltau, delta=0.0, g=ASYM_G):
    """Optical thickness from transformed value `ltau` shifted by `delta`.

    A shifted value of exactly 1 maps to infinity; callers clamp the
    result to the physical range.
    """
    shifted = np.asarray(ltau, dtype=np.float64) + delta
    with np.errstate(divide="ignore"):
        return shifted / ((1.0 - g) * (1.0 - shifted))


def inverse_cder(lcder, delta=0.0):
    return (lcder + delta) ** 2


def transform(params, g=ASYM_G):
    """Map (tau, cder) to the transformed space."""
    tau, cder = params
    return np.array([transform_tau(tau, g), transform_cder(cder)])


def inverse(transformed, step=(0.0, 0.0), g=ASYM_G):
    """Map transformed parameters plus a step back to (tau, cder)."""
    ltau, lcder = transformed
    return np.array([inverse_tau(ltau, step[0], g), inverse_cder(lcder, step[1])])
