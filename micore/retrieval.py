"""Levenberg-Marquardt retrieval of cloud optical thickness and effective radius.

The retrieval inverts a lookup table for one pair of observed
reflectances. Starting from the nearest table node it iterates a damped
Gauss-Newton update in the transformed parameter space:

* a step that lowers (or keeps) the cost shrinks the damping factor and
  is followed by a new update from the current point;
* a step that raises the cost grows the damping factor and keeps the
  parameters where they are.

The run ends when the cost falls below a threshold, when the cost change
has been negligible for several consecutive iterations, or at the
iteration cap. The reported point is the best one visited.
"""
import enum
import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.linalg import LinAlgError

from .config import RetrievalConfig
from .estimator import ReflectanceEstimator
from .linalg import damped_normal_step
from .transform import inverse_cder, inverse_tau, transform_cder, transform_tau

logger = logging.getLogger(__name__)


class RetrievalStatus(enum.Enum):
    """How a retrieval run ended."""
    CONVERGED = "converged"
    STAGNATED_IMPROVING = "stagnated (improving)"
    STAGNATED_DEGRADING = "stagnated (degrading)"
    MAX_ITER_REACHED = "maximum number of iterations reached"


@dataclass(frozen=True)
class IterationRecord:
    """Damping, parameters, estimate and cost of one evaluated point."""
    step: int
    gamma: float  # damping factor used to evaluate this point
    tau: float
    cder: float
    est_ref1: float
    est_ref2: float
    cost: float


@dataclass(frozen=True)
class RetrievalResult:
    """Best point of a retrieval, how the run ended and its history."""
    tau: float
    cder: float
    cost: float
    status: RetrievalStatus
    iterations: int
    observation: tuple
    history: list = field(default_factory=list, repr=False)

    @property
    def converged(self):
        return self.status is RetrievalStatus.CONVERGED


class StagnationTracker(object):
    """Counts consecutive negligible cost changes.

    Improving and degrading iterations have separate counters. Any
    non-negligible change resets both; a negligible change only advances
    the counter of its own direction.

    Parameters
    ----------
    limit : int
        The run stagnates on the `limit`-th consecutive negligible change of
        one direction.
    """

    def __init__(self, limit=4):
        self.limit = limit
        self.improving = 0
        self.degrading = 0

    def reset(self):
        self.improving = 0
        self.degrading = 0

    def update(self, improved, negligible):
        """Register one iteration. Returns True if the run has stagnated."""
        if not negligible:
            self.reset()
            return False
        count = self.improving if improved else self.degrading
        if count >= self.limit - 1:
            return True
        if improved:
            self.improving += 1
        else:
            self.degrading += 1
        return False


def cost_function(observed, estimated, s):
    """Weighted squared residual ``(y - f)^T S (y - f)``.

    Parameters
    ----------
    observed, estimated : np.ndarray, shape (2,)
        Observed and modelled reflectances.
    s : np.ndarray, shape (2, 2)
        Inverse of the observation error covariance.
    """
    r = np.asarray(observed) - np.asarray(estimated)
    return float(r @ s @ r)


def update_parameters(observed, estimated, params, k, s, gamma, config):
    """Damped Gauss-Newton update of (tau, cder).

    The step is solved in the transformed space, mapped back and clamped to
    the physical bounds of `config`.

    Returns
    -------
    np.ndarray, shape (2,)
        Updated (tau, cder).
    """
    residual = np.asarray(observed) - np.asarray(estimated)
    dx = damped_normal_step(k, s, residual, gamma)

    g = config.asym_g
    tau = inverse_tau(transform_tau(params[0], g), dx[0], g)
    cder = inverse_cder(transform_cder(params[1]), dx[1])
    lower, upper = config.bounds
    return np.clip(np.array([tau, cder]), lower, upper)


def retrieve(lut, observation, config=None, verbose=False):
    """Retrieve cloud optical thickness and effective radius.

    Parameters
    ----------
    lut : LookupTable
        Forward-model table. It is not modified.
    observation : array_like, shape (2,)
        Observed reflectances (surface contributions already applied to the
        table or the observation upstream).
    config : RetrievalConfig, optional
        Tunable constants; defaults to ``RetrievalConfig()``.
    verbose : bool
        Log the damping factor, parameters and cost of every iteration at
        INFO level instead of DEBUG.

    Returns
    -------
    RetrievalResult
        Best (tau, cder, cost) visited, how the run ended and the per
        iteration history.

    Raises
    ------
    LUTError
        If an axis of the table has fewer than 5 values.
    ValueError
        If the observation is not two finite reflectances or the iteration
        cap is not positive.
    """
    if config is None:
        config = RetrievalConfig()
    obs = np.asarray(observation, dtype=np.float64)
    if obs.shape != (2,):
        raise ValueError(f"Expected two observed reflectances, got shape {obs.shape}")
    if not np.all(np.isfinite(obs)):
        raise ValueError(f"Observed reflectances must be finite, got {obs}")
    if config.max_iter < 1:
        raise ValueError(f"max_iter must be positive, got {config.max_iter}")
    trace = logger.info if verbose else logger.debug

    estimator = ReflectanceEstimator(lut, config)
    s = config.inv_error_covariance
    tracker = StagnationTracker(config.stagnation_count)

    params = lut.initial_guess(obs)
    gamma = config.gamma_init
    prev_cost = config.initial_cost
    best_cost = np.inf
    best_params = params.copy()
    history = []
    status = RetrievalStatus.MAX_ITER_REACHED

    for step in range(1, config.max_iter + 1):
        evaluated = params.copy()
        est, k = estimator(*evaluated)
        cost = cost_function(obs, est, s)
        history.append(
            IterationRecord(step, gamma, evaluated[0], evaluated[1], est[0], est[1], cost)
        )
        trace(
            "step %d: gamma=%.3e tau=%.6g cder=%.6g ref=(%.6g, %.6g) cost=%.6e",
            step, gamma, evaluated[0], evaluated[1], est[0], est[1], cost,
        )

        if cost < config.threshold:
            status = RetrievalStatus.CONVERGED
            break

        change = prev_cost - cost
        negligible = change < config.diff_threshold
        if change >= 0:
            if tracker.update(True, negligible):
                status = RetrievalStatus.STAGNATED_IMPROVING
                break
            gamma *= config.gamma_decrease
            if cost < best_cost:
                best_cost = cost
                best_params = evaluated.copy()
            try:
                params = update_parameters(obs, est, evaluated, k, s, gamma, config)
            except LinAlgError as exc:
                logger.warning("Step %d: skipping parameter update (%s)", step, exc)
        else:
            if tracker.update(False, negligible):
                status = RetrievalStatus.STAGNATED_DEGRADING
                break
            gamma *= config.gamma_increase

        prev_cost = cost

    if cost < best_cost:
        best_cost = cost
        best_params = evaluated

    result = RetrievalResult(
        tau=float(best_params[0]),
        cder=float(best_params[1]),
        cost=float(best_cost),
        status=status,
        iterations=step,
        observation=(float(obs[0]), float(obs[1])),
        history=history,
    )
    logger.info(
        "Retrieval finished after %d iterations (%s): tau=%.6g cder=%.6g cost=%.6e",
        result.iterations, status.value, result.tau, result.cder, result.cost,
    )
    return result
