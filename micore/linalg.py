"""Small dense linear algebra for the damped normal equations.

Only the 2x2 case is needed by the retrieval, and that path is unrolled.
Larger symmetric positive-definite systems go through numpy's Cholesky
factorization with the same interface.
"""
import numpy as np
from numpy.linalg import LinAlgError


def _cholesky_solve_2x2(a, b):
    """Solve a 2x2 SPD system with an unrolled Cholesky factorization."""
    if a[0, 0] <= 0.0:
        raise LinAlgError("Matrix is not positive definite")
    l11 = np.sqrt(a[0, 0])
    l21 = a[0, 1] / l11
    schur = a[1, 1] - l21 ** 2
    if schur <= 0.0:
        raise LinAlgError("Matrix is not positive definite")
    l22 = np.sqrt(schur)

    # Forward substitution L z = b, then back substitution L^T x = z
    z1 = b[0] / l11
    z2 = (b[1] - l21 * z1) / l22
    x2 = z2 / l22
    x1 = (z1 - l21 * x2) / l11
    return np.array([x1, x2])


def _cholesky_solve_general(a, b):
    lower = np.linalg.cholesky(a)
    n = b.shape[0]
    z = np.empty(n)
    for i in range(n):
        z[i] = (b[i] - lower[i, :i] @ z[:i]) / lower[i, i]
    x = np.empty(n)
    for i in range(n - 1, -1, -1):
        x[i] = (z[i] - lower[i + 1:, i] @ x[i + 1:]) / lower[i, i]
    return x


def cholesky_solve(a, b):
    """Solve ``a x = b`` for symmetric positive-definite `a`.

    Parameters
    ----------
    a : array_like, shape (n, n)
        Symmetric positive-definite matrix. Only the upper triangle is read
        on the 2x2 path.
    b : array_like, shape (n,)
        Right-hand side.

    Returns
    -------
    np.ndarray, shape (n,)
        Solution vector.

    Raises
    ------
    numpy.linalg.LinAlgError
        If `a` is not positive definite.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1] or b.shape != (a.shape[0],):
        raise ValueError(f"Incompatible shapes {a.shape} and {b.shape}")
    if a.shape == (2, 2):
        return _cholesky_solve_2x2(a, b)
    return _cholesky_solve_general(a, b)


def damped_normal_step(k, s, residual, gamma):
    """Levenberg-Marquardt step from the damped normal equations.

    Solves ``(K^T S K + gamma I) dx = K^T S residual``.

    Parameters
    ----------
    k : np.ndarray, shape (m, n)
        Jacobian of the modelled observations w.r.t. the parameters.
    s : np.ndarray, shape (m, m)
        Inverse of the observation error covariance.
    residual : np.ndarray, shape (m,)
        Observed minus modelled values.
    gamma : float
        Damping factor, > 0.

    Returns
    -------
    np.ndarray, shape (n,)
        Parameter step.
    """
    kts = k.T @ s
    return cholesky_solve(kts @ k + gamma * np.eye(k.shape[1]), kts @ residual)
