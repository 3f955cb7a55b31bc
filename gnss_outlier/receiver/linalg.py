"""Small dense solves for the 3- and 4-parameter normal equations."""

from __future__ import annotations

import numpy as np

from gnss_outlier.errors import SingularMatrixError

MAX_PARAMS = 4


def regularize(normal: np.ndarray, regularization: float) -> np.ndarray:
    """Return ``normal + regularization * I``."""

    return normal + regularization * np.eye(normal.shape[0])


def solve_normal_equations(
    normal: np.ndarray,
    rhs: np.ndarray,
    regularization: float = 0.0,
    max_condition_number: float = 1e12,
) -> np.ndarray:
    """Solve ``(normal + regularization * I) @ x = rhs`` for at most four unknowns.

    Conditioning is judged on ``normal`` before the regularization term is
    added, so a rank-deficient geometry is still reported as singular.

    Raises:
        SingularMatrixError: if the matrix has non-finite entries, is
            ill-conditioned beyond ``max_condition_number``, or LAPACK
            reports it singular.
    """

    n = normal.shape[0]
    if normal.shape != (n, n) or rhs.shape != (n,) or not 0 < n <= MAX_PARAMS:
        raise ValueError(f"Expected a square system with 1..{MAX_PARAMS} unknowns, got {normal.shape}")
    if not (np.all(np.isfinite(normal)) and np.all(np.isfinite(rhs))):
        raise SingularMatrixError("Normal equations contain non-finite values")
    cond = float(np.linalg.cond(normal))
    if not np.isfinite(cond) or cond > max_condition_number:
        raise SingularMatrixError(f"Normal matrix is ill-conditioned (cond={cond:.3e})")
    try:
        return np.linalg.solve(regularize(normal, regularization), rhs)
    except np.linalg.LinAlgError as exc:
        raise SingularMatrixError(str(exc)) from exc


def covariance_from_normal(normal: np.ndarray) -> np.ndarray:
    """Invert the normal matrix, or return NaNs if it cannot be inverted."""

    try:
        return np.linalg.inv(normal)
    except np.linalg.LinAlgError:
        return np.full(normal.shape, np.nan)
