"""Cross-sectional least-squares regression for continuation values.

The regression is stateless: ``fit_and_predict`` builds the design matrix,
solves the least-squares problem and evaluates the fit in one call, so no
fitted model outlives the time step it was built for.
"""

from __future__ import annotations

from typing import Literal, Optional

import numpy as np

from .errors import DegenerateRegression, InvalidParameter

__all__ = [
    "design_matrix",
    "fit_and_predict",
]

Basis = Literal["power", "laguerre"]


def _laguerre_basis(x: np.ndarray, degree: int) -> np.ndarray:
    n = x.shape[0]
    L = np.empty((n, degree + 1), dtype=float)
    L[:, 0] = 1.0
    if degree >= 1:
        L[:, 1] = 1.0 - x
    # Three-term recurrence: (k+1) L_{k+1} = (2k+1-x) L_k - k L_{k-1}
    for k in range(1, degree):
        L[:, k + 1] = ((2.0 * k + 1.0 - x) * L[:, k] - k * L[:, k - 1]) / (k + 1.0)
    return L


def design_matrix(
    x,
    degree: int,
    basis: Basis = "power",
    scale: Optional[float] = None,
) -> np.ndarray:
    """Regressor columns ``[1, z, z^2, ...]`` (or Laguerre ``L_0..L_k``) of ``z = x/scale``.

    Parameters
    ----------
    x : array-like
        Regressor values (asset prices).
    degree : int
        Highest polynomial order, >= 0.
    basis : str
        ``"power"`` (default) or ``"laguerre"``.
    scale : float, optional
        Positive normalisation applied before evaluating the basis.  Prices
        are usually scaled by the strike to keep the system well conditioned.

    Returns
    -------
    ndarray, shape (len(x), degree+1)
    """
    z = np.asarray(x, dtype=float).reshape(-1)
    if degree < 0:
        raise InvalidParameter("degree must be >= 0")
    if scale is not None:
        if scale <= 0:
            raise InvalidParameter("scale must be positive if provided.")
        z = z / float(scale)

    if basis == "power":
        return np.vander(z, degree + 1, increasing=True)
    if basis == "laguerre":
        return _laguerre_basis(z, degree)
    raise InvalidParameter(f"Unknown basis={basis!r}")


def fit_and_predict(
    xs,
    ys,
    degree: int,
    query_xs=None,
    *,
    basis: Basis = "power",
    scale: Optional[float] = None,
) -> np.ndarray:
    """Fit ``ys ~ poly(xs)`` by ordinary least squares and evaluate at ``query_xs``.

    ``query_xs`` defaults to ``xs`` (in-sample fitted values).

    Raises
    ------
    DegenerateRegression
        If there are fewer distinct ``xs`` than coefficients, or the inputs
        are not finite.
    """
    xs = np.asarray(xs, dtype=float).reshape(-1)
    ys = np.asarray(ys, dtype=float).reshape(-1)
    if xs.shape != ys.shape:
        raise DegenerateRegression(
            f"xs and ys differ in length ({xs.size} vs {ys.size})"
        )

    n_distinct = np.unique(xs).size
    if n_distinct <= degree:
        raise DegenerateRegression(
            f"{n_distinct} distinct regressor value(s) cannot identify a "
            f"degree-{degree} polynomial"
        )
    if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
        raise DegenerateRegression("regression inputs contain non-finite values")

    X = design_matrix(xs, degree, basis, scale)
    beta, _, _, _ = np.linalg.lstsq(X, ys, rcond=None)

    X_pred = X if query_xs is None else design_matrix(query_xs, degree, basis, scale)
    return X_pred @ beta
