"""Least-Squares Monte Carlo (Longstaff-Schwartz) pricer for American options.

Backward induction over a simulated path set.  At every exercise date the
discounted next-step cashflow of the in-the-money paths is regressed on the
current asset price; a path is exercised when its intrinsic value strictly
exceeds the fitted continuation value.  Out-of-the-money paths simply carry
their discounted cashflow back one step.

The first simulated date (column 0) holds ``S0`` on every path, so no
regression is run there: the price is the mean of the step-1 cashflows
discounted over one more step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .core import Contract, PUT, check_kind, payoff
from .errors import InvalidParameter, ShapeMismatch
from .processes import simulate_paths
from .regression import Basis, fit_and_predict

__all__ = [
    "Action",
    "Decision",
    "should_exercise",
    "exercise_decision",
    "aggregate",
    "lsmc_cashflows",
    "lsmc_price",
    "price_lsmc",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exercise decision
# ---------------------------------------------------------------------------
class Action(Enum):
    EXERCISE = "exercise"
    CONTINUE = "continue"


@dataclass(frozen=True)
class Decision:
    """Outcome of the exercise rule for one path at one date.

    ``value`` is the cashflow the path carries from that date: the intrinsic
    value when exercised, otherwise the discounted future cashflow.
    """
    action: Action
    value: float

    @property
    def exercised(self) -> bool:
        return self.action is Action.EXERCISE


def should_exercise(exercise_value, continuation_value):
    """Exercise rule, scalar or elementwise: intrinsic strictly above continuation."""
    return np.greater(exercise_value, continuation_value)


def exercise_decision(
    exercise_value: float, continuation_value: float, discounted_future: float
) -> Decision:
    """Apply the exercise rule to a single in-the-money path."""
    if should_exercise(exercise_value, continuation_value):
        return Decision(Action.EXERCISE, float(exercise_value))
    return Decision(Action.CONTINUE, float(discounted_future))


# ---------------------------------------------------------------------------
# Price aggregation
# ---------------------------------------------------------------------------
def aggregate(cashflows, disc: float, *, return_stderr: bool = False):
    """Discounted sample mean of per-path cashflows (and its standard error)."""
    x = disc * np.asarray(cashflows, dtype=float)
    n = x.size
    if n == 0:
        raise ShapeMismatch("cannot aggregate an empty path set")
    price = float(x.mean())
    if not return_stderr:
        return price
    se = float(x.std(ddof=1) / math.sqrt(n)) if n > 1 else float("nan")
    return price, se


# ---------------------------------------------------------------------------
# Backward induction
# ---------------------------------------------------------------------------
def _check_inputs(paths, contract: Contract, degree: int, n_steps: Optional[int]) -> np.ndarray:
    if int(degree) != degree or degree < 1:
        raise InvalidParameter(f"regression degree must be an integer >= 1, got {degree}")

    S = np.asarray(paths, dtype=float)
    if S.ndim != 2:
        raise ShapeMismatch(f"path set must be 2-D (paths, steps+1), got ndim={S.ndim}")
    if n_steps is not None and S.shape[1] != n_steps + 1:
        raise ShapeMismatch(
            f"path set has {S.shape[1]} columns, expected n_steps+1 = {n_steps + 1}"
        )
    if S.shape[0] < 1 or S.shape[1] < 2:
        raise ShapeMismatch(f"path set needs >= 1 path and >= 2 dates, got {S.shape}")
    if not np.all(np.isfinite(S)) or np.any(S <= 0.0):
        raise InvalidParameter("path prices must be finite and strictly positive")
    if not np.allclose(S[:, 0], contract.S0, rtol=1e-12, atol=0.0):
        raise InvalidParameter("first column of the path set must equal S0")
    return S


def _backward_pass(
    S: np.ndarray,
    contract: Contract,
    degree: int,
    kind: str,
    basis: Basis,
    grid: Optional[np.ndarray],
) -> tuple[np.ndarray, float]:
    """Run the induction from maturity down to step 1.

    The exercise mask comes from :func:`should_exercise`, the same rule
    :func:`exercise_decision` applies to a single path, so each in-the-money
    cell is ``Decision.value`` of the corresponding per-path decision.  A
    step with no more distinct in-the-money prices than ``degree`` is
    treated like one with none in the money.

    Returns the step-1 cashflows and the one-step discount factor.  When
    ``grid`` is given every column is written exactly once, in decreasing
    order, with column 0 holding the step-1 cashflows discounted to today.
    """
    n_paths, n_cols = S.shape
    n_steps = n_cols - 1
    K = contract.K
    dt = contract.T / n_steps
    disc = math.exp(-contract.r * dt)

    V = payoff(S[:, -1], K, kind)
    if grid is not None:
        grid[:, -1] = V

    n_exercised = 0
    for t in range(n_steps - 1, 0, -1):
        V = disc * V
        exercise = payoff(S[:, t], K, kind)
        itm = exercise > 0.0

        n_distinct = np.unique(S[itm, t]).size
        if 0 < n_distinct <= degree:
            # too thin a cross-section to fit: every path continues
            logger.debug("LSMC step %d: %d distinct in-the-money price(s), "
                         "skipping regression", t, n_distinct)
        elif n_distinct:
            cont = fit_and_predict(S[itm, t], V[itm], degree, basis=basis, scale=K)
            ex_now = should_exercise(exercise[itm], cont)
            V[itm] = np.where(ex_now, exercise[itm], V[itm])
            n_exercised += int(ex_now.sum())

        if grid is not None:
            grid[:, t] = V

    if grid is not None:
        grid[:, 0] = disc * V

    logger.debug("LSMC backward pass: %d paths, %d steps, %d exercise decisions",
                 n_paths, n_steps, n_exercised)
    return V, disc


def lsmc_cashflows(
    paths,
    contract: Contract,
    degree: int,
    kind: str = PUT,
    *,
    n_steps: Optional[int] = None,
    basis: Basis = "power",
) -> np.ndarray:
    """Full cashflow matrix of the backward induction.

    Cell ``(i, t)`` is the value realised on path ``i`` as of date ``t``.
    The last column is the terminal payoff and column 0 is the step-1
    cashflow discounted to today, so ``grid[:, 0].mean()`` is the price.

    Returns
    -------
    ndarray, same shape as ``paths``
    """
    kind = check_kind(kind)
    S = _check_inputs(paths, contract, degree, n_steps)
    grid = np.empty_like(S)
    _backward_pass(S, contract, int(degree), kind, basis, grid)
    return grid


def lsmc_price(
    paths,
    contract: Contract,
    degree: int,
    kind: str = PUT,
    *,
    n_steps: Optional[int] = None,
    basis: Basis = "power",
    return_stderr: bool = False,
):
    """Price an American option on a pre-simulated path set.

    Parameters
    ----------
    paths : ndarray, shape (n_paths, n_steps+1)
        Asset paths whose first column equals ``contract.S0``.
    contract : Contract
    degree : int
        Polynomial order of the continuation regression, >= 1.
    kind : str
        ``"put"`` (default) or ``"call"``.
    n_steps : int, optional
        Expected number of time steps; checked against ``paths``.
    basis : str
        ``"power"`` or ``"laguerre"`` regressors of ``S/K``.
    return_stderr : bool
        Also return the Monte Carlo standard error.

    Returns
    -------
    float or (float, float)
    """
    kind = check_kind(kind)
    S = _check_inputs(paths, contract, degree, n_steps)
    V, disc = _backward_pass(S, contract, int(degree), kind, basis, None)
    return aggregate(V, disc, return_stderr=return_stderr)


def price_lsmc(
    contract: Contract,
    path_count: int,
    step_count: int,
    regressor_degree: int,
    rng_seed: Optional[int] = None,
    *,
    kind: str = PUT,
    antithetic: bool = False,
    basis: Basis = "power",
    n_workers: int = 1,
    return_stderr: bool = False,
):
    """Simulate GBM paths for ``contract`` and price them with LSMC.

    The same ``rng_seed`` always reproduces the same price.
    """
    kind = check_kind(kind)
    if int(regressor_degree) != regressor_degree or regressor_degree < 1:
        raise InvalidParameter(
            f"regressor_degree must be an integer >= 1, got {regressor_degree}"
        )

    paths = simulate_paths(
        contract, step_count, path_count, seed=rng_seed,
        antithetic=antithetic, n_workers=n_workers,
    )
    result = lsmc_price(
        paths, contract, regressor_degree, kind,
        n_steps=step_count, basis=basis, return_stderr=return_stderr,
    )
    logger.debug("price_lsmc(M=%d, N=%d, k=%d, seed=%s) -> %s",
                 path_count, step_count, regressor_degree, rng_seed, result)
    return result
