"""Recombining CRR lattice and the Binomial Black-Scholes (BBS) pricer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import exp, sqrt

import numpy as np

from .black_scholes import bs_price
from .core import Contract, PUT, check_kind, payoff
from .errors import InvalidParameter

__all__ = ["Lattice", "build_lattice", "bbs_price"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lattice:
    """Cox-Ross-Rubinstein tree parameters for one contract and step count.

    Node ``j`` at step ``i`` (``0 <= j <= i``) is reached by ``i - j`` up moves
    and ``j`` down moves, so step ``i`` holds ``i + 1`` nodes.
    """
    S0: float
    N: int
    dt: float
    u: float
    d: float
    p: float
    disc: float

    def prices_at(self, step: int) -> np.ndarray:
        """Asset prices of the ``step + 1`` nodes at one step."""
        if not 0 <= step <= self.N:
            raise InvalidParameter(f"step must lie in [0, {self.N}], got {step}")
        j = np.arange(step + 1)
        return self.S0 * (self.u ** (step - j)) * (self.d ** j)

    def grid(self) -> np.ndarray:
        """Triangular ``(N+1, N+1)`` price grid, built one step from the last.

        ``grid[i, 0] = grid[i-1, 0] * u`` and ``grid[i, j] = grid[i-1, j-1] * d``;
        cells above the diagonal are NaN.
        """
        G = np.full((self.N + 1, self.N + 1), np.nan)
        G[0, 0] = self.S0
        for i in range(1, self.N + 1):
            G[i, 0] = G[i - 1, 0] * self.u
            G[i, 1:i + 1] = G[i - 1, :i] * self.d
        return G


def build_lattice(contract: Contract, N: int) -> Lattice:
    """CRR lattice with ``u = exp(sigma sqrt(dt))``, ``d = 1/u``.

    Raises
    ------
    InvalidParameter
        If ``N < 1`` or the risk-neutral probability falls outside (0, 1),
        which happens when ``dt`` is too coarse for the rate/yield spread.
    """
    if int(N) != N or N < 1:
        raise InvalidParameter(f"N must be a positive integer, got {N}")
    N = int(N)
    dt = contract.T / N
    u  = exp(contract.sigma * sqrt(dt))
    d  = 1.0 / u
    disc = exp(-contract.r * dt)
    p = (exp((contract.r - contract.q) * dt) - d) / (u - d)
    if not (0.0 < p < 1.0):
        raise InvalidParameter(
            f"Risk-neutral prob p={p:.6g} out of (0,1); try larger N or different params."
        )
    return Lattice(S0=contract.S0, N=N, dt=dt, u=u, d=d, p=p, disc=disc)


def bbs_price(
    contract: Contract,
    N: int,
    kind: str = PUT,
    *,
    american: bool = True,
    smoothing: bool = False,
) -> float:
    """Backward induction over an ``N``-step lattice.

    Terminal values are the payoff at each final node.  At every earlier node
    the value is ``max(disc * (p V_up + (1-p) V_down), payoff)``; with
    ``american=False`` the exercise value is ignored.

    With ``smoothing=True`` the continuation values at step ``N-1`` are the
    Black-Scholes European prices over the last ``dt`` instead of the
    one-step expectation of the terminal payoff.

    Deterministic: identical inputs give bit-identical prices.
    """
    kind = check_kind(kind)
    lat = build_lattice(contract, N)
    K, p, disc = contract.K, lat.p, lat.disc

    if smoothing:
        S_k = lat.prices_at(lat.N - 1)
        V = np.asarray(bs_price(S_k, K, lat.dt, contract.r, contract.q, contract.sigma, kind),
                       dtype=float)
        if american:
            V = np.maximum(V, payoff(S_k, K, kind))
        start = lat.N - 2
    else:
        V = payoff(lat.prices_at(lat.N), K, kind)
        start = lat.N - 1

    # Node j at step k averages its up child j and down child j+1
    for k in range(start, -1, -1):
        V = disc * (p * V[:-1] + (1.0 - p) * V[1:])
        if american:
            V = np.maximum(V, payoff(lat.prices_at(k), K, kind))

    price = float(V[0])
    logger.debug("BBS N=%d kind=%s american=%s smoothing=%s: u=%.6g p=%.6g -> %.10f",
                 lat.N, kind, american, smoothing, lat.u, p, price)
    return price
