# black_scholes.py
# Closed-form European prices with a continuous dividend yield.
# Inputs accept scalars *or* NumPy arrays and broadcast.

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from .core import Contract, CALL, PUT, check_kind

__all__ = ["bs_price", "european_price"]

_N = norm.cdf   # vectorised standard-normal CDF


def _d1_d2(S, K, T, r, q, sigma):
    """Compute d1, d2 arrays.  All inputs broadcast."""
    sqrt_T = np.sqrt(T)
    sig_sqrt_T = sigma * sqrt_T
    d1 = (np.log(S / K) + (r - q + 0.5 * sigma * sigma) * T) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    return d1, d2


def bs_price(S, K, T, r, q, sigma, kind: str = PUT):
    """Black-Scholes price of a European call or put.

    Returns
    -------
    float or np.ndarray
        A float for scalar inputs, otherwise an array of the broadcast shape.
    """
    S, K, T, r, q, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, q, sigma))
    d1, d2 = _d1_d2(S, K, T, r, q, sigma)
    disc_r = np.exp(-r * T)
    disc_q = np.exp(-q * T)

    if check_kind(kind) == CALL:
        px = disc_q * S * _N(d1) - disc_r * K * _N(d2)
    else:
        px = disc_r * K * _N(-d2) - disc_q * S * _N(-d1)
    return float(px) if np.ndim(px) == 0 else px


def european_price(contract: Contract, kind: str = PUT) -> float:
    """European benchmark for a :class:`Contract`."""
    c = contract
    return float(bs_price(c.S0, c.K, c.T, c.r, c.q, c.sigma, kind))
