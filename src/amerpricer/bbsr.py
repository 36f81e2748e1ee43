"""Binomial Black-Scholes with Richardson extrapolation (BBSR).

Two lattice prices at ``N`` and ``2N`` steps are combined as
``2 * BBS(2N) - BBS(N)``, cancelling the leading ``O(1/N)`` term of the
discretisation error.
"""

from __future__ import annotations

import logging

from .binomial import bbs_price
from .core import Contract, PUT

__all__ = ["richardson", "price_bbsr"]

logger = logging.getLogger(__name__)


def richardson(price_n: float, price_2n: float) -> float:
    """Two-point Richardson combination of prices at ``N`` and ``2N`` steps."""
    return 2.0 * price_2n - price_n


def price_bbsr(
    contract: Contract,
    step_count: int,
    *,
    kind: str = PUT,
    smoothing: bool = False,
) -> float:
    """Richardson-extrapolated American lattice price.

    Parameters
    ----------
    contract : Contract
    step_count : int
        Coarse step count ``N``; the fine tree uses ``2N``.
    kind : str
        ``"put"`` (default) or ``"call"``.
    smoothing : bool
        Use the Black-Scholes step at ``N-1`` in both lattices.

    Returns
    -------
    float
    """
    coarse = bbs_price(contract, step_count, kind, smoothing=smoothing)
    fine = bbs_price(contract, 2 * step_count, kind, smoothing=smoothing)
    price = richardson(coarse, fine)
    logger.debug("BBSR N=%d: BBS(N)=%.10f BBS(2N)=%.10f -> %.10f",
                 step_count, coarse, fine, price)
    return price
