from __future__ import annotations
from dataclasses import dataclass, replace as _replace

import numpy as np

from .errors import InvalidParameter

CALL = "call"
PUT  = "put"


@dataclass(frozen=True)
class Contract:
    """Contract and market inputs shared by every engine.

    Parameters
    ----------
    S0 : float
        Spot price.
    K : float
        Strike price.
    T : float
        Time to maturity in years.
    r : float
        Continuously-compounded risk-free rate.
    sigma : float
        Annualised volatility.
    q : float
        Continuous dividend yield (default 0).
    """
    S0: float
    K: float
    T: float          # years
    r: float          # continuous risk-free
    sigma: float
    q: float = 0.0    # continuous dividend yield

    def __post_init__(self):
        if not self.S0 > 0:
            raise InvalidParameter(f"S0 must be positive, got {self.S0}")
        if not self.K > 0:
            raise InvalidParameter(f"K must be positive, got {self.K}")
        if not self.T > 0:
            raise InvalidParameter(f"T must be positive, got {self.T}")
        if not self.sigma > 0:
            raise InvalidParameter(f"sigma must be positive, got {self.sigma}")
        if not self.q >= 0:
            raise InvalidParameter(f"q must be non-negative, got {self.q}")

    def replace(self, **changes) -> Contract:
        """Return a validated copy with some fields changed."""
        return _replace(self, **changes)


def check_kind(kind: str) -> str:
    """Normalise an option kind label to ``"call"`` or ``"put"``."""
    k = str(kind).strip().lower()
    if k in ("call", "c"):
        return CALL
    if k in ("put", "p"):
        return PUT
    raise InvalidParameter(f"kind must be 'call' or 'put', got {kind!r}")


def payoff(S, K: float, kind: str = PUT) -> np.ndarray:
    """Immediate exercise value, elementwise over ``S``."""
    S = np.asarray(S, dtype=float)
    if check_kind(kind) == CALL:
        return np.maximum(S - K, 0.0)
    return np.maximum(K - S, 0.0)
