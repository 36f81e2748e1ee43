"""Cross-engine check for a single contract.

Prices one contract with LSMC, BBSR and the closed-form European formula
and reports how far the two American engines are apart.
"""

from __future__ import annotations

from typing import Optional

from .bbsr import price_bbsr
from .black_scholes import european_price
from .core import Contract, PUT, check_kind
from .lsmc import price_lsmc

__all__ = ["compare_engines"]


def compare_engines(
    contract: Contract,
    kind: str = PUT,
    *,
    path_count: int = 20_000,
    lsmc_steps: int = 50,
    regressor_degree: int = 2,
    seed: Optional[int] = 42,
    step_count: int = 500,
    smoothing: bool = False,
) -> dict:
    """Price ``contract`` with every engine.

    Parameters
    ----------
    contract : Contract
    kind : str
    path_count, lsmc_steps, regressor_degree, seed
        LSMC settings.
    step_count, smoothing
        BBSR settings.

    Returns
    -------
    dict
        ``"lsmc"`` (price, stderr), ``"bbsr"``, ``"european"``,
        ``"early_exercise_premium"`` (BBSR minus European) and
        ``"discrepancy"`` (absolute LSMC-BBSR gap).
    """
    kind = check_kind(kind)
    lsmc = price_lsmc(contract, path_count, lsmc_steps, regressor_degree, seed,
                      kind=kind, return_stderr=True)
    bbsr = price_bbsr(contract, step_count, kind=kind, smoothing=smoothing)
    euro = european_price(contract, kind)

    return {
        "lsmc": lsmc,
        "bbsr": bbsr,
        "european": euro,
        "early_exercise_premium": bbsr - euro,
        "discrepancy": abs(lsmc[0] - bbsr),
    }
