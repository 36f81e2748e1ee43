# amerpricer — American option pricing: LSMC and BBSR
# Public API

from .core import Contract, CALL, PUT, payoff
from .errors import PricingError, InvalidParameter, DegenerateRegression, ShapeMismatch

# Path simulation & regression
from .processes import gbm_paths, simulate_paths
from .regression import design_matrix, fit_and_predict

# Least-Squares Monte Carlo
from .lsmc import (
    Action, Decision, should_exercise, exercise_decision,
    aggregate, lsmc_cashflows, lsmc_price, price_lsmc,
)

# Lattice & Richardson extrapolation
from .binomial import Lattice, build_lattice, bbs_price
from .bbsr import richardson, price_bbsr

# European benchmark & cross-check
from .black_scholes import bs_price, european_price
from .validation import compare_engines

__all__ = [
    "Contract", "CALL", "PUT", "payoff",
    "PricingError", "InvalidParameter", "DegenerateRegression", "ShapeMismatch",
    "gbm_paths", "simulate_paths",
    "design_matrix", "fit_and_predict",
    "Action", "Decision", "should_exercise", "exercise_decision",
    "aggregate", "lsmc_cashflows", "lsmc_price", "price_lsmc",
    "Lattice", "build_lattice", "bbs_price",
    "richardson", "price_bbsr",
    "bs_price", "european_price",
    "compare_engines",
]

__version__ = "0.1.0"
