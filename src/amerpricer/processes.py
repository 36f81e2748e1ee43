# processes.py
# Path generator for Monte Carlo pricing.
# Returns an array of shape (n_paths, n_steps+1) whose first column is S0.
# Paths are simulated in chunks, each drawing from its own child of one
# SeedSequence, so a given seed yields the same paths for any worker count.

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Optional

import numpy as np

from .core import Contract
from .errors import InvalidParameter

__all__ = [
    "gbm_paths",
    "simulate_paths",
]

logger = logging.getLogger(__name__)


def _gbm_chunk(
    n: int,
    *,
    S0: float, drift: float, vol: float, n_steps: int,
    antithetic: bool, seed: np.random.SeedSequence,
) -> np.ndarray:
    """Simulate ``n`` paths column by column from one independent stream."""
    rng = np.random.default_rng(seed)
    S = np.empty((n, n_steps + 1), dtype=float)
    S[:, 0] = S0
    half = n // 2 if antithetic else n

    for t in range(1, n_steps + 1):
        Z = rng.standard_normal(half)
        if antithetic:
            Z = np.concatenate([Z, -Z])
        S[:, t] = S[:, t - 1] * np.exp(drift + vol * Z)

    return S


def _plan_chunks(n_paths: int, chunk_size: int, antithetic: bool) -> list[int]:
    if antithetic and chunk_size % 2:
        chunk_size += 1
    chunks = []
    remaining = int(n_paths)
    while remaining > 0:
        m = min(chunk_size, remaining)
        chunks.append(m)
        remaining -= m
    return chunks


def gbm_paths(
    S0: float, r: float, q: float, sigma: float,
    T: float, n_steps: int, n_paths: int,
    *, seed: Optional[int] = None, antithetic: bool = False,
    chunk_size: int = 50_000, n_workers: int = 1,
) -> np.ndarray:
    """
    Exact-discretization GBM under Q:
        dS/S = (r - q) dt + sigma dW
        S_{t+dt} = S_t * exp((r - q - 0.5*sigma^2) dt + sigma * sqrt(dt) * Z)

    One fresh standard normal is drawn per (path, step) cell.  With
    ``antithetic=True`` the second half of every chunk reuses the first
    half's draws with the sign flipped, so ``n_paths`` must be even.

    Returns
    -------
    ndarray, shape (n_paths, n_steps+1)
    """
    if n_steps <= 0 or n_paths <= 0:
        raise InvalidParameter("n_steps and n_paths must be positive.")
    if sigma <= 0:
        raise InvalidParameter(f"sigma must be positive, got {sigma}")
    if S0 <= 0 or T <= 0:
        raise InvalidParameter("S0 and T must be positive.")
    if chunk_size <= 0:
        raise InvalidParameter("chunk_size must be positive.")
    if antithetic and n_paths % 2:
        raise InvalidParameter("n_paths must be even when antithetic=True.")

    dt = T / n_steps
    drift = (r - q - 0.5 * sigma * sigma) * dt
    vol = sigma * np.sqrt(dt)

    chunks = _plan_chunks(n_paths, chunk_size, antithetic)
    child_seeds = np.random.SeedSequence(seed).spawn(len(chunks))
    kwargs = dict(S0=S0, drift=drift, vol=vol, n_steps=n_steps, antithetic=antithetic)

    logger.debug("Simulating %d paths x %d steps in %d chunk(s), workers=%d",
                 n_paths, n_steps, len(chunks), n_workers)

    if n_workers <= 1 or len(chunks) == 1:
        blocks = [_gbm_chunk(m, seed=ss, **kwargs) for m, ss in zip(chunks, child_seeds)]
    else:
        # results are collected in submission order to keep paths reproducible
        with ProcessPoolExecutor(max_workers=n_workers) as ex:
            futs = [ex.submit(_gbm_chunk, m, seed=ss, **kwargs)
                    for m, ss in zip(chunks, child_seeds)]
            blocks = [f.result() for f in futs]

    return blocks[0] if len(blocks) == 1 else np.vstack(blocks)


def simulate_paths(
    contract: Contract, n_steps: int, n_paths: int,
    *, seed: Optional[int] = None, **kwargs,
) -> np.ndarray:
    """Simulate GBM paths for a :class:`Contract`."""
    return gbm_paths(
        contract.S0, contract.r, contract.q, contract.sigma, contract.T,
        n_steps, n_paths, seed=seed, **kwargs,
    )
