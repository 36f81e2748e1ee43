"""Tests for Richardson-extrapolated BBS (BBSR)."""

import pytest

from amerpricer import Contract, CALL, PUT
from amerpricer.bbsr import price_bbsr, richardson
from amerpricer.binomial import bbs_price
from amerpricer.black_scholes import european_price

OPT = Contract(S0=100.0, K=100.0, T=1 / 12, r=0.04, sigma=0.2, q=0.02)


class TestRichardson:
    def test_combination(self):
        assert richardson(1.0, 1.5) == 2.0

    def test_identity_with_direct_lattices(self):
        for N in (25, 100, 333):
            expected = 2.0 * bbs_price(OPT, 2 * N) - bbs_price(OPT, N)
            assert price_bbsr(OPT, N) == expected


class TestPriceBBSR:
    def test_reference_scenario(self):
        px = price_bbsr(OPT, 5000)
        assert abs(px - 2.23) < 0.05, f"BBSR={px:.4f}"

    def test_deterministic(self):
        assert price_bbsr(OPT, 400) == price_bbsr(OPT, 400)

    def test_not_below_european(self):
        assert price_bbsr(OPT, 500) > european_price(OPT, PUT) - 5e-3

    def test_converged(self):
        assert price_bbsr(OPT, 1000) == pytest.approx(bbs_price(OPT, 8000), abs=1e-2)

    def test_call_without_dividend_matches_black_scholes(self):
        c = OPT.replace(q=0.0)
        assert price_bbsr(c, 500, kind=CALL) == pytest.approx(
            european_price(c, CALL), abs=1e-2)

    def test_smoothing(self):
        assert price_bbsr(OPT, 500, smoothing=True) == pytest.approx(
            price_bbsr(OPT, 500), abs=1e-2)
