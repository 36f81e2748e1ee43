"""Tests for the CRR lattice and the BBS pricer."""

import numpy as np
import pytest

from amerpricer import Contract, CALL, PUT, InvalidParameter
from amerpricer.binomial import bbs_price, build_lattice
from amerpricer.black_scholes import bs_price, european_price

OPT = Contract(S0=100.0, K=100.0, T=1 / 12, r=0.04, sigma=0.2, q=0.02)


class TestLattice:
    def test_parameters(self):
        lat = build_lattice(OPT, 100)
        assert lat.dt == pytest.approx(OPT.T / 100)
        assert lat.u * lat.d == pytest.approx(1.0)
        assert 0.0 < lat.p < 1.0

    def test_recombining_grid(self):
        lat = build_lattice(OPT, 6)
        G = lat.grid()
        assert G.shape == (7, 7)
        for i in range(1, 7):
            assert G[i, 0] == G[i - 1, 0] * lat.u
            assert np.array_equal(G[i, 1:i + 1], G[i - 1, :i] * lat.d)
            # step i holds i+1 nodes
            assert np.sum(np.isfinite(G[i])) == i + 1
            assert np.all(np.isnan(G[i, i + 1:]))

    def test_prices_at_matches_grid(self):
        lat = build_lattice(OPT, 8)
        G = lat.grid()
        for i in range(9):
            assert np.allclose(lat.prices_at(i), G[i, :i + 1], rtol=1e-12)

    def test_prices_at_out_of_range(self):
        lat = build_lattice(OPT, 4)
        with pytest.raises(InvalidParameter):
            lat.prices_at(5)

    @pytest.mark.parametrize("r", [0.5, -0.5])
    def test_probability_out_of_range(self, r):
        """One coarse step with tiny vol cannot absorb a large rate."""
        c = Contract(S0=100.0, K=100.0, T=1.0, r=r, sigma=0.01)
        with pytest.raises(InvalidParameter):
            build_lattice(c, 1)

    def test_refining_restores_probability(self):
        c = Contract(S0=100.0, K=100.0, T=1.0, r=0.5, sigma=0.01)
        assert 0.0 < build_lattice(c, 20_000).p < 1.0

    @pytest.mark.parametrize("N", [0, -3, 2.5])
    def test_bad_step_count(self, N):
        with pytest.raises(InvalidParameter):
            build_lattice(OPT, N)


class TestBBSPrice:
    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_european_converges_to_black_scholes(self, kind):
        tree = bbs_price(OPT, 800, kind, american=False)
        assert tree == pytest.approx(european_price(OPT, kind), abs=1e-2)

    def test_american_put_not_below_european(self):
        american = bbs_price(OPT, 600, PUT)
        european = bbs_price(OPT, 600, PUT, american=False)
        assert american >= european

    def test_american_call_without_dividend_equals_european(self):
        c = OPT.replace(q=0.0)
        assert bbs_price(c, 300, CALL) == pytest.approx(
            bbs_price(c, 300, CALL, american=False), abs=1e-12)

    def test_deep_in_the_money_put_is_intrinsic(self):
        c = Contract(S0=50.0, K=100.0, T=0.5, r=0.08, sigma=0.2)
        assert bbs_price(c, 200, PUT) == pytest.approx(50.0, abs=1e-9)

    def test_deterministic(self):
        assert bbs_price(OPT, 500) == bbs_price(OPT, 500)

    def test_one_step_tree(self):
        lat = build_lattice(OPT, 1)
        up, down = OPT.S0 * lat.u, OPT.S0 * lat.d
        cont = lat.disc * (lat.p * max(OPT.K - up, 0.0) + (1 - lat.p) * max(OPT.K - down, 0.0))
        assert bbs_price(OPT, 1) == pytest.approx(max(cont, 0.0), rel=1e-12)


class TestSmoothing:
    def test_european_smoothing_close_to_black_scholes(self):
        tree = bbs_price(OPT, 200, PUT, american=False, smoothing=True)
        assert tree == pytest.approx(european_price(OPT, PUT), abs=2e-3)

    def test_last_step_uses_black_scholes(self):
        """With two steps the root is one lattice step over BS values."""
        lat = build_lattice(OPT, 2)
        S1 = lat.prices_at(1)
        V1 = bs_price(S1, OPT.K, lat.dt, OPT.r, OPT.q, OPT.sigma, PUT)
        expected = lat.disc * (lat.p * V1[0] + (1 - lat.p) * V1[1])
        assert bbs_price(OPT, 2, american=False, smoothing=True) == pytest.approx(expected)

    def test_american_smoothed_agrees_with_plain(self):
        smooth = bbs_price(OPT, 1000, smoothing=True)
        plain = bbs_price(OPT, 1000)
        assert abs(smooth - plain) < 5e-3
