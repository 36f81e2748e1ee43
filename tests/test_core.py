import numpy as np
import pytest

from amerpricer import Contract, CALL, PUT, payoff, InvalidParameter, PricingError
from amerpricer.core import check_kind


class TestContract:
    def test_valid_contract(self):
        c = Contract(S0=100, K=100, T=1 / 12, r=0.04, sigma=0.2, q=0.02)
        assert c.S0 == 100 and c.q == 0.02

    def test_dividend_defaults_to_zero(self):
        assert Contract(S0=100, K=95, T=1.0, r=0.05, sigma=0.2).q == 0.0

    @pytest.mark.parametrize("field, value", [
        ("S0", 0.0), ("S0", -1.0), ("K", 0.0), ("T", 0.0), ("T", -0.5),
        ("sigma", 0.0), ("sigma", -0.2), ("q", -0.01),
        ("S0", float("nan")), ("K", float("nan")), ("T", float("nan")),
        ("sigma", float("nan")), ("q", float("nan")),
    ])
    def test_rejects_out_of_range(self, field, value):
        kwargs = dict(S0=100, K=100, T=1.0, r=0.05, sigma=0.2, q=0.0)
        kwargs[field] = value
        with pytest.raises(InvalidParameter):
            Contract(**kwargs)

    def test_negative_rate_allowed(self):
        assert Contract(S0=100, K=100, T=1.0, r=-0.01, sigma=0.2).r == -0.01

    def test_is_immutable(self):
        c = Contract(S0=100, K=100, T=1.0, r=0.05, sigma=0.2)
        with pytest.raises(AttributeError):
            c.S0 = 90

    def test_replace_revalidates(self):
        c = Contract(S0=100, K=100, T=1.0, r=0.05, sigma=0.2)
        assert c.replace(K=110).K == 110
        with pytest.raises(InvalidParameter):
            c.replace(sigma=0.0)

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidParameter, PricingError)
        assert issubclass(PricingError, ValueError)


class TestPayoff:
    def test_put(self):
        S = np.array([80.0, 100.0, 120.0])
        assert np.array_equal(payoff(S, 100.0, PUT), [20.0, 0.0, 0.0])

    def test_call(self):
        S = np.array([80.0, 100.0, 120.0])
        assert np.array_equal(payoff(S, 100.0, CALL), [0.0, 0.0, 20.0])

    def test_kind_aliases(self):
        assert check_kind("P") == PUT
        assert check_kind(" Call ") == CALL

    def test_unknown_kind(self):
        with pytest.raises(InvalidParameter):
            payoff(100.0, 100.0, "straddle")
