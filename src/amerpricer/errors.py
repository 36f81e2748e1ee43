"""Exception hierarchy for the pricing core.

All errors derive from ``ValueError`` so callers that already guard pricer
calls with ``except ValueError`` keep working.
"""

from __future__ import annotations

__all__ = [
    "PricingError",
    "InvalidParameter",
    "DegenerateRegression",
    "ShapeMismatch",
]


class PricingError(ValueError):
    """Base class for every failure raised by a pricing call."""


class InvalidParameter(PricingError):
    """A contract value, count, or derived lattice probability is out of range."""


class DegenerateRegression(PricingError):
    """The continuation-value regression cannot be fitted at some step."""


class ShapeMismatch(PricingError):
    """A path set does not have the dimensions the pricer was asked for."""
