"""Domain models for loan and chit fund computations."""

from microfinance.models.base import ZERO, PeriodRange, as_money

__all__ = ["PeriodRange", "ZERO", "as_money"]
