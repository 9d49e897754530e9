"""Microfinance domain generators."""

from microfinance.generators.financial.chit_fund import ChitFundGenerator
from microfinance.generators.financial.loan import LoanGenerator

__all__ = [
    "ChitFundGenerator",
    "LoanGenerator",
]
