"""Repository interface and in-memory store."""

from microfinance.store.financial import PortfolioStore
from microfinance.store.repository import LoanRepository

__all__ = ["LoanRepository", "PortfolioStore"]
