"""Scenarios for generating realistic microfinance portfolios."""

from microfinance.scenarios.portfolio import PortfolioScenario

__all__ = ["PortfolioScenario"]
