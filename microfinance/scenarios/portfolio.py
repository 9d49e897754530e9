"""Portfolio scenario: loans and chit funds with a realistic payment history."""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Any

from microfinance.calculators.aggregator import aggregate_lifetime
from microfinance.config import GeneratorConfig
from microfinance.generators.financial import ChitFundGenerator, LoanGenerator
from microfinance.models.financial import ChitFundType, LoanStatus, RepaymentCadence
from microfinance.store.financial import PortfolioStore

logger = logging.getLogger(__name__)


class PortfolioScenario:
    """Generate a microfinance portfolio.

    This scenario creates:
    - Monthly and weekly loans with repayments, some missed or interest-only
    - Auction and fixed chit funds with member contributions and auctions
    - Derived overdue state on every loan, consistent with its repayments
    """

    def __init__(
        self,
        num_loans: int = 20,
        num_chit_funds: int = 5,
        weekly_loan_rate: float = 0.30,
        fixed_chit_fund_rate: float = 0.40,
        seed: int | None = None,
        as_of: datetime | None = None,
        *,
        config: GeneratorConfig | None = None,
    ) -> None:
        """Initialize portfolio scenario.

        Parameters
        ----------
        num_loans : int
            Number of loans to generate.
        num_chit_funds : int
            Number of chit funds to generate.
        weekly_loan_rate : float
            Share of loans repaid weekly (0.0 to 1.0).
        fixed_chit_fund_rate : float
            Share of chit funds using the fixed payout convention.
        seed : int | None
            Random seed for reproducibility.
        as_of : datetime | None
            Instant the generated history runs up to; defaults to now.
        config : GeneratorConfig | None
            Optional generator configuration. If provided, overrides the
            counts, rates and locale.
        """
        locale = "en_IN"
        if config is not None:
            num_loans = config.num_loans
            num_chit_funds = config.num_chit_funds
            weekly_loan_rate = config.weekly_loan_rate
            fixed_chit_fund_rate = config.fixed_chit_fund_rate
            locale = config.locale

        self.num_loans = num_loans
        self.num_chit_funds = num_chit_funds
        self.weekly_loan_rate = weekly_loan_rate
        self.fixed_chit_fund_rate = fixed_chit_fund_rate
        self.seed = seed
        self.as_of = as_of or datetime.now()

        if seed is not None:
            random.seed(seed)

        self.store = PortfolioStore()
        self._loan_gen = LoanGenerator(seed=seed, locale=locale, as_of=self.as_of)
        self._chit_fund_gen = ChitFundGenerator(seed=seed, locale=locale, as_of=self.as_of)

    def generate(self) -> PortfolioStore:
        """Generate all data for the portfolio scenario.

        Returns
        -------
        PortfolioStore
            Store containing all generated data.
        """
        logger.info(
            "Starting portfolio scenario: %d loans (%.0f%% weekly), %d chit funds",
            self.num_loans,
            self.weekly_loan_rate * 100,
            self.num_chit_funds,
        )

        num_weekly = int(self.num_loans * self.weekly_loan_rate)
        for i in range(self.num_loans):
            cadence = RepaymentCadence.WEEKLY if i < num_weekly else RepaymentCadence.MONTHLY
            loan, repayments = self._loan_gen.generate_with_repayments(cadence)
            self.store.add_loan(loan)
            for repayment in repayments:
                self.store.add_repayment(repayment)

        num_fixed = int(self.num_chit_funds * self.fixed_chit_fund_rate)
        for i in range(self.num_chit_funds):
            fund_type = ChitFundType.FIXED if i < num_fixed else ChitFundType.AUCTION
            fund, contributions, auctions = self._chit_fund_gen.generate_with_records(fund_type)
            self.store.add_chit_fund(fund)
            for contribution in contributions:
                self.store.add_contribution(contribution)
            for auction in auctions:
                self.store.add_auction(auction)

        logger.info(
            "Generated %d loans with %d repayments, %d chit funds with %d contributions and %d auctions",
            len(self.store.loans),
            len(self.store.repayments),
            len(self.store.chit_funds),
            len(self.store.contributions),
            len(self.store.auctions),
        )
        return self.store

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (ConsoleSink, JsonFileSink, etc.).
        """
        for sink in sinks:
            sink.write_batch("loans", list(self.store.loans.values()))
            sink.write_batch("repayments", list(self.store.repayments.values()))
            sink.write_batch("chit_funds", list(self.store.chit_funds.values()))
            sink.write_batch("contributions", list(self.store.contributions.values()))
            sink.write_batch("auctions", list(self.store.auctions.values()))

        logger.info("Exported portfolio to %d sinks", len(sinks))

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Get summary statistics for the portfolio.

        Returns
        -------
        dict[str, Any]
            Portfolio summary statistics.
        """
        loans = list(self.store.loans.values())
        funds = list(self.store.chit_funds.values())
        if not loans and not funds:
            return {}

        status_counts: dict[str, int] = {}
        for loan in loans:
            status_counts[loan.status.value] = status_counts.get(loan.status.value, 0) + 1

        lifetime = aggregate_lifetime(
            self.store.loan_accounts(),
            self.store.chit_fund_accounts(),
            self.store.disbursements(),
        )

        return {
            "total_loans": len(loans),
            "weekly_loans": sum(1 for l in loans if l.cadence is RepaymentCadence.WEEKLY),
            "monthly_loans": sum(1 for l in loans if l.cadence is RepaymentCadence.MONTHLY),
            "total_principal": float(sum(l.amount for l in loans)),
            "total_overdue": float(sum(l.overdue_amount for l in loans)),
            "loans_with_missed_payments": sum(1 for l in loans if l.missed_payments > 0),
            "active_loans": sum(1 for l in loans if l.status == LoanStatus.ACTIVE),
            "loan_status_distribution": status_counts,
            "total_chit_funds": len(funds),
            "fixed_chit_funds": sum(1 for f in funds if f.fund_type is ChitFundType.FIXED),
            "auction_chit_funds": sum(1 for f in funds if f.fund_type is ChitFundType.AUCTION),
            "lifetime_profit": float(lifetime.total_profit),
            "lifetime_net_cash_flow": float(lifetime.net_cash_flow),
        }
