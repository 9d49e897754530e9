"""Chit fund generator for the microfinance domain."""

import dataclasses
import random
from datetime import datetime, timedelta
from decimal import Decimal

from microfinance.calculators.chit_fund_profit import fund_period_at, monthly_pot
from microfinance.calculators.periods import add_months
from microfinance.generators.base import BaseGenerator
from microfinance.models.financial import (
    Auction,
    AuctionTerms,
    BalancePaymentStatus,
    ChitFund,
    ChitFundStatus,
    ChitFundType,
    Contribution,
    FixedTerms,
)


class ChitFundGenerator(BaseGenerator):
    """Generate synthetic chit funds with contributions and auctions."""

    MONTHLY_CONTRIBUTIONS = (1000, 2000, 2500, 5000, 10000)
    MEMBER_COUNTS = (10, 12, 15, 20)

    # Share of the pot paid out at auction
    AUCTION_PAYOUT_RANGE = (0.75, 0.95)
    FIXED_PAYOUT_SHARE = Decimal("0.90")

    PARTIAL_PAYMENT_RATE = 0.05

    def generate(self, fund_type: ChitFundType = ChitFundType.AUCTION) -> ChitFund:
        """Generate a chit fund definition.

        Parameters
        ----------
        fund_type : ChitFundType
            Auction or fixed payout convention.

        Returns
        -------
        ChitFund
            Generated fund, its current period derived from ``as_of``.
        """
        monthly = Decimal(random.choice(self.MONTHLY_CONTRIBUTIONS))
        members = random.choice(self.MEMBER_COUNTS)

        if fund_type is ChitFundType.FIXED:
            # The organiser's first-month share is discounted
            terms = FixedTerms(first_month_contribution=monthly * Decimal("0.5"))
        else:
            terms = AuctionTerms()

        start = (self.as_of - timedelta(days=random.randint(15, 30 * members))).replace(
            hour=10, minute=0, second=0, microsecond=0
        )

        fund = ChitFund(
            chit_fund_id=self.fake.uuid4(),
            name=f"{self.fake.city()} {fund_type.value} Chit",
            total_amount=monthly * members,
            monthly_contribution=monthly,
            member_count=members,
            duration=members,
            terms=terms,
            start_date=start,
        )

        period = fund_period_at(fund, self.as_of)
        finished = add_months(start, fund.duration) <= self.as_of
        return dataclasses.replace(
            fund,
            current_period=period,
            status=ChitFundStatus.COMPLETED if finished else ChitFundStatus.ACTIVE,
        )

    def generate_with_records(
        self,
        fund_type: ChitFundType = ChitFundType.AUCTION,
    ) -> tuple[ChitFund, list[Contribution], list[Auction]]:
        """Generate a chit fund with every contribution and auction up to ``as_of``.

        Returns
        -------
        tuple[ChitFund, list[Contribution], list[Auction]]
            Generated fund, its contributions and its auctions.
        """
        fund = self.generate(fund_type)
        members = [self.fake.uuid4() for _ in range(fund.member_count)]
        winners = random.sample(members, len(members))

        contributions: list[Contribution] = []
        auctions: list[Auction] = []
        for period in range(1, fund.current_period + 1):
            opened = add_months(fund.start_date, period - 1)
            contributions.extend(self._contributions(fund, members, period, opened))

            auction_date = opened + timedelta(days=random.randint(5, 10))
            if auction_date > self.as_of:
                continue
            auctions.append(
                Auction(
                    auction_id=self.fake.uuid4(),
                    chit_fund_id=fund.chit_fund_id,
                    period=period,
                    amount=self._payout(fund),
                    date=auction_date,
                    winner_id=winners[period - 1],
                )
            )
        return fund, contributions, auctions

    def _contributions(
        self, fund: ChitFund, members: list[str], period: int, opened: datetime
    ) -> list[Contribution]:
        contributions = []
        for index, member_id in enumerate(members):
            paid_date = opened + timedelta(days=random.randint(0, 4), hours=random.randint(0, 8))
            if paid_date > self.as_of:
                continue

            due = fund.monthly_contribution
            if period == 1 and index == 0 and isinstance(fund.terms, FixedTerms):
                due = fund.terms.first_month_contribution

            balance = None
            status = None
            amount = due
            if random.random() < self.PARTIAL_PAYMENT_RATE:
                amount = (due / 2).quantize(Decimal("1"))
                balance = due - amount
                status = BalancePaymentStatus.PARTIAL

            contributions.append(
                Contribution(
                    contribution_id=self.fake.uuid4(),
                    chit_fund_id=fund.chit_fund_id,
                    member_id=member_id,
                    amount=amount,
                    paid_date=paid_date,
                    period=period,
                    balance=balance,
                    balance_payment_status=status,
                )
            )
        return contributions

    def _payout(self, fund: ChitFund) -> Decimal:
        pot = monthly_pot(fund)
        if isinstance(fund.terms, FixedTerms):
            return (pot * self.FIXED_PAYOUT_SHARE).quantize(Decimal("1"))
        share = random.uniform(*self.AUCTION_PAYOUT_RANGE)
        return Decimal(round(float(pot) * share / 100) * 100)
