"""Chit fund models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from microfinance.models.base import ZERO
from microfinance.models.financial.enums import (
    BalancePaymentStatus,
    ChitFundStatus,
    ChitFundType,
)


@dataclass(frozen=True)
class AuctionTerms:
    """Members bid for the pot; the discount on each payout is profit."""

    @property
    def fund_type(self) -> ChitFundType:
        return ChitFundType.AUCTION


@dataclass(frozen=True)
class FixedTerms:
    """Fixed payouts with a differently sized first-month contribution."""

    first_month_contribution: Decimal

    @property
    def fund_type(self) -> ChitFundType:
        return ChitFundType.FIXED


ChitFundTerms = AuctionTerms | FixedTerms


@dataclass
class ChitFund:
    """Rotating savings pool."""

    chit_fund_id: str
    name: str
    total_amount: Decimal
    monthly_contribution: Decimal
    member_count: int
    duration: int  # Months
    terms: ChitFundTerms
    start_date: datetime
    current_period: int = 1
    status: ChitFundStatus = ChitFundStatus.ACTIVE

    @property
    def fund_type(self) -> ChitFundType:
        return self.terms.fund_type


@dataclass
class Contribution:
    """A member's payment into the pot for one period."""

    contribution_id: str
    chit_fund_id: str
    member_id: str
    amount: Decimal
    paid_date: datetime
    period: int | None = None
    balance: Decimal | None = None  # Still owed for the period
    balance_payment_status: BalancePaymentStatus | None = None


@dataclass
class Auction:
    """The payout of one period's pot to a member."""

    auction_id: str
    chit_fund_id: str
    period: int | None
    amount: Decimal  # Payout
    date: datetime
    winner_id: str | None = None


@dataclass
class ChitFundAccount:
    """A chit fund bundled with its contributions and auctions."""

    chit_fund: ChitFund
    contributions: list[Contribution] = field(default_factory=list)
    auctions: list[Auction] = field(default_factory=list)
