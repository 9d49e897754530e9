"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest

from microfinance.models.financial import (
    AuctionTerms,
    ChitFund,
    FixedTerms,
    Loan,
    MonthlyTerms,
    WeeklyTerms,
)
from microfinance.store.financial import PortfolioStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def as_of() -> datetime:
    """Fixed evaluation instant."""
    return datetime(2024, 4, 1, 12, 0)


@pytest.fixture
def monthly_loan() -> Loan:
    """Monthly loan: 100000 over 10 months, 1000 interest per month, 500 document charge."""
    return Loan(
        loan_id="loan-m-001",
        amount=Decimal("100000"),
        terms=MonthlyTerms(interest_rate=Decimal("1000")),
        duration=10,
        disbursement_date=datetime(2024, 1, 1),
        remaining_amount=Decimal("100000"),
        document_charge=Decimal("500"),
    )


@pytest.fixture
def weekly_loan() -> Loan:
    """Weekly loan: 10000 over 11 weeks, the first interest-only."""
    return Loan(
        loan_id="loan-w-001",
        amount=Decimal("10000"),
        terms=WeeklyTerms(),
        duration=11,
        disbursement_date=datetime(2024, 1, 1),
        remaining_amount=Decimal("10000"),
    )


@pytest.fixture
def fixed_fund() -> ChitFund:
    """Fixed chit fund: 10 members paying 4800, the first month's share 5000."""
    return ChitFund(
        chit_fund_id="cf-fixed-001",
        name="Fixed Chit",
        total_amount=Decimal("50000"),
        monthly_contribution=Decimal("4800"),
        member_count=10,
        duration=10,
        terms=FixedTerms(first_month_contribution=Decimal("5000")),
        start_date=datetime(2024, 1, 1),
        current_period=3,
    )


@pytest.fixture
def auction_fund() -> ChitFund:
    """Auction chit fund: 10 members paying 100 a month."""
    return ChitFund(
        chit_fund_id="cf-auction-001",
        name="Auction Chit",
        total_amount=Decimal("1000"),
        monthly_contribution=Decimal("100"),
        member_count=10,
        duration=10,
        terms=AuctionTerms(),
        start_date=datetime(2024, 1, 1),
        current_period=2,
    )


@pytest.fixture
def store() -> PortfolioStore:
    """Create a fresh store for each test."""
    return PortfolioStore()
