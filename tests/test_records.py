"""Tests for parsing persistence-layer records into domain models."""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from microfinance.exceptions import UnsupportedVariantError
from microfinance.models.financial import (
    AuctionTerms,
    BalancePaymentStatus,
    FixedTerms,
    LoanStatus,
    MonthlyTerms,
    PaymentType,
    WeeklyTerms,
)
from microfinance.models.records import (
    auction_from_record,
    chit_fund_from_record,
    contribution_from_record,
    loan_from_record,
    parse_instant,
    repayment_from_record,
)


class TestParseInstant:
    """Tests for parse_instant."""

    def test_iso_with_z(self) -> None:
        assert parse_instant("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_passthrough_and_empty(self) -> None:
        now = datetime(2024, 1, 1)
        assert parse_instant(now) is now
        assert parse_instant(None) is None
        assert parse_instant("") is None

    def test_offset(self) -> None:
        parsed = parse_instant("2024-01-01T05:30:00+05:30")
        assert parsed.utcoffset() == timedelta(hours=5, minutes=30)


class TestLoanRecords:
    """Tests for loan and repayment records."""

    def test_monthly_loan(self) -> None:
        loan = loan_from_record(
            {
                "id": 7,
                "amount": 100000,
                "repaymentType": "Monthly",
                "interestRate": "1000",
                "documentCharge": 500,
                "duration": 10,
                "disbursementDate": "2024-01-01T00:00:00",
                "status": "Active",
            }
        )

        assert loan.loan_id == "7"
        assert loan.terms == MonthlyTerms(interest_rate=Decimal("1000"))
        assert loan.remaining_amount == Decimal("100000")
        assert loan.document_charge == Decimal("500")
        assert loan.installment_amount is None
        assert loan.status == LoanStatus.ACTIVE

    def test_weekly_loan_missing_numbers_are_zero(self) -> None:
        loan = loan_from_record(
            {"id": "w1", "amount": 10000, "repaymentType": "Weekly", "duration": 11, "documentCharge": None}
        )

        assert isinstance(loan.terms, WeeklyTerms)
        assert loan.document_charge == Decimal("0")
        assert loan.disbursement_date is None

    def test_unknown_cadence(self) -> None:
        with pytest.raises(UnsupportedVariantError, match="repaymentType"):
            loan_from_record({"id": 1, "amount": 1, "repaymentType": "Daily"})

    def test_repayment(self) -> None:
        repayment = repayment_from_record(
            {
                "id": 3,
                "loanId": 7,
                "amount": 1000.5,
                "paidDate": "2024-02-01T10:00:00",
                "paymentType": "interestOnly",
                "period": "2",
            }
        )

        assert repayment.loan_id == "7"
        assert repayment.amount == Decimal("1000.5")
        assert repayment.payment_type == PaymentType.INTEREST_ONLY
        assert repayment.period == 2

    def test_repayment_defaults_to_full(self) -> None:
        repayment = repayment_from_record({"id": 1, "loanId": 1, "amount": 5, "paidDate": "2024-02-01"})

        assert repayment.payment_type == PaymentType.FULL
        assert repayment.period is None


class TestChitFundRecords:
    """Tests for chit fund, contribution and auction records."""

    def test_fixed_fund(self) -> None:
        fund = chit_fund_from_record(
            {
                "id": 1,
                "name": "Fixed",
                "totalAmount": 50000,
                "monthlyContribution": 4800,
                "membersCount": 10,
                "duration": 10,
                "chitFundType": "Fixed",
                "firstMonthContribution": 5000,
                "currentMonth": 3,
                "startDate": "2024-01-01",
            }
        )

        assert fund.terms == FixedTerms(first_month_contribution=Decimal("5000"))
        assert fund.member_count == 10
        assert fund.current_period == 3

    def test_fixed_without_first_month_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """A fixed fund without its first-month contribution is accounted as an auction fund."""
        with caplog.at_level(logging.WARNING):
            fund = chit_fund_from_record({"id": 2, "chitFundType": "Fixed", "members": ["a", "b"]})

        assert isinstance(fund.terms, AuctionTerms)
        assert fund.member_count == 2
        assert "firstMonthContribution" in caplog.text

    def test_unknown_fund_type(self) -> None:
        with pytest.raises(UnsupportedVariantError):
            chit_fund_from_record({"id": 3, "chitFundType": "Lottery"})

    def test_contribution_month_alias(self) -> None:
        contribution = contribution_from_record(
            {
                "id": 1,
                "chitFundId": 1,
                "memberId": 9,
                "amount": 50,
                "paidDate": "2024-01-05",
                "month": 1,
                "balance": 50,
                "balancePaymentStatus": "Partial",
            }
        )

        assert contribution.period == 1
        assert contribution.balance == Decimal("50")
        assert contribution.balance_payment_status == BalancePaymentStatus.PARTIAL

    def test_auction(self) -> None:
        auction = auction_from_record(
            {"id": 1, "chitFundId": 1, "month": 2, "amount": 40000, "date": "2024-02-10", "winnerId": 4}
        )

        assert auction.period == 2
        assert auction.amount == Decimal("40000")
        assert auction.winner_id == "4"

    def test_auction_without_amount_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            auction = auction_from_record({"id": 5, "chitFundId": 1, "period": 1, "date": "2024-02-10"})

        assert auction.amount == Decimal("0")
        assert "no amount" in caplog.text
