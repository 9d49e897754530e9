"""Tests for domain models."""

from datetime import datetime
from decimal import Decimal

from microfinance.models.base import ZERO, as_money
from microfinance.models.financial import (
    AuctionTerms,
    ChitFund,
    ChitFundType,
    Disbursement,
    FinancialMetrics,
    FixedTerms,
    Loan,
    MonthlyTerms,
    RepaymentCadence,
    TransactionCounts,
    WeeklyTerms,
)


class TestAsMoney:
    """Tests for as_money."""

    def test_missing_values_are_zero(self) -> None:
        assert as_money(None) == ZERO
        assert as_money("") == ZERO

    def test_float_keeps_its_decimal_text(self) -> None:
        assert as_money(0.1) == Decimal("0.1")

    def test_int_and_str(self) -> None:
        assert as_money(5) == Decimal("5")
        assert as_money("12.50") == Decimal("12.50")


class TestTerms:
    """Tests for the closed loan and chit fund variants."""

    def test_loan_cadence(self, monthly_loan: Loan, weekly_loan: Loan) -> None:
        assert monthly_loan.cadence is RepaymentCadence.MONTHLY
        assert weekly_loan.cadence is RepaymentCadence.WEEKLY
        assert MonthlyTerms().interest_rate == ZERO
        assert WeeklyTerms().cadence is RepaymentCadence.WEEKLY

    def test_fund_type(self, fixed_fund: ChitFund, auction_fund: ChitFund) -> None:
        assert fixed_fund.fund_type is ChitFundType.FIXED
        assert auction_fund.fund_type is ChitFundType.AUCTION
        assert AuctionTerms() == AuctionTerms()
        assert FixedTerms(Decimal("1")) != FixedTerms(Decimal("2"))


class TestDisbursement:
    """Tests for Disbursement."""

    def test_from_loan(self, monthly_loan: Loan) -> None:
        disbursement = Disbursement.from_loan(monthly_loan)

        assert disbursement.loan_id == monthly_loan.loan_id
        assert disbursement.amount == Decimal("100000")
        assert disbursement.disbursed_at == datetime(2024, 1, 1)
        assert disbursement.document_charge == Decimal("500")


class TestFinancialMetrics:
    """Tests for FinancialMetrics."""

    def test_defaults_are_zero(self) -> None:
        metrics = FinancialMetrics()

        assert metrics.total_profit == ZERO
        assert metrics.transaction_counts.total_transactions == 0

    def test_elementwise_addition(self) -> None:
        a = FinancialMetrics(
            total_cash_inflow=Decimal("10"),
            loan_profit=Decimal("1"),
            transaction_counts=TransactionCounts(loan_repayments=2, chit_fund_auctions=1),
        )
        b = FinancialMetrics(
            total_cash_inflow=Decimal("5"),
            loan_profit=Decimal("2"),
            transaction_counts=TransactionCounts(loan_repayments=1, loan_disbursements=4),
        )

        total = a + b

        assert total.total_cash_inflow == Decimal("15")
        assert total.loan_profit == Decimal("3")
        assert total.transaction_counts == TransactionCounts(
            loan_disbursements=4, loan_repayments=3, chit_fund_auctions=1
        )
        assert total.transaction_counts.total_transactions == 8

    def test_to_dict(self) -> None:
        metrics = FinancialMetrics(
            net_cash_flow=Decimal("-12.345"),
            transaction_counts=TransactionCounts(chit_fund_contributions=3),
        )

        data = metrics.to_dict()

        assert data["net_cash_flow"] == "-12.345"
        assert data["transaction_counts"]["chit_fund_contributions"] == 3
        assert data["transaction_counts"]["total_transactions"] == 3

    def test_to_dict_rounds_money(self) -> None:
        data = FinancialMetrics(net_cash_flow=Decimal("-12.345")).to_dict(Decimal("0.01"))

        assert data["net_cash_flow"] == "-12.34"
