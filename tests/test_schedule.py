"""Tests for repayment schedule tracking and overdue computation."""

import dataclasses
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from factories import make_repayment
from microfinance.calculators.schedule import (
    build_payment_schedule,
    compute_loan_state,
    compute_next_payment_date,
    compute_overdue,
    expected_periods,
    installment_amount,
    latest_by_period,
    OverdueResult,
    principal_per_period,
)
from microfinance.exceptions import UnsupportedVariantError
from microfinance.models.financial import (
    Loan,
    LoanStatus,
    PaymentType,
    ScheduleStatus,
)


class TestInstallmentAmount:
    """Tests for instalment derivation."""

    def test_monthly_derived(self, monthly_loan: Loan) -> None:
        """Monthly instalment is principal over duration plus the flat interest."""
        assert installment_amount(monthly_loan) == Decimal("11000")

    def test_weekly_derived(self, weekly_loan: Loan) -> None:
        """Weekly instalment spreads principal over duration minus one."""
        assert installment_amount(weekly_loan) == Decimal("1000")
        assert principal_per_period(weekly_loan) == Decimal("1000")

    def test_recorded_value_wins(self, monthly_loan: Loan) -> None:
        """A recorded instalment is used as is."""
        loan = dataclasses.replace(monthly_loan, installment_amount=Decimal("12500"))
        assert installment_amount(loan) == Decimal("12500")

    def test_single_period_weekly_loan(self, weekly_loan: Loan) -> None:
        """A one-period weekly loan does not divide by zero."""
        loan = dataclasses.replace(weekly_loan, duration=1)
        assert installment_amount(loan) == Decimal("10000")


class TestExpectedPeriods:
    """Tests for elapsed period counting."""

    def test_whole_months(self, monthly_loan: Loan) -> None:
        assert expected_periods(monthly_loan, datetime(2024, 4, 1)) == 3
        assert expected_periods(monthly_loan, datetime(2024, 3, 31, 23, 59)) == 2

    def test_clamped_to_duration(self, monthly_loan: Loan) -> None:
        """Nothing is expected beyond the contracted duration."""
        assert expected_periods(monthly_loan, datetime(2030, 1, 1)) == 10

    def test_before_disbursement(self, monthly_loan: Loan) -> None:
        """An evaluation instant before disbursement expects nothing."""
        assert expected_periods(monthly_loan, datetime(2023, 11, 1)) == 0

    def test_whole_weeks(self, weekly_loan: Loan) -> None:
        assert expected_periods(weekly_loan, datetime(2024, 1, 29)) == 4
        assert expected_periods(weekly_loan, datetime(2024, 1, 28, 23)) == 3


class TestComputeOverdue:
    """Tests for compute_overdue."""

    def test_no_repayments(self, monthly_loan: Loan, as_of: datetime) -> None:
        """Three elapsed months with nothing paid: three full instalments overdue."""
        result = compute_overdue(monthly_loan, [], as_of)

        assert result.missed_payments == 3
        assert result.overdue_amount == 3 * installment_amount(monthly_loan)

    def test_one_full_repayment(self, monthly_loan: Loan, as_of: datetime) -> None:
        """Paying period 1 in full leaves two missed periods."""
        repayments = [make_repayment(monthly_loan, 1, datetime(2024, 2, 1))]

        result = compute_overdue(monthly_loan, repayments, as_of)

        assert result.missed_payments == 2
        assert result.overdue_amount == Decimal("22000")

    def test_interest_only_counts_principal(self, monthly_loan: Loan, as_of: datetime) -> None:
        """An interest-only period is missed and owes its principal share."""
        repayments = [
            make_repayment(
                monthly_loan, 1, datetime(2024, 2, 1), amount="1000", payment_type=PaymentType.INTEREST_ONLY
            )
        ]

        result = compute_overdue(monthly_loan, repayments, as_of)

        assert result.missed_payments == 3
        assert result.overdue_amount == Decimal("22000") + Decimal("10000")

    def test_latest_repayment_per_period_wins(self, monthly_loan: Loan, as_of: datetime) -> None:
        """A later full payment supersedes an earlier interest-only one, in any order."""
        interest_only = make_repayment(
            monthly_loan, 1, datetime(2024, 2, 1), amount="1000", payment_type=PaymentType.INTEREST_ONLY
        )
        full = make_repayment(monthly_loan, 1, datetime(2024, 2, 5))

        forward = compute_overdue(monthly_loan, [interest_only, full], as_of)
        backward = compute_overdue(monthly_loan, [full, interest_only], as_of)

        assert forward == backward
        assert forward.missed_payments == 2

    def test_idempotent(self, monthly_loan: Loan, as_of: datetime) -> None:
        """Recomputing with no change in inputs gives the same result."""
        repayments = [make_repayment(monthly_loan, 2, datetime(2024, 3, 1))]

        assert compute_overdue(monthly_loan, repayments, as_of) == compute_overdue(
            monthly_loan, repayments, as_of
        )

    def test_non_negative_before_disbursement(self, monthly_loan: Loan) -> None:
        result = compute_overdue(monthly_loan, [], datetime(2023, 6, 1))

        assert result.missed_payments == 0
        assert result.overdue_amount == Decimal("0")

    def test_clamped_after_maturity(self, monthly_loan: Loan) -> None:
        """Long after maturity at most ``duration`` periods are missed."""
        result = compute_overdue(monthly_loan, [], datetime(2030, 1, 1))

        assert result.missed_payments == 10
        assert result.overdue_amount == Decimal("110000")

    @pytest.mark.parametrize("status", [LoanStatus.COMPLETED, LoanStatus.PENDING])
    def test_not_accruing_statuses(self, monthly_loan: Loan, as_of: datetime, status: LoanStatus) -> None:
        """Completed and pending loans have nothing overdue."""
        loan = dataclasses.replace(monthly_loan, status=status)

        result = compute_overdue(loan, [], as_of)

        assert result.missed_payments == 0
        assert result.overdue_amount == Decimal("0")

    def test_nothing_remaining_on_active_loan(self, monthly_loan: Loan, as_of: datetime) -> None:
        """An active loan with a zero balance has nothing overdue."""
        loan = dataclasses.replace(monthly_loan, remaining_amount=Decimal("0"), status=LoanStatus.ACTIVE)

        result = compute_overdue(loan, [], as_of)

        assert result == OverdueResult(overdue_amount=Decimal("0"), missed_payments=0)

    def test_monthly_repayment_without_period_ignored(self, monthly_loan: Loan, as_of: datetime) -> None:
        """A monthly repayment that names no period cannot settle one."""
        repayments = [make_repayment(monthly_loan, None, datetime(2024, 2, 1))]

        assert compute_overdue(monthly_loan, repayments, as_of).missed_payments == 3

    def test_weekly_period_derived_from_paid_date(self, weekly_loan: Loan) -> None:
        """Weekly repayments without a period land in the week they were paid."""
        repayments = [
            make_repayment(weekly_loan, None, datetime(2024, 1, 8), amount="1000"),
            make_repayment(weekly_loan, None, datetime(2024, 1, 15, 9), amount="1000"),
        ]

        result = compute_overdue(weekly_loan, repayments, datetime(2024, 1, 29))

        assert result.missed_payments == 2
        assert result.overdue_amount == Decimal("2000")

    def test_unsupported_terms(self, monthly_loan: Loan, as_of: datetime) -> None:
        loan = dataclasses.replace(monthly_loan, terms=object())

        with pytest.raises(UnsupportedVariantError):
            compute_overdue(loan, [], as_of)


class TestLatestByPeriod:
    """Tests for latest_by_period."""

    def test_same_instant_keeps_later_in_input(self, monthly_loan: Loan) -> None:
        first = make_repayment(monthly_loan, 1, datetime(2024, 2, 1), repayment_id="a")
        second = make_repayment(monthly_loan, 1, datetime(2024, 2, 1), repayment_id="b")

        assert latest_by_period(monthly_loan, [first, second])[1].repayment_id == "b"


class TestNextPaymentDate:
    """Tests for compute_next_payment_date."""

    def test_monthly(self, monthly_loan: Loan, as_of: datetime) -> None:
        assert compute_next_payment_date(monthly_loan, as_of) == datetime(2024, 5, 1, 12, 0)

    def test_weekly(self, weekly_loan: Loan, as_of: datetime) -> None:
        assert compute_next_payment_date(weekly_loan, as_of) == as_of + timedelta(days=7)

    def test_completed_has_none(self, monthly_loan: Loan, as_of: datetime) -> None:
        loan = dataclasses.replace(monthly_loan, status=LoanStatus.COMPLETED)
        assert compute_next_payment_date(loan, as_of) is None

    def test_nothing_remaining_has_none(self, monthly_loan: Loan, as_of: datetime) -> None:
        loan = dataclasses.replace(monthly_loan, remaining_amount=Decimal("0"))
        assert compute_next_payment_date(loan, as_of) is None


class TestComputeLoanState:
    """Tests for compute_loan_state."""

    def test_active_loan(self, monthly_loan: Loan, as_of: datetime) -> None:
        state = compute_loan_state(monthly_loan, [], as_of)

        assert state.status == LoanStatus.ACTIVE
        assert state.missed_payments == 3
        assert state.remaining_amount == Decimal("100000")
        assert state.next_payment_date == datetime(2024, 5, 1, 12, 0)

    def test_paid_off_completes(self, monthly_loan: Loan, as_of: datetime) -> None:
        """A loan with nothing remaining completes and stops accruing."""
        loan = dataclasses.replace(monthly_loan, remaining_amount=Decimal("-5"))

        state = compute_loan_state(loan, [], as_of)

        assert state.status == LoanStatus.COMPLETED
        assert state.remaining_amount == Decimal("0")
        assert state.overdue_amount == Decimal("0")
        assert state.missed_payments == 0
        assert state.next_payment_date is None

    def test_completed_with_balance_reopens(self, monthly_loan: Loan, as_of: datetime) -> None:
        loan = dataclasses.replace(monthly_loan, status=LoanStatus.COMPLETED)

        state = compute_loan_state(loan, [], as_of)

        assert state.status == LoanStatus.ACTIVE
        assert state.missed_payments == 3


class TestPaymentSchedule:
    """Tests for build_payment_schedule."""

    def test_statuses_and_due_dates(self, monthly_loan: Loan, as_of: datetime) -> None:
        repayments = [
            make_repayment(monthly_loan, 1, datetime(2024, 2, 1)),
            make_repayment(
                monthly_loan, 2, datetime(2024, 3, 1), amount="1000", payment_type=PaymentType.INTEREST_ONLY
            ),
        ]

        schedule = build_payment_schedule(monthly_loan, repayments, as_of)

        assert len(schedule) == 10
        assert [entry.period for entry in schedule] == list(range(1, 11))
        assert schedule[0].due_date == datetime(2024, 2, 1)
        assert schedule[0].status == ScheduleStatus.PAID
        assert schedule[1].status == ScheduleStatus.INTEREST_ONLY
        assert schedule[2].status == ScheduleStatus.MISSED
        assert all(entry.status == ScheduleStatus.PENDING for entry in schedule[3:])
        assert all(entry.amount == Decimal("11000") for entry in schedule)

    def test_missed_entries_match_overdue(self, monthly_loan: Loan, as_of: datetime) -> None:
        """Missed plus interest-only entries equal the missed-period count."""
        repayments = [make_repayment(monthly_loan, 1, datetime(2024, 2, 1))]

        schedule = build_payment_schedule(monthly_loan, repayments, as_of)
        flagged = [
            e for e in schedule if e.status in (ScheduleStatus.MISSED, ScheduleStatus.INTEREST_ONLY)
        ]

        assert len(flagged) == compute_overdue(monthly_loan, repayments, as_of).missed_payments
