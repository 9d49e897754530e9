"""Repayment schedule tracking: elapsed periods, missed periods and overdue amounts."""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from microfinance.calculators.periods import (
    advance,
    whole_months_between,
    whole_weeks_between,
)
from microfinance.exceptions import UnsupportedVariantError
from microfinance.models.base import ZERO, as_money
from microfinance.models.financial import (
    Loan,
    LoanState,
    LoanStatus,
    MonthlyTerms,
    PaymentType,
    Repayment,
    RepaymentCadence,
    ScheduleStatus,
    WeeklyTerms,
)

logger = logging.getLogger(__name__)

# Loans in these states accrue nothing overdue
_NOT_ACCRUING = (LoanStatus.COMPLETED, LoanStatus.PENDING)


@dataclass(frozen=True)
class OverdueResult:
    """Outcome of an overdue computation."""

    overdue_amount: Decimal
    missed_payments: int


@dataclass(frozen=True)
class ScheduleEntry:
    """One contracted instalment and how it was settled."""

    period: int
    due_date: datetime
    amount: Decimal
    status: ScheduleStatus
    repayment: Repayment | None = None


def cadence_of(loan: Loan) -> RepaymentCadence:
    """Resolve the loan's cadence from its terms variant."""
    if isinstance(loan.terms, MonthlyTerms):
        return RepaymentCadence.MONTHLY
    elif isinstance(loan.terms, WeeklyTerms):
        return RepaymentCadence.WEEKLY
    raise UnsupportedVariantError(f"Loan {loan.loan_id} has unsupported terms {loan.terms!r}")


def principal_per_period(loan: Loan) -> Decimal:
    """Principal share of one instalment.

    Weekly loans spread the principal over ``duration - 1`` periods because
    the first week is interest-only.
    """
    amount = as_money(loan.amount)
    if cadence_of(loan) is RepaymentCadence.MONTHLY:
        return amount / max(loan.duration, 1)
    return amount / max(loan.duration - 1, 1)


def installment_amount(loan: Loan) -> Decimal:
    """The loan's instalment, derived from principal and rate when not recorded."""
    if loan.installment_amount is not None:
        return as_money(loan.installment_amount)
    if isinstance(loan.terms, MonthlyTerms):
        return principal_per_period(loan) + as_money(loan.terms.interest_rate)
    return principal_per_period(loan)


def expected_periods(loan: Loan, as_of: datetime) -> int:
    """Number of instalments that should have been paid by ``as_of``.

    Clamped to ``[0, duration]``; nothing is expected beyond the contract.
    """
    if loan.disbursement_date is None:
        return 0
    if cadence_of(loan) is RepaymentCadence.MONTHLY:
        elapsed = whole_months_between(loan.disbursement_date, as_of)
    else:
        elapsed = whole_weeks_between(loan.disbursement_date, as_of)
    return max(0, min(elapsed, loan.duration))


def repayment_period(loan: Loan, repayment: Repayment) -> int | None:
    """The instalment a repayment settles.

    Weekly repayments recorded without a period are placed by the whole weeks
    elapsed between disbursement and payment. Monthly repayments without a
    period cannot be placed and return None.
    """
    if repayment.period is not None:
        return repayment.period
    if (
        cadence_of(loan) is RepaymentCadence.WEEKLY
        and loan.disbursement_date is not None
        and repayment.paid_date is not None
    ):
        return whole_weeks_between(loan.disbursement_date, repayment.paid_date)
    return None


def latest_by_period(loan: Loan, repayments: Iterable[Repayment]) -> dict[int, Repayment]:
    """Map each period to its authoritative repayment, the most recently paid one."""
    by_period: dict[int, Repayment] = {}
    for repayment in repayments:
        period = repayment_period(loan, repayment)
        if period is None:
            continue
        current = by_period.get(period)
        if current is None or _paid_on_or_after(repayment, current):
            by_period[period] = repayment
    return by_period


def _paid_on_or_after(candidate: Repayment, current: Repayment) -> bool:
    if candidate.paid_date is None:
        return current.paid_date is None
    if current.paid_date is None:
        return True
    return candidate.paid_date >= current.paid_date


def compute_overdue(loan: Loan, repayments: Iterable[Repayment], as_of: datetime) -> OverdueResult:
    """Compute the overdue amount and missed-period count as of ``as_of``.

    Every elapsed period without a repayment adds a full instalment; a
    period settled interest-only adds its principal share. Both count as
    missed.

    Parameters
    ----------
    loan : Loan
        The loan being tracked.
    repayments : Iterable[Repayment]
        All repayments recorded against the loan, in any order.
    as_of : datetime
        Evaluation instant.

    Returns
    -------
    OverdueResult
        Overdue amount and missed periods, both zero for completed or
        pending loans and for loans with nothing remaining.
    """
    if loan.status in _NOT_ACCRUING or as_money(loan.remaining_amount) <= 0:
        return OverdueResult(overdue_amount=ZERO, missed_payments=0)

    periods = expected_periods(loan, as_of)
    if periods == 0:
        return OverdueResult(overdue_amount=ZERO, missed_payments=0)

    by_period = latest_by_period(loan, repayments)
    instalment = installment_amount(loan)
    principal_share = principal_per_period(loan)

    overdue = ZERO
    missed = 0
    for period in range(1, periods + 1):
        repayment = by_period.get(period)
        if repayment is None:
            overdue += instalment
            missed += 1
        elif repayment.payment_type == PaymentType.INTEREST_ONLY:
            overdue += principal_share
            missed += 1

    logger.debug(
        "Loan %s: %d periods expected, %d missed, overdue %s",
        loan.loan_id,
        periods,
        missed,
        overdue,
        extra={"loan_id": loan.loan_id},
    )
    return OverdueResult(overdue_amount=overdue, missed_payments=missed)


def compute_next_payment_date(loan: Loan, as_of: datetime) -> datetime | None:
    """One cadence unit after ``as_of`` while a balance remains, else None.

    This is a forward-looking placeholder, not a prediction of the exact
    contractual due date.
    """
    if loan.status == LoanStatus.COMPLETED or as_money(loan.remaining_amount) <= 0:
        return None
    return advance(as_of, cadence_of(loan))


def compute_loan_state(loan: Loan, repayments: Iterable[Repayment], as_of: datetime) -> LoanState:
    """Recompute every derived loan field from the repayment set.

    The status follows the balance: ``Completed`` exactly when nothing
    remains, and a completed loan reopens to ``Active`` if a balance
    reappears (e.g. after a repayment was deleted).
    """
    remaining = as_money(loan.remaining_amount)
    status = loan.status
    if remaining <= 0:
        remaining = ZERO
        status = LoanStatus.COMPLETED
    elif status == LoanStatus.COMPLETED:
        status = LoanStatus.ACTIVE

    current = dataclasses.replace(loan, remaining_amount=remaining, status=status)
    overdue = compute_overdue(current, repayments, as_of)

    return LoanState(
        overdue_amount=overdue.overdue_amount,
        missed_payments=overdue.missed_payments,
        next_payment_date=compute_next_payment_date(current, as_of),
        remaining_amount=remaining,
        status=status,
    )


def build_payment_schedule(
    loan: Loan,
    repayments: Iterable[Repayment],
    as_of: datetime,
) -> list[ScheduleEntry]:
    """List every contracted instalment with its due date and settlement status.

    An unpaid instalment whose due date has been reached is ``Missed``,
    matching the periods counted by ``expected_periods``.
    """
    if loan.disbursement_date is None:
        return []

    cadence = cadence_of(loan)
    by_period = latest_by_period(loan, repayments)
    instalment = installment_amount(loan)
    reached = expected_periods(loan, as_of)

    entries = []
    for period in range(1, loan.duration + 1):
        due_date = advance(loan.disbursement_date, cadence, period)
        repayment = by_period.get(period)
        if repayment is not None:
            if repayment.payment_type == PaymentType.INTEREST_ONLY:
                status = ScheduleStatus.INTEREST_ONLY
            else:
                status = ScheduleStatus.PAID
        elif period <= reached:
            status = ScheduleStatus.MISSED
        else:
            status = ScheduleStatus.PENDING
        entries.append(
            ScheduleEntry(
                period=period,
                due_date=due_date,
                amount=instalment,
                status=status,
                repayment=repayment,
            )
        )
    return entries
