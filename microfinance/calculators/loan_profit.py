"""Loan profit: interest (or excess over principal) plus the document charge."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from microfinance.calculators.periods import through
from microfinance.calculators.schedule import cadence_of
from microfinance.models.base import ZERO, PeriodRange, as_money
from microfinance.models.financial import (
    Loan,
    LoanAccount,
    MonthlyTerms,
    Repayment,
    RepaymentCadence,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoanProfit:
    """Profit split into its interest and document-charge portions."""

    profit: Decimal
    interest_portion: Decimal
    document_charge_portion: Decimal

    def __add__(self, other: "LoanProfit") -> "LoanProfit":
        if not isinstance(other, LoanProfit):
            return NotImplemented
        return LoanProfit(
            profit=self.profit + other.profit,
            interest_portion=self.interest_portion + other.interest_portion,
            document_charge_portion=self.document_charge_portion + other.document_charge_portion,
        )

    def __sub__(self, other: "LoanProfit") -> "LoanProfit":
        if not isinstance(other, LoanProfit):
            return NotImplemented
        return LoanProfit(
            profit=self.profit - other.profit,
            interest_portion=self.interest_portion - other.interest_portion,
            document_charge_portion=self.document_charge_portion - other.document_charge_portion,
        )


NO_PROFIT = LoanProfit(profit=ZERO, interest_portion=ZERO, document_charge_portion=ZERO)


def _interest(loan: Loan, repayments: list[Repayment]) -> Decimal:
    if cadence_of(loan) is RepaymentCadence.MONTHLY:
        # Interest-only and full repayments both carry one period's interest
        rate = as_money(loan.terms.interest_rate) if isinstance(loan.terms, MonthlyTerms) else ZERO
        return len(repayments) * rate

    total_paid = sum((as_money(r.amount) for r in repayments), ZERO)
    return max(ZERO, total_paid - as_money(loan.amount))


def lifetime_loan_profit(loan: Loan, repayments: Iterable[Repayment]) -> LoanProfit:
    """Profit over every repayment ever recorded, document charge included."""
    interest = _interest(loan, list(repayments))
    document_charge = as_money(loan.document_charge)
    return LoanProfit(
        profit=interest + document_charge,
        interest_portion=interest,
        document_charge_portion=document_charge,
    )


def cumulative_loan_profit(
    loan: Loan,
    repayments: Iterable[Repayment],
    cutoff: datetime,
    inclusive: bool = True,
) -> LoanProfit:
    """Lifetime profit as it stood at ``cutoff``.

    Only repayments paid by ``cutoff`` count, and the document charge counts
    once the loan has been disbursed.
    """
    paid = through(repayments, cutoff, lambda r: r.paid_date, inclusive=inclusive)
    interest = _interest(loan, paid)

    disbursed = through([loan], cutoff, lambda l: l.disbursement_date, inclusive=inclusive)
    document_charge = as_money(loan.document_charge) if disbursed else ZERO

    return LoanProfit(
        profit=interest + document_charge,
        interest_portion=interest,
        document_charge_portion=document_charge,
    )


def compute_loan_profit(
    loan: Loan,
    repayments: Iterable[Repayment],
    period_range: PeriodRange | None = None,
) -> LoanProfit:
    """Compute the profit a loan earned, over its lifetime or inside a period.

    Monthly loans earn one flat interest amount per repayment; weekly loans
    earn whatever was paid beyond the principal. The document charge is
    profit at disbursement.

    A period result is the profit accrued inside the window: cumulative
    profit at ``end`` less cumulative profit just before ``start``. For
    monthly loans that is the repayments paid in the window times the rate,
    plus the document charge when disbursement falls in the window. For
    weekly loans the excess over principal is credited to the window in
    which the payments producing it were made. Adjacent windows therefore
    add up to the window spanning both.

    Parameters
    ----------
    loan : Loan
        The loan.
    repayments : Iterable[Repayment]
        All repayments recorded against the loan.
    period_range : PeriodRange | None
        Window to scope the result to; lifetime when None.

    Returns
    -------
    LoanProfit
        Total profit with its interest and document-charge portions.
    """
    repayments = list(repayments)
    if period_range is None:
        return lifetime_loan_profit(loan, repayments)

    at_end = cumulative_loan_profit(loan, repayments, period_range.end)
    before_start = cumulative_loan_profit(loan, repayments, period_range.start, inclusive=False)
    result = at_end - before_start

    logger.debug(
        "Loan %s profit in %s..%s: %s",
        loan.loan_id,
        period_range.start.isoformat(),
        period_range.end.isoformat(),
        result.profit,
    )
    return result


def compute_total_loan_profit(
    accounts: Iterable[LoanAccount],
    period_range: PeriodRange | None = None,
) -> LoanProfit:
    """Sum ``compute_loan_profit`` over many loans."""
    total = NO_PROFIT
    for account in accounts:
        total = total + compute_loan_profit(account.loan, account.repayments, period_range)
    return total
