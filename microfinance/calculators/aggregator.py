"""Period aggregation: one consolidated metrics snapshot across every product."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from microfinance.calculators.chit_fund_profit import compute_chit_fund_profit
from microfinance.calculators.loan_profit import NO_PROFIT, compute_loan_profit
from microfinance.calculators.periods import build_period_ranges, in_range
from microfinance.models.base import ZERO, PeriodRange, as_money
from microfinance.models.financial import (
    ChitFundAccount,
    Disbursement,
    FinancialMetrics,
    LoanAccount,
    PeriodMetrics,
    TransactionCounts,
)

logger = logging.getLogger(__name__)


def _total(amounts: Iterable) -> Decimal:
    return sum((as_money(a) for a in amounts), ZERO)


def aggregate(
    loans: Sequence[LoanAccount],
    chit_funds: Sequence[ChitFundAccount],
    disbursements: Sequence[Disbursement] | None,
    period_range: PeriodRange | None,
) -> FinancialMetrics:
    """Aggregate cash flow, profit, exposure and counts for one window.

    Cash inflow is repayments plus contributions, filtered by paid date.
    Cash outflow is loan disbursements (by disbursement date) plus auction
    payouts (by auction date). Outside amount is computed per product and
    only then summed, so a chit fund surplus never hides loan exposure.

    Parameters
    ----------
    loans : Sequence[LoanAccount]
        Loans with their repayments.
    chit_funds : Sequence[ChitFundAccount]
        Chit funds with their contributions and auctions.
    disbursements : Sequence[Disbursement] | None
        Loan payouts; derived from ``loans`` when None.
    period_range : PeriodRange | None
        Window to aggregate; lifetime when None.

    Returns
    -------
    FinancialMetrics
        The consolidated snapshot.
    """
    if disbursements is None:
        disbursements = [Disbursement.from_loan(account.loan) for account in loans]

    repayments = [
        r for account in loans for r in in_range(account.repayments, period_range, lambda r: r.paid_date)
    ]
    contributions = [
        c
        for account in chit_funds
        for c in in_range(account.contributions, period_range, lambda c: c.paid_date)
    ]
    auctions = [
        a for account in chit_funds for a in in_range(account.auctions, period_range, lambda a: a.date)
    ]
    payouts = in_range(disbursements, period_range, lambda d: d.disbursed_at)

    repayment_inflow = _total(r.amount for r in repayments)
    contribution_inflow = _total(c.amount for c in contributions)
    loan_outflow = _total(d.amount for d in payouts)
    auction_outflow = _total(a.amount for a in auctions)

    loan_profit = NO_PROFIT
    for account in loans:
        loan_profit = loan_profit + compute_loan_profit(account.loan, account.repayments, period_range)

    chit_fund_profit = _total(
        compute_chit_fund_profit(
            account.chit_fund,
            account.contributions,
            account.auctions,
            period_range=period_range,
        )
        for account in chit_funds
    )

    loan_outside = max(ZERO, loan_outflow - repayment_inflow)
    chit_fund_outside = max(ZERO, auction_outflow - contribution_inflow)

    total_inflow = repayment_inflow + contribution_inflow
    total_outflow = loan_outflow + auction_outflow

    metrics = FinancialMetrics(
        total_cash_inflow=total_inflow,
        total_cash_outflow=total_outflow,
        net_cash_flow=total_inflow - total_outflow,
        repayment_inflow=repayment_inflow,
        contribution_inflow=contribution_inflow,
        loan_outflow=loan_outflow,
        auction_outflow=auction_outflow,
        total_profit=loan_profit.profit + chit_fund_profit,
        loan_profit=loan_profit.profit,
        chit_fund_profit=chit_fund_profit,
        interest_payments=loan_profit.interest_portion,
        document_charges=loan_profit.document_charge_portion,
        auction_commissions=chit_fund_profit,
        total_outside_amount=loan_outside + chit_fund_outside,
        loan_outside_amount=loan_outside,
        chit_fund_outside_amount=chit_fund_outside,
        transaction_counts=TransactionCounts(
            loan_disbursements=len(payouts),
            loan_repayments=len(repayments),
            chit_fund_contributions=len(contributions),
            chit_fund_auctions=len(auctions),
        ),
    )

    logger.debug(
        "Aggregated %d loans and %d chit funds: inflow %s, outflow %s, profit %s",
        len(loans),
        len(chit_funds),
        metrics.total_cash_inflow,
        metrics.total_cash_outflow,
        metrics.total_profit,
        extra={
            "period_start": period_range.start if period_range else None,
            "period_end": period_range.end if period_range else None,
        },
    )
    return metrics


def aggregate_lifetime(
    loans: Sequence[LoanAccount],
    chit_funds: Sequence[ChitFundAccount],
    disbursements: Sequence[Disbursement] | None = None,
) -> FinancialMetrics:
    """Aggregate over every record regardless of date."""
    return aggregate(loans, chit_funds, disbursements, None)


def aggregate_series(
    loans: Sequence[LoanAccount],
    chit_funds: Sequence[ChitFundAccount],
    disbursements: Sequence[Disbursement] | None,
    ranges: Iterable[PeriodRange],
) -> list[PeriodMetrics]:
    """Aggregate each range independently, for charts and period reports."""
    series = []
    for period_range in ranges:
        metrics = aggregate(loans, chit_funds, disbursements, period_range)
        label = period_range.label or f"{period_range.start:%Y-%m-%d} - {period_range.end:%Y-%m-%d}"
        series.append(PeriodMetrics(label=label, period_range=period_range, metrics=metrics))
    logger.info("Built %d-period financial series", len(series))
    return series


def aggregate_recent(
    loans: Sequence[LoanAccount],
    chit_funds: Sequence[ChitFundAccount],
    granularity: str,
    count: int,
    as_of: datetime,
    disbursements: Sequence[Disbursement] | None = None,
) -> list[PeriodMetrics]:
    """Aggregate the last ``count`` weekly, monthly or yearly windows up to ``as_of``."""
    ranges = build_period_ranges(granularity, count, as_of)
    return aggregate_series(loans, chit_funds, disbursements, ranges)
