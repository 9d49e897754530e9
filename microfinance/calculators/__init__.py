"""Overdue, profit and period aggregation calculators.

Every function here is pure: it reads already-fetched records and returns
a fresh result value without touching storage.
"""

from microfinance.calculators.aggregator import (
    aggregate,
    aggregate_lifetime,
    aggregate_recent,
    aggregate_series,
)
from microfinance.calculators.chit_fund_profit import (
    compute_chit_fund_outside_amount,
    compute_chit_fund_profit,
    compute_total_chit_fund_profit,
    fund_period_at,
)
from microfinance.calculators.loan_profit import (
    LoanProfit,
    compute_loan_profit,
    compute_total_loan_profit,
)
from microfinance.calculators.periods import build_period_ranges
from microfinance.calculators.schedule import (
    OverdueResult,
    ScheduleEntry,
    build_payment_schedule,
    compute_loan_state,
    compute_next_payment_date,
    compute_overdue,
    expected_periods,
    installment_amount,
    principal_per_period,
)

__all__ = [
    "LoanProfit",
    "OverdueResult",
    "ScheduleEntry",
    "aggregate",
    "aggregate_lifetime",
    "aggregate_recent",
    "aggregate_series",
    "build_payment_schedule",
    "build_period_ranges",
    "compute_chit_fund_outside_amount",
    "compute_chit_fund_profit",
    "compute_loan_profit",
    "compute_loan_state",
    "compute_next_payment_date",
    "compute_overdue",
    "compute_total_chit_fund_profit",
    "compute_total_loan_profit",
    "expected_periods",
    "fund_period_at",
    "installment_amount",
    "principal_per_period",
]
