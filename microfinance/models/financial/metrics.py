"""Aggregated financial metrics produced for reporting collaborators."""

from dataclasses import dataclass, field, fields
from decimal import Decimal

from microfinance.models.base import ZERO, PeriodRange
from microfinance.sinks.serialization import dataclass_to_dict


@dataclass(frozen=True)
class TransactionCounts:
    """Record counts inside the aggregated window."""

    loan_disbursements: int = 0
    loan_repayments: int = 0
    chit_fund_contributions: int = 0
    chit_fund_auctions: int = 0

    @property
    def total_transactions(self) -> int:
        return (
            self.loan_disbursements
            + self.loan_repayments
            + self.chit_fund_contributions
            + self.chit_fund_auctions
        )

    def __add__(self, other: "TransactionCounts") -> "TransactionCounts":
        if not isinstance(other, TransactionCounts):
            return NotImplemented
        return TransactionCounts(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )


@dataclass(frozen=True)
class FinancialMetrics:
    """One consolidated snapshot of cash flow, profit and exposure.

    Never persisted. ``a + b`` adds every field elementwise, which is how
    sub-period snapshots are rolled up.
    """

    # Cash flow
    total_cash_inflow: Decimal = ZERO
    total_cash_outflow: Decimal = ZERO
    net_cash_flow: Decimal = ZERO

    # Detailed cash flow
    repayment_inflow: Decimal = ZERO
    contribution_inflow: Decimal = ZERO
    loan_outflow: Decimal = ZERO
    auction_outflow: Decimal = ZERO

    # Profit
    total_profit: Decimal = ZERO
    loan_profit: Decimal = ZERO
    chit_fund_profit: Decimal = ZERO
    interest_payments: Decimal = ZERO
    document_charges: Decimal = ZERO
    auction_commissions: Decimal = ZERO

    # Outside amount
    total_outside_amount: Decimal = ZERO
    loan_outside_amount: Decimal = ZERO
    chit_fund_outside_amount: Decimal = ZERO

    transaction_counts: TransactionCounts = field(default_factory=TransactionCounts)

    def __add__(self, other: "FinancialMetrics") -> "FinancialMetrics":
        if not isinstance(other, FinancialMetrics):
            return NotImplemented
        return FinancialMetrics(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    def to_dict(self, money_quantum: Decimal | None = None) -> dict:
        """Serialize for export and email payloads."""
        data = dataclass_to_dict(self, money_quantum)
        data["transaction_counts"]["total_transactions"] = self.transaction_counts.total_transactions
        return data


@dataclass(frozen=True)
class PeriodMetrics:
    """Metrics for one labelled window of a time series."""

    label: str
    period_range: PeriodRange
    metrics: FinancialMetrics

    def to_dict(self, money_quantum: Decimal | None = None) -> dict:
        """Flatten into one row: label, window bounds and every metric."""
        return {
            "label": self.label,
            "start": self.period_range.start.isoformat(),
            "end": self.period_range.end.isoformat(),
            **self.metrics.to_dict(money_quantum),
        }
