"""Loan and chit fund domain models."""

from microfinance.models.financial.chit_fund import (
    Auction,
    AuctionTerms,
    ChitFund,
    ChitFundAccount,
    ChitFundTerms,
    Contribution,
    FixedTerms,
)
from microfinance.models.financial.enums import (
    BalancePaymentStatus,
    ChitFundStatus,
    ChitFundType,
    LoanStatus,
    PaymentType,
    RepaymentCadence,
    ScheduleStatus,
)
from microfinance.models.financial.loan import (
    Disbursement,
    Loan,
    LoanAccount,
    LoanState,
    LoanTerms,
    MonthlyTerms,
    Repayment,
    WeeklyTerms,
)
from microfinance.models.financial.metrics import (
    FinancialMetrics,
    PeriodMetrics,
    TransactionCounts,
)

__all__ = [
    "Auction",
    "AuctionTerms",
    "BalancePaymentStatus",
    "ChitFund",
    "ChitFundAccount",
    "ChitFundStatus",
    "ChitFundTerms",
    "ChitFundType",
    "Contribution",
    "Disbursement",
    "FinancialMetrics",
    "FixedTerms",
    "Loan",
    "LoanAccount",
    "LoanState",
    "LoanStatus",
    "LoanTerms",
    "MonthlyTerms",
    "PaymentType",
    "PeriodMetrics",
    "Repayment",
    "RepaymentCadence",
    "ScheduleStatus",
    "TransactionCounts",
    "WeeklyTerms",
]
