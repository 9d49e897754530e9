"""Loan models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from microfinance.models.base import ZERO
from microfinance.models.financial.enums import LoanStatus, PaymentType, RepaymentCadence


@dataclass(frozen=True)
class MonthlyTerms:
    """Monthly cadence: a flat interest amount is due every period."""

    interest_rate: Decimal = ZERO

    @property
    def cadence(self) -> RepaymentCadence:
        return RepaymentCadence.MONTHLY


@dataclass(frozen=True)
class WeeklyTerms:
    """Weekly cadence: no separate rate, the first week is interest-only."""

    @property
    def cadence(self) -> RepaymentCadence:
        return RepaymentCadence.WEEKLY


LoanTerms = MonthlyTerms | WeeklyTerms


@dataclass
class Loan:
    """Instalment loan contract.

    ``overdue_amount``, ``missed_payments`` and ``next_payment_date`` are
    derived fields; they are recomputed from the repayments and persisted
    back by the caller.
    """

    loan_id: str
    amount: Decimal  # Principal
    terms: LoanTerms
    duration: int  # Number of periods
    disbursement_date: datetime
    remaining_amount: Decimal
    status: LoanStatus = LoanStatus.ACTIVE
    document_charge: Decimal = ZERO
    installment_amount: Decimal | None = None  # Derived when absent
    overdue_amount: Decimal = ZERO
    missed_payments: int = 0
    next_payment_date: datetime | None = None
    borrower_id: str | None = None

    @property
    def cadence(self) -> RepaymentCadence:
        return self.terms.cadence


@dataclass
class Repayment:
    """A payment against one loan instalment."""

    repayment_id: str
    loan_id: str
    amount: Decimal
    paid_date: datetime
    payment_type: PaymentType = PaymentType.FULL
    period: int | None = None


@dataclass
class Disbursement:
    """Cash paid out when a loan starts."""

    loan_id: str
    amount: Decimal
    disbursed_at: datetime
    document_charge: Decimal = ZERO

    @classmethod
    def from_loan(cls, loan: Loan) -> "Disbursement":
        return cls(
            loan_id=loan.loan_id,
            amount=loan.amount,
            disbursed_at=loan.disbursement_date,
            document_charge=loan.document_charge,
        )


@dataclass
class LoanState:
    """Derived loan fields written back after every repayment mutation."""

    overdue_amount: Decimal
    missed_payments: int
    next_payment_date: datetime | None
    remaining_amount: Decimal
    status: LoanStatus


@dataclass
class LoanAccount:
    """A loan bundled with its repayments, as handed to the aggregator."""

    loan: Loan
    repayments: list[Repayment] = field(default_factory=list)
