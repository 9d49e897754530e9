"""Parse loosely-typed input records into typed domain models.

Collaborators hand over plain mappings in the persistence layer's camelCase
shape, e.g. ``{"amount": 100000, "repaymentType": "Monthly", ...}``. These
helpers are the only place where field presence is inspected; everything
downstream dispatches on the closed ``LoanTerms`` / ``ChitFundTerms``
variants instead.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, TypeVar

from microfinance.exceptions import UnsupportedVariantError
from microfinance.models.base import as_money
from microfinance.models.financial import (
    Auction,
    AuctionTerms,
    BalancePaymentStatus,
    ChitFund,
    ChitFundStatus,
    ChitFundTerms,
    ChitFundType,
    Contribution,
    FixedTerms,
    Loan,
    LoanStatus,
    LoanTerms,
    MonthlyTerms,
    PaymentType,
    Repayment,
    RepaymentCadence,
    WeeklyTerms,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    """Parse an enum value, raising ``UnsupportedVariantError`` for unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise UnsupportedVariantError(
            f"Unsupported {field_name} {value!r}; expected one of: {allowed}"
        ) from None


def parse_instant(value: Any) -> datetime | None:
    """Parse a datetime or ISO-8601 string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def loan_terms_from_record(record: Mapping[str, Any]) -> LoanTerms:
    cadence = parse_enum(RepaymentCadence, record.get("repaymentType"), "repaymentType")
    if cadence is RepaymentCadence.MONTHLY:
        return MonthlyTerms(interest_rate=as_money(record.get("interestRate")))
    elif cadence is RepaymentCadence.WEEKLY:
        return WeeklyTerms()
    raise UnsupportedVariantError(f"Unsupported repaymentType {cadence!r}")


def loan_from_record(record: Mapping[str, Any]) -> Loan:
    """Build a ``Loan`` from a persistence-layer record."""
    amount = as_money(record.get("amount"))
    remaining = record.get("remainingAmount")
    installment = record.get("installmentAmount")

    return Loan(
        loan_id=str(record.get("id", "")),
        amount=amount,
        terms=loan_terms_from_record(record),
        duration=int(record.get("duration") or 0),
        disbursement_date=parse_instant(record.get("disbursementDate")),
        remaining_amount=amount if remaining is None else as_money(remaining),
        status=parse_enum(LoanStatus, record.get("status") or LoanStatus.ACTIVE, "status"),
        document_charge=as_money(record.get("documentCharge")),
        installment_amount=None if installment is None else as_money(installment),
        overdue_amount=as_money(record.get("overdueAmount")),
        missed_payments=int(record.get("missedPayments") or 0),
        next_payment_date=parse_instant(record.get("nextPaymentDate")),
        borrower_id=None if record.get("borrowerId") is None else str(record["borrowerId"]),
    )


def repayment_from_record(record: Mapping[str, Any]) -> Repayment:
    """Build a ``Repayment`` from a persistence-layer record."""
    return Repayment(
        repayment_id=str(record.get("id", "")),
        loan_id=str(record.get("loanId", "")),
        amount=as_money(record.get("amount")),
        paid_date=parse_instant(record.get("paidDate")),
        payment_type=parse_enum(
            PaymentType, record.get("paymentType") or PaymentType.FULL, "paymentType"
        ),
        period=_optional_int(record.get("period")),
    )


def chit_fund_terms_from_record(record: Mapping[str, Any]) -> ChitFundTerms:
    fund_type = parse_enum(
        ChitFundType, record.get("chitFundType") or ChitFundType.AUCTION, "chitFundType"
    )
    if fund_type is ChitFundType.AUCTION:
        return AuctionTerms()
    elif fund_type is ChitFundType.FIXED:
        first_month = record.get("firstMonthContribution")
        if not first_month:
            logger.warning(
                "Fixed chit fund %s has no firstMonthContribution, using auction accounting",
                record.get("id"),
            )
            return AuctionTerms()
        return FixedTerms(first_month_contribution=as_money(first_month))
    raise UnsupportedVariantError(f"Unsupported chitFundType {fund_type!r}")


def chit_fund_from_record(record: Mapping[str, Any]) -> ChitFund:
    """Build a ``ChitFund`` from a persistence-layer record."""
    member_count = record.get("membersCount") or record.get("memberCount")
    if member_count is None and record.get("members") is not None:
        member_count = len(record["members"])

    return ChitFund(
        chit_fund_id=str(record.get("id", "")),
        name=str(record.get("name", "")),
        total_amount=as_money(record.get("totalAmount")),
        monthly_contribution=as_money(record.get("monthlyContribution")),
        member_count=int(member_count or 0),
        duration=int(record.get("duration") or 0),
        terms=chit_fund_terms_from_record(record),
        start_date=parse_instant(record.get("startDate")),
        current_period=int(record.get("currentPeriod") or record.get("currentMonth") or 1),
        status=parse_enum(
            ChitFundStatus, record.get("status") or ChitFundStatus.ACTIVE, "status"
        ),
    )


def contribution_from_record(record: Mapping[str, Any]) -> Contribution:
    """Build a ``Contribution`` from a persistence-layer record."""
    balance = record.get("balance")
    balance_status = record.get("balancePaymentStatus") or record.get("balanceStatus")
    return Contribution(
        contribution_id=str(record.get("id", "")),
        chit_fund_id=str(record.get("chitFundId", "")),
        member_id=str(record.get("memberId", "")),
        amount=as_money(record.get("amount")),
        paid_date=parse_instant(record.get("paidDate")),
        period=_optional_int(record.get("period", record.get("month"))),
        balance=None if balance is None else as_money(balance),
        balance_payment_status=(
            None
            if balance_status is None
            else parse_enum(BalancePaymentStatus, balance_status, "balancePaymentStatus")
        ),
    )


def auction_from_record(record: Mapping[str, Any]) -> Auction:
    """Build an ``Auction`` from a persistence-layer record.

    ``amount`` is the payout handed to the winner. It is the only payout
    field read; older report code that looked for other field names
    silently counted those auctions as zero.
    """
    if record.get("amount") is None:
        logger.warning("Auction %s has no amount, counting its payout as zero", record.get("id"))
    winner = record.get("winnerId")
    return Auction(
        auction_id=str(record.get("id", "")),
        chit_fund_id=str(record.get("chitFundId", "")),
        period=_optional_int(record.get("period", record.get("month"))),
        amount=as_money(record.get("amount")),
        date=parse_instant(record.get("date")),
        winner_id=None if winner is None else str(winner),
    )
