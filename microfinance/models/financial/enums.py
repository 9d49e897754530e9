"""Enumeration types for loan and chit fund entities."""

from enum import Enum


class RepaymentCadence(str, Enum):
    MONTHLY = "Monthly"
    WEEKLY = "Weekly"


class LoanStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    DEFAULTED = "Defaulted"


class PaymentType(str, Enum):
    FULL = "full"
    INTEREST_ONLY = "interestOnly"


class ChitFundType(str, Enum):
    AUCTION = "Auction"
    FIXED = "Fixed"


class ChitFundStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"


class BalancePaymentStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    COMPLETED = "Completed"


class ScheduleStatus(str, Enum):
    PAID = "Paid"
    INTEREST_ONLY = "InterestOnly"
    MISSED = "Missed"
    PENDING = "Pending"
