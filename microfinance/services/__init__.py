"""Operations that mutate records and keep derived loan state consistent."""

from microfinance.services.loan_ledger import LoanLedger

__all__ = ["LoanLedger"]
