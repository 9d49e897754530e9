"""Repository interface the loan ledger depends on."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from microfinance.models.financial import Loan, LoanState, Repayment


class LoanRepository(ABC):
    """Storage-agnostic access to loans and their repayments.

    Implementations decide how ``unit_of_work`` is made atomic (a database
    transaction, a snapshot, ...). Everything done inside it must commit
    together or not at all.
    """

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Context in which mutations commit together or roll back on error."""

    @abstractmethod
    def get_loan(self, loan_id: str) -> Loan:
        """Fetch a loan.

        Raises:
            EntityNotFoundError: If the loan does not exist.
        """

    @abstractmethod
    def get_loan_repayments(self, loan_id: str) -> list[Repayment]:
        """All repayments recorded against a loan."""

    @abstractmethod
    def get_repayment(self, repayment_id: str) -> Repayment:
        """Fetch a repayment.

        Raises:
            EntityNotFoundError: If the repayment does not exist.
        """

    @abstractmethod
    def add_repayment(self, repayment: Repayment) -> None:
        """Persist a new repayment.

        Raises:
            ReferentialIntegrityError: If the loan does not exist.
        """

    @abstractmethod
    def remove_repayment(self, repayment_id: str) -> Repayment:
        """Delete a repayment and return it.

        Raises:
            EntityNotFoundError: If the repayment does not exist.
        """

    @abstractmethod
    def save_loan_state(self, loan_id: str, state: LoanState) -> Loan:
        """Write the derived fields back onto the loan and return it."""
