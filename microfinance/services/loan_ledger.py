"""Record and delete repayments, keeping the derived loan fields in sync.

Every mutation here runs inside the repository's unit of work: the record
is written, the remaining balance adjusted, the overdue state recomputed
and saved, and only then does the unit of work commit. Callers must not
mutate repayments through the repository directly, or the persisted
overdue amount, missed count, next payment date and status will drift.
"""

import dataclasses
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable

from microfinance.calculators.schedule import compute_loan_state
from microfinance.exceptions import InvalidEntityStateError
from microfinance.models.base import as_money
from microfinance.models.financial import (
    Loan,
    LoanState,
    LoanStatus,
    PaymentType,
    Repayment,
)
from microfinance.store.repository import LoanRepository

logger = logging.getLogger(__name__)


class LoanLedger:
    """Transactional repayment operations over an injected repository."""

    def __init__(
        self,
        repository: LoanRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the ledger.

        Parameters
        ----------
        repository : LoanRepository
            Where loans and repayments live.
        clock : Callable[[], datetime]
            Source of the evaluation instant for overdue computations.
        """
        self.repository = repository
        self.clock = clock

    def record_repayment(
        self,
        loan_id: str,
        amount: Decimal,
        paid_date: datetime,
        payment_type: PaymentType = PaymentType.FULL,
        period: int | None = None,
        repayment_id: str | None = None,
    ) -> tuple[Repayment, LoanState]:
        """Record a repayment and persist the recomputed loan state.

        Full payments reduce the remaining balance; interest-only payments
        leave it unchanged. A pending loan becomes active on its first
        repayment and completes when the balance reaches zero.

        Raises
        ------
        EntityNotFoundError
            If the loan does not exist.
        InvalidEntityStateError
            If the loan is already completed, the amount is not positive, or a
            full payment exceeds the remaining balance.
        """
        amount = as_money(amount)
        with self.repository.unit_of_work():
            loan = self.repository.get_loan(loan_id)

            if loan.status == LoanStatus.COMPLETED:
                raise InvalidEntityStateError(f"Loan {loan_id} is already completed")
            if amount <= 0:
                raise InvalidEntityStateError(f"Repayment amount must be positive, got {amount}")
            if loan.status == LoanStatus.PENDING:
                # First money in activates the loan
                loan = dataclasses.replace(loan, status=LoanStatus.ACTIVE)

            remaining = as_money(loan.remaining_amount)
            if payment_type == PaymentType.FULL:
                if amount > remaining:
                    raise InvalidEntityStateError(
                        f"Payment {amount} exceeds remaining balance {remaining} on loan {loan_id}"
                    )
                remaining -= amount

            repayment = Repayment(
                repayment_id=repayment_id or uuid.uuid4().hex,
                loan_id=loan_id,
                amount=amount,
                paid_date=paid_date,
                payment_type=payment_type,
                period=period,
            )
            self.repository.add_repayment(repayment)
            state = self._recompute(loan, remaining)

        logger.info(
            "Recorded %s repayment %s on loan %s: remaining %s, overdue %s",
            payment_type.value,
            repayment.repayment_id,
            loan_id,
            state.remaining_amount,
            state.overdue_amount,
            extra={"loan_id": loan_id, "repayment_id": repayment.repayment_id},
        )
        return repayment, state

    def delete_repayment(self, repayment_id: str) -> LoanState:
        """Delete a repayment, restoring the balance a full payment had reduced."""
        with self.repository.unit_of_work():
            state = self._delete(repayment_id)
        logger.info("Deleted repayment %s", repayment_id, extra={"repayment_id": repayment_id})
        return state

    def delete_repayments(self, repayment_ids: Iterable[str]) -> dict[str, LoanState]:
        """Delete several repayments in one unit of work.

        Returns the final state of every loan touched.
        """
        repayment_ids = list(repayment_ids)
        states: dict[str, LoanState] = {}
        with self.repository.unit_of_work():
            for repayment_id in repayment_ids:
                loan_id = self.repository.get_repayment(repayment_id).loan_id
                states[loan_id] = self._delete(repayment_id)
        logger.info("Deleted %d repayments across %d loans", len(repayment_ids), len(states))
        return states

    def refresh(self, loan_id: str) -> LoanState:
        """Recompute and persist a loan's derived fields without mutating records."""
        with self.repository.unit_of_work():
            loan = self.repository.get_loan(loan_id)
            return self._recompute(loan, as_money(loan.remaining_amount))

    def refresh_all(self, loan_ids: Iterable[str]) -> dict[str, LoanState]:
        """Refresh several loans, e.g. from a daily overdue job."""
        states = {loan_id: self.refresh(loan_id) for loan_id in loan_ids}
        logger.info("Refreshed overdue state for %d loans", len(states))
        return states

    def _delete(self, repayment_id: str) -> LoanState:
        repayment = self.repository.remove_repayment(repayment_id)
        loan = self.repository.get_loan(repayment.loan_id)
        remaining = as_money(loan.remaining_amount)
        if repayment.payment_type == PaymentType.FULL:
            remaining += as_money(repayment.amount)
        return self._recompute(loan, remaining)

    def _recompute(self, loan: Loan, remaining: Decimal) -> LoanState:
        repayments = self.repository.get_loan_repayments(loan.loan_id)
        updated = dataclasses.replace(loan, remaining_amount=remaining)
        state = compute_loan_state(updated, repayments, self.clock())
        self.repository.save_loan_state(loan.loan_id, state)
        return state
