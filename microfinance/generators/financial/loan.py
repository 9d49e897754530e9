"""Loan generator for the microfinance domain."""

import dataclasses
import random
from datetime import timedelta
from decimal import Decimal

from microfinance.calculators.periods import advance
from microfinance.calculators.schedule import (
    compute_loan_state,
    expected_periods,
    installment_amount,
)
from microfinance.generators.base import BaseGenerator
from microfinance.models.base import ZERO
from microfinance.models.financial import (
    Loan,
    LoanStatus,
    MonthlyTerms,
    PaymentType,
    Repayment,
    RepaymentCadence,
    WeeklyTerms,
)


class LoanGenerator(BaseGenerator):
    """Generate synthetic loans with a repayment history."""

    PRINCIPALS = (10000, 20000, 25000, 30000, 50000, 75000, 100000)
    DOCUMENT_CHARGES = (0, 250, 500, 1000)

    # Durations in periods, per cadence
    DURATIONS = {
        RepaymentCadence.MONTHLY: (6, 10, 12, 18, 24),
        RepaymentCadence.WEEKLY: (10, 12, 15, 20, 25),
    }

    # Flat monthly interest as a share of principal
    MONTHLY_RATE_RANGE = (0.015, 0.04)

    # Probabilities of how a due instalment is settled
    MISS_RATE = 0.12
    INTEREST_ONLY_RATE = 0.08

    def generate(
        self,
        cadence: RepaymentCadence = RepaymentCadence.MONTHLY,
        borrower_id: str | None = None,
    ) -> Loan:
        """Generate a loan contract with no repayments yet.

        Parameters
        ----------
        cadence : RepaymentCadence
            Monthly or weekly repayment.
        borrower_id : str | None
            Borrower reference; a fake one when None.

        Returns
        -------
        Loan
            Generated loan.
        """
        principal = Decimal(random.choice(self.PRINCIPALS))
        duration = random.choice(self.DURATIONS[cadence])

        if cadence is RepaymentCadence.MONTHLY:
            rate = random.uniform(*self.MONTHLY_RATE_RANGE)
            terms = MonthlyTerms(interest_rate=Decimal(round(float(principal) * rate)))
            days_back = random.randint(20, 420)
        else:
            terms = WeeklyTerms()
            days_back = random.randint(5, 7 * duration + 30)

        disbursed = (self.as_of - timedelta(days=days_back)).replace(
            hour=random.randint(9, 17), minute=random.choice((0, 15, 30, 45)), second=0, microsecond=0
        )

        return Loan(
            loan_id=self.fake.uuid4(),
            amount=principal,
            terms=terms,
            duration=duration,
            disbursement_date=disbursed,
            remaining_amount=principal,
            status=LoanStatus.ACTIVE,
            document_charge=Decimal(random.choice(self.DOCUMENT_CHARGES)),
            borrower_id=borrower_id or self.fake.name(),
        )

    def generate_with_repayments(
        self,
        cadence: RepaymentCadence = RepaymentCadence.MONTHLY,
        borrower_id: str | None = None,
    ) -> tuple[Loan, list[Repayment]]:
        """Generate a loan and the repayments made on it up to ``as_of``.

        The loan's remaining balance and derived overdue fields are
        consistent with the generated repayments.

        Returns
        -------
        tuple[Loan, list[Repayment]]
            Generated loan and its repayments.
        """
        loan = self.generate(cadence, borrower_id)
        repayments = self._generate_repayments(loan)

        paid_principal = sum(
            (r.amount for r in repayments if r.payment_type == PaymentType.FULL), ZERO
        )
        remaining = max(ZERO, loan.amount - paid_principal)
        loan = dataclasses.replace(loan, remaining_amount=remaining)

        state = compute_loan_state(loan, repayments, self.as_of)
        loan = dataclasses.replace(
            loan,
            overdue_amount=state.overdue_amount,
            missed_payments=state.missed_payments,
            next_payment_date=state.next_payment_date,
            remaining_amount=state.remaining_amount,
            status=state.status,
        )
        return loan, repayments

    def _generate_repayments(self, loan: Loan) -> list[Repayment]:
        instalment = installment_amount(loan).quantize(Decimal("1"))
        interest = loan.terms.interest_rate if isinstance(loan.terms, MonthlyTerms) else ZERO
        balance = loan.amount

        repayments = []
        for period in range(1, expected_periods(loan, self.as_of) + 1):
            if balance <= 0:
                break

            roll = random.random()
            if roll < self.MISS_RATE:
                continue

            due = advance(loan.disbursement_date, loan.cadence, period)
            paid_date = min(due + timedelta(days=random.randint(-2, 4)), self.as_of)

            if roll < self.MISS_RATE + self.INTEREST_ONLY_RATE and interest > 0:
                payment_type = PaymentType.INTEREST_ONLY
                amount = interest
            else:
                payment_type = PaymentType.FULL
                amount = min(instalment, balance)
                balance -= amount

            repayments.append(
                Repayment(
                    repayment_id=self.fake.uuid4(),
                    loan_id=loan.loan_id,
                    amount=amount,
                    paid_date=paid_date,
                    payment_type=payment_type,
                    period=period,
                )
            )
        return repayments
