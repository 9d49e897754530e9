"""In-memory portfolio store with referential integrity."""

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from typing import Iterator

from microfinance.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from microfinance.models.financial import (
    Auction,
    ChitFund,
    ChitFundAccount,
    Contribution,
    Disbursement,
    Loan,
    LoanAccount,
    LoanState,
    Repayment,
)
from microfinance.store.repository import LoanRepository

logger = logging.getLogger(__name__)


@dataclass
class PortfolioStore(LoanRepository):
    """In-memory store for loans, chit funds and their records.

    Backs tests, the synthetic scenario and the report script. Mutations
    made inside ``unit_of_work`` are rolled back if the block raises.
    """

    # Primary entities
    loans: dict[str, Loan] = field(default_factory=dict)
    chit_funds: dict[str, ChitFund] = field(default_factory=dict)

    # Records
    repayments: dict[str, Repayment] = field(default_factory=dict)
    contributions: dict[str, Contribution] = field(default_factory=dict)
    auctions: dict[str, Auction] = field(default_factory=dict)

    # Relationship indexes
    _loan_repayments: dict[str, list[str]] = field(default_factory=dict)
    _fund_contributions: dict[str, list[str]] = field(default_factory=dict)
    _fund_auctions: dict[str, list[str]] = field(default_factory=dict)

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        """Snapshot the store and restore it if the block raises."""
        snapshot = {f.name: copy.deepcopy(getattr(self, f.name)) for f in fields(self)}
        try:
            yield
        except Exception:
            for name, value in snapshot.items():
                setattr(self, name, value)
            logger.warning("Unit of work failed, store rolled back")
            raise

    def add_loan(self, loan: Loan) -> None:
        """Add a loan to the store."""
        self.loans[loan.loan_id] = loan
        self._loan_repayments.setdefault(loan.loan_id, [])

    def get_loan(self, loan_id: str) -> Loan:
        if loan_id not in self.loans:
            raise EntityNotFoundError(f"Loan {loan_id} not found")
        return self.loans[loan_id]

    def add_repayment(self, repayment: Repayment) -> None:
        """Add a loan repayment to the store."""
        if repayment.loan_id not in self.loans:
            raise ReferentialIntegrityError(f"Loan {repayment.loan_id} not found")

        self.repayments[repayment.repayment_id] = repayment
        self._loan_repayments[repayment.loan_id].append(repayment.repayment_id)

    def get_repayment(self, repayment_id: str) -> Repayment:
        if repayment_id not in self.repayments:
            raise EntityNotFoundError(f"Repayment {repayment_id} not found")
        return self.repayments[repayment_id]

    def remove_repayment(self, repayment_id: str) -> Repayment:
        repayment = self.get_repayment(repayment_id)
        del self.repayments[repayment_id]
        self._loan_repayments[repayment.loan_id].remove(repayment_id)
        return repayment

    def get_loan_repayments(self, loan_id: str) -> list[Repayment]:
        """Get all repayments for a loan."""
        ids = self._loan_repayments.get(loan_id, [])
        return [self.repayments[i] for i in ids]

    def save_loan_state(self, loan_id: str, state: LoanState) -> Loan:
        loan = self.get_loan(loan_id)
        loan.overdue_amount = state.overdue_amount
        loan.missed_payments = state.missed_payments
        loan.next_payment_date = state.next_payment_date
        loan.remaining_amount = state.remaining_amount
        loan.status = state.status
        return loan

    def add_chit_fund(self, chit_fund: ChitFund) -> None:
        """Add a chit fund to the store."""
        self.chit_funds[chit_fund.chit_fund_id] = chit_fund
        self._fund_contributions.setdefault(chit_fund.chit_fund_id, [])
        self._fund_auctions.setdefault(chit_fund.chit_fund_id, [])

    def get_chit_fund(self, chit_fund_id: str) -> ChitFund:
        if chit_fund_id not in self.chit_funds:
            raise EntityNotFoundError(f"Chit fund {chit_fund_id} not found")
        return self.chit_funds[chit_fund_id]

    def add_contribution(self, contribution: Contribution) -> None:
        """Add a member contribution to the store."""
        if contribution.chit_fund_id not in self.chit_funds:
            raise ReferentialIntegrityError(f"Chit fund {contribution.chit_fund_id} not found")

        self.contributions[contribution.contribution_id] = contribution
        self._fund_contributions[contribution.chit_fund_id].append(contribution.contribution_id)

    def add_auction(self, auction: Auction) -> None:
        """Add an auction to the store; a fund holds at most one auction per period."""
        if auction.chit_fund_id not in self.chit_funds:
            raise ReferentialIntegrityError(f"Chit fund {auction.chit_fund_id} not found")

        if auction.period is not None and any(
            existing.period == auction.period for existing in self.get_fund_auctions(auction.chit_fund_id)
        ):
            raise InvalidEntityStateError(
                f"Chit fund {auction.chit_fund_id} already has an auction for period {auction.period}"
            )

        self.auctions[auction.auction_id] = auction
        self._fund_auctions[auction.chit_fund_id].append(auction.auction_id)

    def get_fund_contributions(self, chit_fund_id: str) -> list[Contribution]:
        """Get all contributions for a chit fund."""
        return [self.contributions[i] for i in self._fund_contributions.get(chit_fund_id, [])]

    def get_fund_auctions(self, chit_fund_id: str) -> list[Auction]:
        """Get all auctions for a chit fund."""
        return [self.auctions[i] for i in self._fund_auctions.get(chit_fund_id, [])]

    def loan_accounts(self) -> list[LoanAccount]:
        """Every loan bundled with its repayments."""
        return [
            LoanAccount(loan=loan, repayments=self.get_loan_repayments(loan_id))
            for loan_id, loan in self.loans.items()
        ]

    def chit_fund_accounts(self) -> list[ChitFundAccount]:
        """Every chit fund bundled with its contributions and auctions."""
        return [
            ChitFundAccount(
                chit_fund=fund,
                contributions=self.get_fund_contributions(fund_id),
                auctions=self.get_fund_auctions(fund_id),
            )
            for fund_id, fund in self.chit_funds.items()
        ]

    def disbursements(self) -> list[Disbursement]:
        """One disbursement per loan."""
        return [Disbursement.from_loan(loan) for loan in self.loans.values()]
