"""Chit fund profit under the auction and fixed payout conventions."""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, TypeVar

from microfinance.calculators.periods import in_range, through, whole_months_between
from microfinance.exceptions import UnsupportedVariantError
from microfinance.models.base import ZERO, PeriodRange, as_money
from microfinance.models.financial import (
    Auction,
    AuctionTerms,
    ChitFund,
    ChitFundAccount,
    Contribution,
    FixedTerms,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", Contribution, Auction)

_JUST_BEFORE = timedelta(microseconds=1)


def fund_period_at(chit_fund: ChitFund, instant: datetime) -> int:
    """The fund period (1-based month) running at ``instant``.

    Zero before the fund starts, never more than the fund's duration.
    """
    if chit_fund.start_date is None or instant < chit_fund.start_date:
        return 0
    period = whole_months_between(chit_fund.start_date, instant) + 1
    return max(1, min(period, max(chit_fund.duration, 1)))


def up_to_period(records: Iterable[R], period: int) -> list[R]:
    """Keep records for ``period`` or earlier; records without a period are kept."""
    return [r for r in records if r.period is None or r.period <= period]


def monthly_pot(chit_fund: ChitFund) -> Decimal:
    """What all members pay in for one regular period."""
    return as_money(chit_fund.monthly_contribution) * chit_fund.member_count


def _auction_profit(
    chit_fund: ChitFund,
    contributions: list[Contribution],
    auctions: list[Auction],
) -> Decimal:
    pot = monthly_pot(chit_fund)
    margins = ZERO
    for auction in auctions:
        margin = pot - as_money(auction.amount)
        if margin > 0:
            margins += margin
    if margins > 0:
        return margins

    # No recorded auction margin yet: fall back to the cash surplus
    surplus = sum((as_money(c.amount) for c in contributions), ZERO) - sum(
        (as_money(a.amount) for a in auctions), ZERO
    )
    return max(ZERO, surplus)


def _fixed_profit(
    chit_fund: ChitFund,
    terms: FixedTerms,
    auctions: list[Auction],
    as_of_period: int,
) -> Decimal:
    members = chit_fund.member_count
    monthly = as_money(chit_fund.monthly_contribution)
    duration = max(chit_fund.duration, 1)

    total = ZERO
    for auction in up_to_period(auctions, as_of_period):
        if (auction.period or 1) == 1:
            collected = as_money(terms.first_month_contribution) + monthly * (members - 1)
        else:
            collected = monthly * members
        per_period = (collected - as_money(auction.amount)) / duration
        if per_period > 0:
            total += per_period * as_of_period
    return max(ZERO, total)


def _profit(
    chit_fund: ChitFund,
    contributions: list[Contribution],
    auctions: list[Auction],
    as_of_period: int,
) -> Decimal:
    terms = chit_fund.terms
    if isinstance(terms, AuctionTerms):
        return _auction_profit(chit_fund, contributions, auctions)
    elif isinstance(terms, FixedTerms):
        return _fixed_profit(chit_fund, terms, auctions, as_of_period)
    raise UnsupportedVariantError(
        f"Chit fund {chit_fund.chit_fund_id} has unsupported terms {terms!r}"
    )


def cumulative_chit_fund_profit(
    chit_fund: ChitFund,
    contributions: Iterable[Contribution],
    auctions: Iterable[Auction],
    cutoff: datetime,
    inclusive: bool = True,
) -> Decimal:
    """Profit as it stood at ``cutoff``, from records dated by then.

    Fixed funds accrue their distributed profit for every fund period
    reached by ``cutoff``.
    """
    paid = through(contributions, cutoff, lambda c: c.paid_date, inclusive=inclusive)
    held = through(auctions, cutoff, lambda a: a.date, inclusive=inclusive)
    period = fund_period_at(chit_fund, cutoff if inclusive else cutoff - _JUST_BEFORE)
    if isinstance(chit_fund.terms, FixedTerms) and period == 0:
        return ZERO
    return _profit(chit_fund, paid, held, period)


def compute_chit_fund_profit(
    chit_fund: ChitFund,
    contributions: Iterable[Contribution],
    auctions: Iterable[Auction],
    period_range: PeriodRange | None = None,
    as_of_period: int | None = None,
    up_to_current_period: bool = False,
) -> Decimal:
    """Compute the profit a chit fund earned.

    Auction funds earn the discount on every payout (``monthly
    contribution × members − payout``, positive margins only) and fall
    back to the contribution surplus over payouts when no auction shows a
    margin. Fixed funds spread each auction's margin evenly across the
    fund's duration and report the share accrued by ``as_of_period``.

    Parameters
    ----------
    chit_fund : ChitFund
        The fund.
    contributions : Iterable[Contribution]
        Member contributions.
    auctions : Iterable[Auction]
        Auction payouts.
    period_range : PeriodRange | None
        Window to scope the result to. Auction funds apply the margin and
        surplus rules to the contributions and auctions dated inside it.
        Fixed funds report cumulative profit at ``end`` less cumulative
        profit just before ``start``, deriving the fund period from those
        instants. ``as_of_period`` is ignored here.
    as_of_period : int | None
        Fund period to report at; defaults to the fund's current period.
        Auction funds only count records up to it when it is given.
    up_to_current_period : bool
        Drop contributions and auctions for periods after the fund's
        current period before computing.

    Returns
    -------
    Decimal
        The profit.
    """
    contributions = list(contributions)
    auctions = list(auctions)

    if up_to_current_period:
        contributions = up_to_period(contributions, chit_fund.current_period)
        auctions = up_to_period(auctions, chit_fund.current_period)

    if period_range is None:
        if as_of_period is None:
            period = chit_fund.current_period
        else:
            period = as_of_period
            contributions = up_to_period(contributions, period)
            auctions = up_to_period(auctions, period)
        return _profit(chit_fund, contributions, auctions, period)

    if isinstance(chit_fund.terms, AuctionTerms):
        # Margins and the surplus fallback apply to the window's own records
        profit = _auction_profit(
            chit_fund,
            in_range(contributions, period_range, lambda c: c.paid_date),
            in_range(auctions, period_range, lambda a: a.date),
        )
    else:
        at_end = cumulative_chit_fund_profit(chit_fund, contributions, auctions, period_range.end)
        before_start = cumulative_chit_fund_profit(
            chit_fund, contributions, auctions, period_range.start, inclusive=False
        )
        profit = at_end - before_start

    logger.debug(
        "Chit fund %s profit in %s..%s: %s",
        chit_fund.chit_fund_id,
        period_range.start.isoformat(),
        period_range.end.isoformat(),
        profit,
        extra={"chit_fund_id": chit_fund.chit_fund_id},
    )
    return profit


def compute_chit_fund_outside_amount(
    contributions: Iterable[Contribution],
    auctions: Iterable[Auction],
) -> Decimal:
    """Payouts not yet covered by contributions, never negative."""
    paid_in = sum((as_money(c.amount) for c in contributions), ZERO)
    paid_out = sum((as_money(a.amount) for a in auctions), ZERO)
    return max(ZERO, paid_out - paid_in)


def compute_total_chit_fund_profit(
    accounts: Iterable[ChitFundAccount],
    period_range: PeriodRange | None = None,
    up_to_current_period: bool = False,
) -> Decimal:
    """Sum ``compute_chit_fund_profit`` over many funds."""
    return sum(
        (
            compute_chit_fund_profit(
                account.chit_fund,
                account.contributions,
                account.auctions,
                period_range=period_range,
                up_to_current_period=up_to_current_period,
            )
            for account in accounts
        ),
        ZERO,
    )
