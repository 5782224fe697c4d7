"""Year-by-year projection of a holding under capital-raise dilution.

Pure computation. No I/O. Parameters and events in, ProjectionResult out.

Conventions used throughout:
  - Substance value excludes cash. Market value is
    substance * (1 - discount / 100) + cash, and raised cash stays in cash.
  - Dilution is measured against the pre-money value (before the new cash).
  - The simulated owner never subscribes, so its share count is fixed for
    the whole run and its ownership falls on every raise.

Each year is a fold step over HoldingState: advance_year() applies
exit/investment, growth and the cost draw, then finance() applies the raise.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from src.engine.errors import UndefinedValuationError
from src.engine.irr import holding_period_cash_flows, solve_irr
from src.engine.validation import validate_inputs
from src.models.parameters import SimulationParameters, YearEvent
from src.models.results import (
    FinancingStep,
    IRRResult,
    IRRStatus,
    ProjectionResult,
    YearSnapshot,
)

logger = logging.getLogger(__name__)

WHOLE_SHARE = Decimal("1")


@dataclass(frozen=True)
class HoldingState:
    substance_value: Decimal
    cash: Decimal
    total_share_count: int
    owner_share_count: int


def round_shares(amount: Decimal) -> int:
    return int(amount.quantize(WHOLE_SHARE, ROUND_HALF_UP))


def market_value(state: HoldingState, discount_percent: Decimal) -> Decimal:
    return state.substance_value * (1 - discount_percent / 100) + state.cash


def attributable_value(state: HoldingState, value: Decimal) -> Decimal:
    """Simulated owner's slice of a market value."""
    return Decimal(state.owner_share_count) / Decimal(state.total_share_count) * value


def initial_state(params: SimulationParameters) -> HoldingState:
    total = params.initial_share_count
    return HoldingState(
        substance_value=params.initial_nav,
        cash=params.initial_cash,
        total_share_count=total,
        owner_share_count=round_shares(Decimal(total) * params.ownership_fraction),
    )


def _snapshot(
    year: int,
    step: FinancingStep,
    state: HoldingState,
    discount_percent: Decimal,
    entry_value: Decimal,
    event: YearEvent | None = None,
    raise_amount: Decimal | None = None,
    dilution_percent: Decimal | None = None,
    new_share_count: int = 0,
) -> YearSnapshot:
    mv = market_value(state, discount_percent)
    value = attributable_value(state, mv)
    if entry_value != 0:
        change = (value - entry_value) / entry_value * 100
    else:
        change = Decimal("0")

    return YearSnapshot(
        year=year,
        step=step,
        substance_value=state.substance_value,
        cash=state.cash,
        market_value=mv,
        substance_discount_percent=discount_percent,
        total_share_count=state.total_share_count,
        owner_share_count=state.owner_share_count,
        ownership_share_percent=(
            Decimal(state.owner_share_count) / Decimal(state.total_share_count) * 100
        ),
        attributable_share_value=value,
        price_per_share=mv / Decimal(state.total_share_count),
        raise_amount=raise_amount,
        dilution_percent=dilution_percent,
        new_share_count=new_share_count,
        exit_amount=event.exit_amount if event else Decimal("0"),
        investment_amount=event.investment_amount if event else Decimal("0"),
        growth_percent=event.growth_percent if event else Decimal("0"),
        percentage_change=change,
    )


def advance_year(
    state: HoldingState,
    event: YearEvent,
    year: int,
    entry_value: Decimal,
) -> tuple[HoldingState, YearSnapshot]:
    """Exit/investment, growth and the cost draw; returns the pre-financing snapshot.

    `event` must already be resolved against the template.
    """
    substance = state.substance_value
    cash = state.cash

    # Exit and investment move value between substance and cash before growth
    if event.exit_amount > 0:
        cash += event.exit_amount
        substance -= event.exit_amount
    if event.investment_amount > 0:
        cash -= event.investment_amount
        substance += event.investment_amount

    # Growth may be negative; substance is not floored at zero
    substance += substance * (event.growth_percent / 100)

    # Cash may go negative; raises only come from the event schedule
    cash -= event.management_cost

    new_state = replace(state, substance_value=substance, cash=cash)
    before = _snapshot(
        year,
        FinancingStep.BEFORE_FINANCING,
        new_state,
        event.substance_discount_percent,
        entry_value,
        event=event,
    )
    return new_state, before


def finance(
    state: HoldingState,
    before: YearSnapshot,
    raise_amount: Decimal,
    entry_value: Decimal,
    event: YearEvent | None = None,
) -> tuple[HoldingState, YearSnapshot]:
    """Apply the year's capital raise; returns the post-financing snapshot.

    New shares are priced off the pre-money value (the pre-financing market
    value, which excludes the new cash) and the pre-raise share count.

    Raises UndefinedValuationError if a raise meets a pre-money value <= 0.
    """
    year = before.year
    discount = before.substance_discount_percent

    if raise_amount <= 0:
        after = _snapshot(
            year, FinancingStep.AFTER_FINANCING, state, discount, entry_value, event=event
        )
        return state, after

    pre_money = before.market_value
    if pre_money <= 0:
        raise UndefinedValuationError(year, pre_money)

    price_per_share = pre_money / Decimal(state.total_share_count)
    new_shares = round_shares(raise_amount / price_per_share)
    dilution_factor = pre_money / (pre_money + raise_amount)
    dilution_percent = (1 - dilution_factor) * 100

    new_state = replace(
        state,
        cash=state.cash + raise_amount,
        total_share_count=state.total_share_count + new_shares,
    )
    logger.debug(
        "Year %d raise %s: pre-money %s, price %s, %d new shares (%d total), dilution %s%%",
        year, raise_amount, pre_money, price_per_share, new_shares,
        new_state.total_share_count, dilution_percent,
    )

    after = _snapshot(
        year,
        FinancingStep.AFTER_FINANCING,
        new_state,
        discount,
        entry_value,
        event=event,
        raise_amount=raise_amount,
        dilution_percent=dilution_percent,
        new_share_count=new_shares,
    )
    return new_state, after


def step_year(
    state: HoldingState,
    event: YearEvent,
    year: int,
    entry_value: Decimal,
) -> tuple[HoldingState, YearSnapshot, YearSnapshot]:
    """One full year: (prior state, event) -> (new state, before, after)."""
    state, before = advance_year(state, event, year, entry_value)
    state, after = finance(state, before, event.raise_amount, entry_value, event=event)
    return state, before, after


def _owner_irr(snapshots: list[YearSnapshot]) -> IRRResult:
    first = snapshots[0]
    last = snapshots[-1]
    if last.year < 1:
        return IRRResult(status=IRRStatus.UNDEFINED)
    cash_flows = holding_period_cash_flows(
        first.attributable_share_value, last.attributable_share_value, last.year
    )
    return solve_irr(cash_flows)


def project(
    params: SimulationParameters,
    events: Sequence[YearEvent],
) -> ProjectionResult:
    """Run the projection for years 0..len(events) - 1.

    Year 0 is the entry point: the share count and the simulated owner's
    block are set up and valued with the discount implied by the entry
    prices, so the market value equals initial_market_value + initial_cash.
    Only the raise of events[0] applies; no time has elapsed, so its
    growth, cost, exit and investment are not used.

    Raises ValidationError before doing any work if inputs are out of range.
    A raise against a non-positive pre-money value stops the run; the
    snapshots computed so far come back with `halted_by` set.
    """
    validate_inputs(params, events)
    resolved = [e.resolve(params) for e in events]

    state = initial_state(params)
    entry_discount = params.implied_discount_percent
    entry_value = attributable_value(state, market_value(state, entry_discount))

    snapshots: list[YearSnapshot] = []
    try:
        before = _snapshot(
            0, FinancingStep.BEFORE_FINANCING, state, entry_discount, entry_value
        )
        snapshots.append(before)
        state, after = finance(state, before, resolved[0].raise_amount, entry_value)
        snapshots.append(after)

        for year, event in enumerate(resolved[1:], start=1):
            state, before = advance_year(state, event, year, entry_value)
            snapshots.append(before)
            state, after = finance(state, before, event.raise_amount, entry_value, event=event)
            snapshots.append(after)
    except UndefinedValuationError as e:
        logger.warning("Projection halted: %s", e)
        return ProjectionResult(
            snapshots=tuple(snapshots),
            irr=IRRResult(status=IRRStatus.UNDEFINED),
            halted_by=e,
        )

    return ProjectionResult(snapshots=tuple(snapshots), irr=_owner_irr(snapshots))
