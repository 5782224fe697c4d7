"""Entrant investor: subscribes to the whole raise of one year and holds.

Reads a finished projection. Pure functions. No I/O.
"""

from decimal import Decimal

from src.engine.irr import holding_period_cash_flows, solve_irr
from src.models.results import (
    EntrantInvestorResult,
    EntrantPoint,
    FinancingStep,
    IRRResult,
    IRRStatus,
    ProjectionResult,
)


def track_entrant(projection: ProjectionResult, entry_year: int) -> EntrantInvestorResult:
    """Follow the buyer of `entry_year`'s raise to the end of the projection.

    The entrant holds exactly the shares issued in that raise and is diluted
    only by later raises. IRR runs over final_year - entry_year periods.
    """
    try:
        entry = projection.snapshot(entry_year, FinancingStep.AFTER_FINANCING)
    except KeyError:
        raise ValueError(f"Year {entry_year} is not part of the projection") from None
    if not entry.raise_amount:
        raise ValueError(f"No capital raise in year {entry_year}")

    shares = Decimal(entry.new_share_count)
    invested = entry.raise_amount

    path = []
    for snap in projection.after_financing():
        if snap.year < entry_year:
            continue
        fraction = shares / Decimal(snap.total_share_count)
        value = fraction * snap.market_value
        path.append(EntrantPoint(
            year=snap.year,
            ownership_share_percent=fraction * 100,
            value=value,
            percentage_change=(value - invested) / invested * 100,
        ))

    final = path[-1]
    periods = final.year - entry_year
    if periods >= 1:
        irr = solve_irr(holding_period_cash_flows(invested, final.value, periods))
    else:
        irr = IRRResult(status=IRRStatus.UNDEFINED)

    return EntrantInvestorResult(
        entry_year=entry_year,
        invested_amount=invested,
        share_count=entry.new_share_count,
        ownership_at_entry_percent=path[0].ownership_share_percent,
        final_ownership_percent=final.ownership_share_percent,
        final_value=final.value,
        irr=irr,
        path=tuple(path),
    )


def entrant_investors(projection: ProjectionResult) -> list[EntrantInvestorResult]:
    """One entrant per year that carries a raise."""
    return [
        track_entrant(projection, snap.year)
        for snap in projection.after_financing()
        if snap.raise_amount
    ]
