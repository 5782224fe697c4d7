"""Semicolon-separated export of a projection ledger.

Summary block (first-raise entrant, simulated owner, one-year result)
followed by one row per snapshot.
"""

import csv
import io
from decimal import Decimal, ROUND_HALF_UP

from src.engine.entrant import track_entrant
from src.models.results import (
    EntrantInvestorResult,
    IRRResult,
    OneYearResult,
    ProjectionResult,
)

SEPARATOR = ";"
TWO_PLACES = Decimal("0.01")
NOT_AVAILABLE = "n/a"

LEDGER_COLUMNS = [
    "year",
    "step",
    "substance_value",
    "cash",
    "market_value",
    "substance_discount_percent",
    "total_share_count",
    "owner_share_count",
    "ownership_share_percent",
    "attributable_share_value",
    "price_per_share",
    "raise_amount",
    "new_share_count",
    "dilution_percent",
    "exit_amount",
    "investment_amount",
    "growth_percent",
    "percentage_change",
]


def fmt(value: Decimal | int | None) -> str:
    """Two decimals, '.' as decimal mark; n/a for missing values."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, int):
        return str(value)
    return str(value.quantize(TWO_PLACES, ROUND_HALF_UP))


def fmt_irr(irr: IRRResult) -> str:
    if not irr.is_reliable or irr.rate_percent is None:
        return NOT_AVAILABLE
    return f"{fmt(irr.rate_percent)}%"


def _first_raise_entrant(projection: ProjectionResult) -> EntrantInvestorResult | None:
    for snap in projection.after_financing():
        if snap.raise_amount:
            return track_entrant(projection, snap.year)
    return None


def export_projection_csv(
    projection: ProjectionResult,
    one_year: OneYearResult | None = None,
) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=SEPARATOR, lineterminator="\n")
    final_year = projection.final_year

    writer.writerow(["Summary"])
    entrant = _first_raise_entrant(projection)
    if entrant is not None:
        writer.writerow([f"Entrant investor (raise year {entrant.entry_year})"])
        writer.writerow(["Invested amount", fmt(entrant.invested_amount), "currency"])
        writer.writerow(["Ownership after raise", fmt(entrant.ownership_at_entry_percent), "%"])
        writer.writerow([f"Ownership year {final_year}", fmt(entrant.final_ownership_percent), "%"])
        writer.writerow([f"Value year {final_year}", fmt(entrant.final_value), "currency"])
        writer.writerow(["IRR", fmt_irr(entrant.irr), ""])

    if projection.snapshots:
        last = projection.last
        writer.writerow([f"Simulated owner year {final_year}"])
        writer.writerow(["Ownership", fmt(last.ownership_share_percent), "%"])
        writer.writerow(["Value", fmt(last.attributable_share_value), "currency"])
        writer.writerow(["IRR", fmt_irr(projection.irr), ""])
        writer.writerow(["Substance value", fmt(last.substance_value), "currency"])
        writer.writerow(["Market value", fmt(last.market_value), "currency"])

    if not projection.complete:
        writer.writerow([
            "Halted",
            f"year {projection.halted_by.year}",
            "pre-money value <= 0",
        ])

    if one_year is not None:
        writer.writerow(["One-year projection"])
        writer.writerow(["Projected value", fmt(one_year.projected_one_year_value), "currency"])
        writer.writerow(["Percentage change", fmt(one_year.percentage_change), "%"])
        one_year_irr = one_year.one_year_irr * 100 if one_year.one_year_irr is not None else None
        writer.writerow(["IRR (1 year)", fmt(one_year_irr), "%"])
        writer.writerow(["Break-even increase", fmt(one_year.required_increase_percent), "%"])

    writer.writerow([])
    writer.writerow(LEDGER_COLUMNS)
    for snap in projection.snapshots:
        writer.writerow([
            snap.year,
            snap.step.value,
            fmt(snap.substance_value),
            fmt(snap.cash),
            fmt(snap.market_value),
            fmt(snap.substance_discount_percent),
            snap.total_share_count,
            snap.owner_share_count,
            fmt(snap.ownership_share_percent),
            fmt(snap.attributable_share_value),
            fmt(snap.price_per_share),
            fmt(snap.raise_amount),
            snap.new_share_count,
            fmt(snap.dilution_percent),
            fmt(snap.exit_amount),
            fmt(snap.investment_amount),
            fmt(snap.growth_percent),
            fmt(snap.percentage_change),
        ])

    return buf.getvalue()
