"""CLI for running a projection from a scenario file or the scenario store.

Usage:
    python -m src.cli scenario.json
    python -m src.cli scenario.json --csv out.csv --save base-case
    python -m src.cli --scenario base-case
    python -m src.cli --list
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from sqlalchemy import create_engine

from src.config import settings
from src.engine.break_even import one_year_projection
from src.engine.entrant import entrant_investors
from src.engine.errors import ValidationError
from src.engine.simulator import project
from src.export.csv_export import export_projection_csv, fmt, fmt_irr
from src.models.parameters import template_events
from src.models.results import FinancingStep, ProjectionResult
from src.models.scenario import ScenarioRecord, record_from_payload
from src.storage.scenarios import SqlScenarioRepository


def print_ledger(result: ProjectionResult) -> None:
    print(f"\n{'=' * 96}")
    print("  Projection ledger (after financing)")
    print(f"{'=' * 96}")
    print(
        f"  {'Year':>4}  {'Substance':>12}  {'Cash':>10}  {'Market':>12}  "
        f"{'Shares':>12}  {'Owner %':>8}  {'Owner value':>12}  {'Dilution %':>10}"
    )
    for s in result.snapshots:
        if s.step is not FinancingStep.AFTER_FINANCING:
            continue
        print(
            f"  {s.year:>4}  {fmt(s.substance_value):>12}  {fmt(s.cash):>10}  "
            f"{fmt(s.market_value):>12}  {s.total_share_count:>12,}  "
            f"{fmt(s.ownership_share_percent):>8}  {fmt(s.attributable_share_value):>12}  "
            f"{fmt(s.dilution_percent):>10}"
        )
    print()
    print(f"  Simulated owner IRR:  {fmt_irr(result.irr)}  ({result.irr.status.value})")
    if not result.complete:
        print(f"  HALTED in year {result.halted_by.year}: {result.halted_by}")
    for e in entrant_investors(result):
        print(
            f"  Entrant year {e.entry_year}:  invested {fmt(e.invested_amount)}, "
            f"final {fmt(e.final_value)} ({fmt(e.final_ownership_percent)}%), IRR {fmt_irr(e.irr)}"
        )
    print()


def print_violations(e: ValidationError) -> None:
    print("Invalid inputs:", file=sys.stderr)
    for v in e.violations:
        print(f"  - {v}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Holding projection CLI")
    parser.add_argument("file", nargs="?", help="Scenario JSON file: {\"params\": {...}, \"events\": [...]}")
    parser.add_argument("--scenario", help="Load a named scenario from the store")
    parser.add_argument("--save", metavar="NAME", help="Save the scenario under NAME after running")
    parser.add_argument("--list", action="store_true", help="List saved scenarios")
    parser.add_argument("--csv", metavar="PATH", help="Write the ledger as semicolon-separated CSV")
    parser.add_argument("--db", default=settings.database_url, help="Scenario store database URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level)
    repo = SqlScenarioRepository(create_engine(args.db))

    if args.list:
        for name in repo.list():
            print(name)
        return 0

    if args.scenario:
        try:
            record = repo.load(args.scenario)
        except KeyError:
            parser.error(f"no saved scenario named {args.scenario!r}")
    elif args.file:
        payload = json.loads(Path(args.file).read_text(encoding="utf-8"))
        record = record_from_payload(payload)
    else:
        parser.error("a scenario file or --scenario is required (unless using --list)")

    events = list(record.events) or template_events()
    try:
        result = project(record.params, events)
        one_year = one_year_projection(record.params)
    except ValidationError as e:
        print_violations(e)
        return 2

    print_ledger(result)

    if args.csv:
        Path(args.csv).write_text(export_projection_csv(result, one_year), encoding="utf-8")
        print(f"  Wrote {args.csv}")
    if args.save:
        repo.save(args.save, ScenarioRecord(params=record.params, events=tuple(events)))
        print(f"  Saved scenario {args.save!r}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
