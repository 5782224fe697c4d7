"""Input range checks run before any projection work.

Collects every violation and raises a single ValidationError.
"""

from decimal import Decimal
from typing import Sequence

from src.engine.errors import ValidationError, Violation
from src.models.parameters import SimulationParameters, YearEvent

MIN_GROWTH_PERCENT = Decimal("-100")
MAX_GROWTH_PERCENT = Decimal("1000")


def _check_percent(field: str, value: Decimal, out: list[Violation]) -> None:
    if value < 0 or value > 100:
        out.append(Violation(field, f"must be between 0 and 100 percent, got {value}"))


def _check_non_negative(field: str, value: Decimal, out: list[Violation]) -> None:
    if value < 0:
        out.append(Violation(field, f"must be greater than or equal to 0, got {value}"))


def _check_growth(field: str, value: Decimal, out: list[Violation]) -> None:
    if value < MIN_GROWTH_PERCENT or value > MAX_GROWTH_PERCENT:
        out.append(Violation(
            field,
            f"must be between {MIN_GROWTH_PERCENT} and {MAX_GROWTH_PERCENT} percent, got {value}",
        ))


def parameter_violations(params: SimulationParameters) -> list[Violation]:
    violations: list[Violation] = []

    if params.initial_market_value <= 0:
        violations.append(Violation(
            "initial_market_value", f"must be greater than 0, got {params.initial_market_value}"
        ))
    if params.initial_nav <= 0:
        violations.append(Violation(
            "initial_nav", f"must be greater than 0, got {params.initial_nav}"
        ))
    _check_non_negative("initial_cash", params.initial_cash, violations)
    _check_percent("substance_discount_percent", params.substance_discount_percent, violations)
    _check_percent("ownership_share_percent", params.ownership_share_percent, violations)
    _check_non_negative("default_raise_amount", params.default_raise_amount, violations)
    _check_non_negative("default_management_cost", params.default_management_cost, violations)
    _check_growth("default_growth_percent", params.default_growth_percent, violations)
    if params.initial_share_count < 1:
        violations.append(Violation(
            "initial_share_count", f"must be at least 1, got {params.initial_share_count}"
        ))

    return violations


def event_violations(events: Sequence[YearEvent]) -> list[Violation]:
    violations: list[Violation] = []

    if not events:
        violations.append(Violation("events", "at least one year (year 0) is required"))
        return violations

    for i, event in enumerate(events):
        prefix = f"events[{i}]"
        if event.raise_amount is not None:
            _check_non_negative(f"{prefix}.raise_amount", event.raise_amount, violations)
        _check_non_negative(f"{prefix}.exit_amount", event.exit_amount, violations)
        _check_non_negative(f"{prefix}.investment_amount", event.investment_amount, violations)
        if event.growth_percent is not None:
            _check_growth(f"{prefix}.growth_percent", event.growth_percent, violations)
        if event.management_cost is not None:
            _check_non_negative(f"{prefix}.management_cost", event.management_cost, violations)
        if event.substance_discount_percent is not None:
            _check_percent(
                f"{prefix}.substance_discount_percent", event.substance_discount_percent, violations
            )

    return violations


def validate_parameters(params: SimulationParameters) -> None:
    violations = parameter_violations(params)
    if violations:
        raise ValidationError(violations)


def validate_inputs(params: SimulationParameters, events: Sequence[YearEvent]) -> None:
    """Raise ValidationError listing every out-of-range parameter and event field."""
    violations = parameter_violations(params) + event_violations(events)
    if violations:
        raise ValidationError(violations)
