"""Exceptions raised by the projection engine."""

from dataclasses import dataclass
from decimal import Decimal


class ProjectionError(Exception):
    """Base class for engine errors."""


@dataclass(frozen=True)
class Violation:
    field: str  # e.g. "substance_discount_percent" or "events[3].growth_percent"
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(ProjectionError):
    """One or more inputs are outside their documented range.

    Carries every violation found, not just the first.
    """

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__("; ".join(str(v) for v in self.violations))

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class UndefinedValuationError(ProjectionError):
    """A capital raise was attempted against a non-positive pre-money value."""

    def __init__(self, year: int, pre_money_value: Decimal):
        self.year = year
        self.pre_money_value = pre_money_value
        super().__init__(
            f"Undefined valuation in year {year}: pre-money value {pre_money_value} <= 0"
        )
