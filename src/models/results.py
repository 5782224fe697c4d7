from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from src.engine.errors import UndefinedValuationError


class FinancingStep(Enum):
    BEFORE_FINANCING = "before_financing"
    AFTER_FINANCING = "after_financing"


class IRRStatus(Enum):
    CONVERGED = "converged"
    TOTAL_LOSS = "total_loss"  # Final value <= 1% of outflow, rate pinned at -100%
    UNDEFINED = "undefined"  # Degenerate cash flows
    NOT_CONVERGED = "not_converged"  # Newton-Raphson gave up; rate is the last guess


@dataclass(frozen=True)
class IRRResult:
    status: IRRStatus
    rate: Decimal | None = None  # Fraction per period, e.g. Decimal("0.0718")
    iterations: int = 0

    @property
    def is_reliable(self) -> bool:
        return self.status in (IRRStatus.CONVERGED, IRRStatus.TOTAL_LOSS)

    @property
    def rate_percent(self) -> Decimal | None:
        if self.rate is None:
            return None
        return self.rate * 100


@dataclass(frozen=True)
class YearSnapshot:
    year: int
    step: FinancingStep

    # Valuation
    substance_value: Decimal  # Excludes cash
    cash: Decimal
    market_value: Decimal  # substance * (1 - discount) + cash
    substance_discount_percent: Decimal

    # Shares
    total_share_count: int
    owner_share_count: int
    ownership_share_percent: Decimal
    attributable_share_value: Decimal
    price_per_share: Decimal

    # Financing (None when the step carries no raise)
    raise_amount: Decimal | None = None
    dilution_percent: Decimal | None = None
    new_share_count: int = 0

    # Year inputs echoed for the ledger
    exit_amount: Decimal = Decimal("0")
    investment_amount: Decimal = Decimal("0")
    growth_percent: Decimal = Decimal("0")

    percentage_change: Decimal = Decimal("0")  # Attributable value vs entry, in %


@dataclass(frozen=True)
class ProjectionResult:
    snapshots: tuple[YearSnapshot, ...] = ()
    irr: IRRResult = field(default_factory=lambda: IRRResult(status=IRRStatus.UNDEFINED))
    halted_by: UndefinedValuationError | None = None

    @property
    def complete(self) -> bool:
        return self.halted_by is None

    @property
    def first(self) -> YearSnapshot:
        return self.snapshots[0]

    @property
    def last(self) -> YearSnapshot:
        return self.snapshots[-1]

    @property
    def final_year(self) -> int:
        return self.snapshots[-1].year if self.snapshots else 0

    def after_financing(self) -> list[YearSnapshot]:
        """One snapshot per year: the post-raise state."""
        return [s for s in self.snapshots if s.step is FinancingStep.AFTER_FINANCING]

    def snapshot(self, year: int, step: FinancingStep = FinancingStep.AFTER_FINANCING) -> YearSnapshot:
        for s in self.snapshots:
            if s.year == year and s.step is step:
                return s
        raise KeyError(f"No {step.value} snapshot for year {year}")


@dataclass(frozen=True)
class OneYearResult:
    initial_value: Decimal
    diluted_ownership_percent: Decimal
    substance_after_costs: Decimal
    substance_value: Decimal
    market_value: Decimal
    projected_one_year_value: Decimal
    percentage_change: Decimal
    one_year_irr: Decimal | None  # Fraction; None when there is no entry value

    # Break-even against the fixed hurdle (None when no finite solution exists)
    target_value: Decimal
    required_substance_value: Decimal | None
    required_increase_amount: Decimal | None
    required_increase_percent: Decimal | None


@dataclass(frozen=True)
class EntrantPoint:
    year: int
    ownership_share_percent: Decimal
    value: Decimal
    percentage_change: Decimal


@dataclass(frozen=True)
class EntrantInvestorResult:
    entry_year: int
    invested_amount: Decimal
    share_count: int
    ownership_at_entry_percent: Decimal
    final_ownership_percent: Decimal
    final_value: Decimal
    irr: IRRResult
    path: tuple[EntrantPoint, ...] = ()
