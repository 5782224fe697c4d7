from dataclasses import dataclass
from decimal import Decimal

from src.config import settings


@dataclass(frozen=True)
class SimulationParameters:
    # Entry valuation (currency)
    initial_nav: Decimal
    initial_market_value: Decimal
    initial_cash: Decimal = Decimal("0")

    # Percentages on a 0-100 scale
    substance_discount_percent: Decimal = Decimal("0")
    ownership_share_percent: Decimal = Decimal("100")

    # Template values used when a YearEvent leaves a field unset
    default_raise_amount: Decimal = Decimal("0")
    default_management_cost: Decimal = Decimal("0")
    default_growth_percent: Decimal = Decimal("0")

    initial_share_count: int = settings.default_initial_share_count

    @property
    def ownership_fraction(self) -> Decimal:
        return self.ownership_share_percent / 100

    @property
    def entry_market_value(self) -> Decimal:
        """Market value at entry including cash on hand."""
        return self.initial_market_value + self.initial_cash

    @property
    def implied_discount_percent(self) -> Decimal:
        """Discount implied by the entry prices: (1 - MV / NAV) * 100."""
        return (1 - self.initial_market_value / self.initial_nav) * 100

    @property
    def initial_attributable_value(self) -> Decimal:
        return self.ownership_fraction * self.entry_market_value


@dataclass(frozen=True)
class YearEvent:
    """Inputs for one simulated year. Unset fields fall back to the template."""
    raise_amount: Decimal | None = None
    exit_amount: Decimal = Decimal("0")
    investment_amount: Decimal = Decimal("0")
    growth_percent: Decimal | None = None  # Negative = decline
    management_cost: Decimal | None = None
    substance_discount_percent: Decimal | None = None

    def resolve(self, params: SimulationParameters) -> "YearEvent":
        """Return a copy with every optional field filled from params."""
        return YearEvent(
            raise_amount=(
                self.raise_amount if self.raise_amount is not None
                else params.default_raise_amount
            ),
            exit_amount=self.exit_amount,
            investment_amount=self.investment_amount,
            growth_percent=(
                self.growth_percent if self.growth_percent is not None
                else params.default_growth_percent
            ),
            management_cost=(
                self.management_cost if self.management_cost is not None
                else params.default_management_cost
            ),
            substance_discount_percent=(
                self.substance_discount_percent
                if self.substance_discount_percent is not None
                else params.substance_discount_percent
            ),
        )


def template_events(years: int | None = None) -> list[YearEvent]:
    """Schedule of years 0..N that all use the template values."""
    n = years if years is not None else settings.default_projection_years
    return [YearEvent() for _ in range(n + 1)]
