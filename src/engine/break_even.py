"""One-year what-if and break-even threshold.

Closed-form single step on the template values: raise, cost draw, growth.
The raise and cost are folded into substance here rather than tracked as
cash, which keeps the break-even solvable algebraically.

Pure functions. No I/O.
"""

from decimal import Decimal

from src.config import settings
from src.engine.validation import validate_parameters
from src.models.parameters import SimulationParameters
from src.models.results import OneYearResult


def break_even_substance_value(
    params: SimulationParameters,
    multiple: Decimal | None = None,
) -> Decimal | None:
    """Year-end substance value at which the owner's one-year value hits the hurdle.

    Target = multiple * f * M0 and projected value = f * M0 / (M0 + R) * M1,
    so the ownership fraction cancels: M1 = multiple * (M0 + R). Returns None
    when the discount is 100% and no substance value can reach it.
    """
    hurdle = multiple if multiple is not None else settings.break_even_multiple
    keep = 1 - params.substance_discount_percent / 100
    if keep == 0:
        return None
    required_market_value = hurdle * (params.entry_market_value + params.default_raise_amount)
    return (required_market_value - params.initial_cash) / keep


def one_year_projection(params: SimulationParameters) -> OneYearResult:
    """Project the simulated owner's value one year ahead and solve the break-even.

    Raises ValidationError if params are out of range.
    """
    validate_parameters(params)

    f = params.ownership_fraction
    entry_mv = params.entry_market_value
    raise_amount = params.default_raise_amount

    initial_value = f * entry_mv

    # Dilution from the raise, priced at the entry market value
    if raise_amount > 0:
        diluted = f * entry_mv / (entry_mv + raise_amount)
    else:
        diluted = f

    substance_after_costs = params.initial_nav + raise_amount - params.default_management_cost
    substance = substance_after_costs * (1 + params.default_growth_percent / 100)
    mv = substance * (1 - params.substance_discount_percent / 100) + params.initial_cash
    projected = diluted * mv

    if initial_value != 0:
        change = (projected - initial_value) / initial_value * 100
    else:
        change = Decimal("0")
    one_year_irr = projected / initial_value - 1 if initial_value > 0 else None

    # No hurdle to reach without an entry stake
    if initial_value > 0:
        required_substance = break_even_substance_value(params)
    else:
        required_substance = None
    if required_substance is not None:
        required_increase = required_substance - substance_after_costs
        required_percent = (
            required_increase / substance_after_costs * 100
            if substance_after_costs > 0 else None
        )
    else:
        required_increase = None
        required_percent = None

    return OneYearResult(
        initial_value=initial_value,
        diluted_ownership_percent=diluted * 100,
        substance_after_costs=substance_after_costs,
        substance_value=substance,
        market_value=mv,
        projected_one_year_value=projected,
        percentage_change=change,
        one_year_irr=one_year_irr,
        target_value=settings.break_even_multiple * initial_value,
        required_substance_value=required_substance,
        required_increase_amount=required_increase,
        required_increase_percent=required_percent,
    )
