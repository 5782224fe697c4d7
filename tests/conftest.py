"""Canonical test fixtures used across all tests.

Fixture: holding at NAV 50, market value 10 (80% substance discount),
10% simulated owner, 5 raised and 5 drawn in costs every year, 20% growth.
"""

import pytest
from decimal import Decimal

from src.models.parameters import SimulationParameters, YearEvent


@pytest.fixture
def canonical_params() -> SimulationParameters:
    """Template scenario with a raise every year."""
    return SimulationParameters(
        initial_nav=Decimal("50"),
        initial_market_value=Decimal("10"),
        initial_cash=Decimal("0"),
        substance_discount_percent=Decimal("80"),
        ownership_share_percent=Decimal("10"),
        default_raise_amount=Decimal("5"),
        default_management_cost=Decimal("5"),
        default_growth_percent=Decimal("20"),
        initial_share_count=441862,
    )


@pytest.fixture
def canonical_events() -> list[YearEvent]:
    """Years 0..10 on template values."""
    return [YearEvent() for _ in range(11)]


@pytest.fixture
def doubling_params() -> SimulationParameters:
    """NAV = market value = 10, no discount, full ownership, no template flows."""
    return SimulationParameters(
        initial_nav=Decimal("10"),
        initial_market_value=Decimal("10"),
        substance_discount_percent=Decimal("0"),
        ownership_share_percent=Decimal("100"),
        initial_share_count=1000,
    )


@pytest.fixture
def doubling_events() -> list[YearEvent]:
    """+100% growth in year 1, flat for years 2..10."""
    return (
        [YearEvent()]
        + [YearEvent(growth_percent=Decimal("100"))]
        + [YearEvent(growth_percent=Decimal("0")) for _ in range(9)]
    )


@pytest.fixture
def half_owner_params() -> SimulationParameters:
    """Owner holds 500 of 1000 shares in a holding worth 10."""
    return SimulationParameters(
        initial_nav=Decimal("10"),
        initial_market_value=Decimal("10"),
        substance_discount_percent=Decimal("0"),
        ownership_share_percent=Decimal("50"),
        initial_share_count=1000,
    )


@pytest.fixture
def year0_raise_events() -> list[YearEvent]:
    """A raise of 10 at entry, nothing afterwards."""
    return [YearEvent(raise_amount=Decimal("10"))] + [YearEvent() for _ in range(10)]
