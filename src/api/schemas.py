"""Pydantic schemas for API request/response models.

Range checks are left to the engine so that a 422 lists every violation
in one response.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

from src.config import settings

# Fixed-point JSON strings: "150", never "1.5E+2"
PlainDecimal = Annotated[
    Decimal, PlainSerializer(lambda v: format(v, "f"), return_type=str, when_used="json")
]


# ---- Request schemas ----

class SimulationParametersRequest(BaseModel):
    initial_nav: PlainDecimal = Field(..., description="Net asset value at entry")
    initial_market_value: PlainDecimal = Field(
        ..., description="Market value at entry, excluding cash"
    )
    initial_cash: PlainDecimal = Decimal("0")
    substance_discount_percent: PlainDecimal = Decimal("0")
    ownership_share_percent: PlainDecimal = Decimal("100")
    default_raise_amount: PlainDecimal = settings.default_raise_amount
    default_management_cost: PlainDecimal = settings.default_management_cost
    default_growth_percent: PlainDecimal = settings.default_growth_percent
    initial_share_count: int = settings.default_initial_share_count


class YearEventRequest(BaseModel):
    raise_amount: PlainDecimal | None = None
    exit_amount: PlainDecimal = Decimal("0")
    investment_amount: PlainDecimal = Decimal("0")
    growth_percent: PlainDecimal | None = None
    management_cost: PlainDecimal | None = None
    substance_discount_percent: PlainDecimal | None = None


class ProjectionRequest(BaseModel):
    params: SimulationParametersRequest
    events: list[YearEventRequest] | None = Field(
        None, description="Years 0..N; omitted = template values for the default horizon"
    )


class IRRRequest(BaseModel):
    cash_flows: list[Decimal]


class ScenarioRequest(BaseModel):
    params: SimulationParametersRequest
    events: list[YearEventRequest] = []


# ---- Response schemas ----

class ViolationResponse(BaseModel):
    field: str
    message: str


class IRRResponse(BaseModel):
    status: str
    rate: PlainDecimal | None = None
    rate_percent: PlainDecimal | None = None


class YearSnapshotResponse(BaseModel):
    year: int
    step: str
    substance_value: PlainDecimal
    cash: PlainDecimal
    market_value: PlainDecimal
    substance_discount_percent: PlainDecimal
    total_share_count: int
    owner_share_count: int
    ownership_share_percent: PlainDecimal
    attributable_share_value: PlainDecimal
    price_per_share: PlainDecimal
    raise_amount: PlainDecimal | None = None
    dilution_percent: PlainDecimal | None = None
    new_share_count: int = 0
    exit_amount: PlainDecimal
    investment_amount: PlainDecimal
    growth_percent: PlainDecimal
    percentage_change: PlainDecimal


class EntrantInvestorResponse(BaseModel):
    entry_year: int
    invested_amount: PlainDecimal
    share_count: int
    ownership_at_entry_percent: PlainDecimal
    final_ownership_percent: PlainDecimal
    final_value: PlainDecimal
    irr: IRRResponse


class ProjectionResponse(BaseModel):
    snapshots: list[YearSnapshotResponse]
    irr: IRRResponse
    complete: bool
    halted_year: int | None = None
    entrants: list[EntrantInvestorResponse] = []


class OneYearResponse(BaseModel):
    initial_value: PlainDecimal
    diluted_ownership_percent: PlainDecimal
    substance_after_costs: PlainDecimal
    substance_value: PlainDecimal
    market_value: PlainDecimal
    projected_one_year_value: PlainDecimal
    percentage_change: PlainDecimal
    one_year_irr: PlainDecimal | None = None
    target_value: PlainDecimal
    required_substance_value: PlainDecimal | None = None
    required_increase_amount: PlainDecimal | None = None
    required_increase_percent: PlainDecimal | None = None


class ScenarioResponse(BaseModel):
    name: str
    params: SimulationParametersRequest
    events: list[YearEventRequest]
    saved_at: datetime | None = None
