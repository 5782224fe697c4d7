"""Projection routes: the primary API entry point."""

from fastapi import APIRouter, HTTPException

from src.api.schemas import (
    EntrantInvestorResponse,
    IRRRequest,
    IRRResponse,
    OneYearResponse,
    ProjectionRequest,
    ProjectionResponse,
    SimulationParametersRequest,
    ViolationResponse,
    YearEventRequest,
    YearSnapshotResponse,
)
from src.engine.break_even import one_year_projection
from src.engine.entrant import entrant_investors
from src.engine.errors import ValidationError
from src.engine.irr import solve_irr
from src.engine.simulator import project
from src.models.parameters import SimulationParameters, YearEvent, template_events
from src.models.results import IRRResult, ProjectionResult

router = APIRouter(prefix="/api/v1", tags=["projection"])


def to_params(req: SimulationParametersRequest) -> SimulationParameters:
    return SimulationParameters(**req.model_dump())


def to_events(events: list[YearEventRequest] | None) -> list[YearEvent]:
    if events is None:
        return template_events()
    return [YearEvent(**e.model_dump()) for e in events]


def validation_http_error(e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=[
            ViolationResponse(field=v.field, message=v.message).model_dump()
            for v in e.violations
        ],
    )


def _irr_response(irr: IRRResult) -> IRRResponse:
    return IRRResponse(status=irr.status.value, rate=irr.rate, rate_percent=irr.rate_percent)


def _projection_to_response(result: ProjectionResult) -> ProjectionResponse:
    snapshots = [
        YearSnapshotResponse(
            year=s.year,
            step=s.step.value,
            substance_value=s.substance_value,
            cash=s.cash,
            market_value=s.market_value,
            substance_discount_percent=s.substance_discount_percent,
            total_share_count=s.total_share_count,
            owner_share_count=s.owner_share_count,
            ownership_share_percent=s.ownership_share_percent,
            attributable_share_value=s.attributable_share_value,
            price_per_share=s.price_per_share,
            raise_amount=s.raise_amount,
            dilution_percent=s.dilution_percent,
            new_share_count=s.new_share_count,
            exit_amount=s.exit_amount,
            investment_amount=s.investment_amount,
            growth_percent=s.growth_percent,
            percentage_change=s.percentage_change,
        )
        for s in result.snapshots
    ]

    entrants = [
        EntrantInvestorResponse(
            entry_year=e.entry_year,
            invested_amount=e.invested_amount,
            share_count=e.share_count,
            ownership_at_entry_percent=e.ownership_at_entry_percent,
            final_ownership_percent=e.final_ownership_percent,
            final_value=e.final_value,
            irr=_irr_response(e.irr),
        )
        for e in entrant_investors(result)
    ]

    return ProjectionResponse(
        snapshots=snapshots,
        irr=_irr_response(result.irr),
        complete=result.complete,
        halted_year=result.halted_by.year if result.halted_by else None,
        entrants=entrants,
    )


@router.post("/projection", response_model=ProjectionResponse)
async def run_projection(req: ProjectionRequest):
    """Parameters + yearly events → snapshot ledger, owner IRR and entrants.

    A halted run still returns 200 with the valid prefix and `complete=false`.
    """
    try:
        result = project(to_params(req.params), to_events(req.events))
    except ValidationError as e:
        raise validation_http_error(e)
    return _projection_to_response(result)


@router.post("/one-year", response_model=OneYearResponse)
async def run_one_year(req: SimulationParametersRequest):
    """One-year what-if and break-even growth."""
    try:
        r = one_year_projection(to_params(req))
    except ValidationError as e:
        raise validation_http_error(e)
    return OneYearResponse(
        initial_value=r.initial_value,
        diluted_ownership_percent=r.diluted_ownership_percent,
        substance_after_costs=r.substance_after_costs,
        substance_value=r.substance_value,
        market_value=r.market_value,
        projected_one_year_value=r.projected_one_year_value,
        percentage_change=r.percentage_change,
        one_year_irr=r.one_year_irr,
        target_value=r.target_value,
        required_substance_value=r.required_substance_value,
        required_increase_amount=r.required_increase_amount,
        required_increase_percent=r.required_increase_percent,
    )


@router.post("/irr", response_model=IRRResponse)
async def run_irr(req: IRRRequest):
    """IRR of an arbitrary cash-flow vector. Never fails; see `status`."""
    return _irr_response(solve_irr(req.cash_flows))
