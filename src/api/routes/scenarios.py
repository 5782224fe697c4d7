"""Named scenario routes.

Repositories do blocking I/O, so handlers are plain functions and run in
FastAPI's threadpool.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_scenario_repository
from src.api.routes.projection import to_events, to_params
from src.api.schemas import (
    ScenarioRequest,
    ScenarioResponse,
    SimulationParametersRequest,
    YearEventRequest,
)
from src.models.scenario import ScenarioRecord
from src.storage.scenarios import ScenarioRepository

router = APIRouter(prefix="/api/v1/scenarios", tags=["scenarios"])


def _to_response(name: str, record: ScenarioRecord) -> ScenarioResponse:
    return ScenarioResponse(
        name=name,
        params=SimulationParametersRequest(**asdict(record.params)),
        events=[YearEventRequest(**asdict(e)) for e in record.events],
        saved_at=record.saved_at,
    )


@router.get("", response_model=list[str])
def list_scenarios(repo: ScenarioRepository = Depends(get_scenario_repository)):
    return repo.list()


@router.get("/{name}", response_model=ScenarioResponse)
def load_scenario(name: str, repo: ScenarioRepository = Depends(get_scenario_repository)):
    try:
        record = repo.load(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Scenario {name!r} not found")
    return _to_response(name, record)


@router.put("/{name}", response_model=ScenarioResponse)
def save_scenario(
    name: str,
    req: ScenarioRequest,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """Store params and events under a name, replacing any earlier version.

    Inputs are stored as given; validation happens when the scenario is run.
    """
    record = ScenarioRecord(
        params=to_params(req.params),
        events=tuple(to_events(req.events)),
    )
    saved = repo.save(name, record)
    return _to_response(name, saved)


@router.delete("/{name}", status_code=204)
def delete_scenario(name: str, repo: ScenarioRepository = Depends(get_scenario_repository)):
    try:
        repo.delete(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Scenario {name!r} not found")
