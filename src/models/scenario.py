from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.models.parameters import SimulationParameters, YearEvent


@dataclass(frozen=True)
class ScenarioRecord:
    """A named {params, events} pair as kept by a scenario repository."""
    params: SimulationParameters
    events: tuple[YearEvent, ...] = field(default_factory=tuple)
    saved_at: datetime | None = None


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    return value


def _decode_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def params_to_dict(params: SimulationParameters) -> dict:
    return {f.name: _encode(getattr(params, f.name)) for f in fields(params)}


def params_from_dict(data: dict) -> SimulationParameters:
    kwargs: dict[str, Any] = {}
    for f in fields(SimulationParameters):
        if f.name not in data:
            continue
        if f.name == "initial_share_count":
            kwargs[f.name] = int(data[f.name])
        else:
            kwargs[f.name] = _decode_decimal(data[f.name])
    return SimulationParameters(**kwargs)


def event_to_dict(event: YearEvent) -> dict:
    return {f.name: _encode(getattr(event, f.name)) for f in fields(event)}


def event_from_dict(data: dict) -> YearEvent:
    kwargs = {
        f.name: _decode_decimal(data[f.name])
        for f in fields(YearEvent)
        if f.name in data and data[f.name] is not None
    }
    return YearEvent(**kwargs)


def record_to_payload(record: ScenarioRecord) -> dict:
    """JSON-safe form; Decimals are kept as strings to avoid float drift."""
    return {
        "params": params_to_dict(record.params),
        "events": [event_to_dict(e) for e in record.events],
    }


def record_from_payload(payload: dict, saved_at: datetime | None = None) -> ScenarioRecord:
    return ScenarioRecord(
        params=params_from_dict(payload["params"]),
        events=tuple(event_from_dict(e) for e in payload.get("events", [])),
        saved_at=saved_at,
    )
