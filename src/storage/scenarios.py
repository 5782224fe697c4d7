"""Named scenario store.

The engine never touches this module; callers inject a ScenarioRepository.
"""

import logging
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from sqlalchemy import Engine, select
from sqlalchemy.orm import sessionmaker

from src.models.db import Base, SavedScenarioRecord
from src.models.scenario import ScenarioRecord, record_from_payload, record_to_payload

logger = logging.getLogger(__name__)


@runtime_checkable
class ScenarioRepository(Protocol):
    def save(self, name: str, record: ScenarioRecord) -> ScenarioRecord:
        """Store a record under name, replacing any existing one."""
        ...

    def load(self, name: str) -> ScenarioRecord:
        """Return the record; raises KeyError if name is unknown."""
        ...

    def list(self) -> list[str]:
        """Saved names in alphabetical order."""
        ...

    def delete(self, name: str) -> None:
        """Remove the record; raises KeyError if name is unknown."""
        ...


def _stamp(record: ScenarioRecord) -> ScenarioRecord:
    return ScenarioRecord(
        params=record.params,
        events=tuple(record.events),
        saved_at=datetime.now(timezone.utc),
    )


class InMemoryScenarioRepository:
    def __init__(self) -> None:
        self._records: dict[str, ScenarioRecord] = {}

    def save(self, name: str, record: ScenarioRecord) -> ScenarioRecord:
        stamped = _stamp(record)
        self._records[name] = stamped
        return stamped

    def load(self, name: str) -> ScenarioRecord:
        if name not in self._records:
            raise KeyError(name)
        return self._records[name]

    def list(self) -> list[str]:
        return sorted(self._records)

    def delete(self, name: str) -> None:
        if name not in self._records:
            raise KeyError(name)
        del self._records[name]


class SqlScenarioRepository:
    """Scenario store backed by any SQLAlchemy engine (SQLite by default)."""

    def __init__(self, engine: Engine):
        self.engine = engine
        Base.metadata.create_all(engine)
        self._sessions = sessionmaker(engine, expire_on_commit=False)

    def save(self, name: str, record: ScenarioRecord) -> ScenarioRecord:
        stamped = _stamp(record)
        payload = record_to_payload(stamped)
        with self._sessions.begin() as session:
            row = session.get(SavedScenarioRecord, name)
            if row is None:
                session.add(SavedScenarioRecord(name=name, saved_at=stamped.saved_at, payload=payload))
            else:
                row.saved_at = stamped.saved_at
                row.payload = payload
        logger.debug("Saved scenario %r (%d events)", name, len(stamped.events))
        return stamped

    def load(self, name: str) -> ScenarioRecord:
        with self._sessions() as session:
            row = session.get(SavedScenarioRecord, name)
            if row is None:
                raise KeyError(name)
            return record_from_payload(row.payload, saved_at=row.saved_at)

    def list(self) -> list[str]:
        with self._sessions() as session:
            return list(session.scalars(
                select(SavedScenarioRecord.name).order_by(SavedScenarioRecord.name)
            ))

    def delete(self, name: str) -> None:
        with self._sessions.begin() as session:
            row = session.get(SavedScenarioRecord, name)
            if row is None:
                raise KeyError(name)
            session.delete(row)
        logger.debug("Deleted scenario %r", name)
