"""FastAPI dependency injection."""

from functools import lru_cache

from sqlalchemy import create_engine

from src.config import settings
from src.storage.scenarios import ScenarioRepository, SqlScenarioRepository


@lru_cache
def get_scenario_repository() -> ScenarioRepository:
    engine = create_engine(settings.database_url, echo=settings.debug)
    return SqlScenarioRepository(engine)
