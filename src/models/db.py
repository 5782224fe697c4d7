"""SQLAlchemy ORM models for the scenario store."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SavedScenarioRecord(Base):
    __tablename__ = "scenarios"

    name: Mapped[str] = mapped_column(String(200), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    saved_at: Mapped[datetime] = mapped_column(DateTime)

    # {"params": {...}, "events": [...]} with Decimals as strings
    payload: Mapped[dict] = mapped_column(JSON)
