"""Declarative base and shared record columns."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base model with naming conventions."""

    __abstract__ = True

    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[misc]
        return cls.__name__.lower()


class ProjectRecord(Base):
    """Columns shared by every record owned by a project.

    ``history`` holds serialised history entries; it is only ever replaced by a
    longer list, never edited in place.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(String, primary_key=True)
    history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    @declared_attr
    def project_id(cls) -> Mapped[str]:
        return mapped_column(ForeignKey("projects.id"), index=True, nullable=False)
