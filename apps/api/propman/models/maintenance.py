"""Maintenance model."""
from __future__ import annotations

import enum
from datetime import date

from sqlalchemy import Date, Enum, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class MaintenanceStatus(str, enum.Enum):
    REQUESTED = "requested"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Maintenance(ProjectRecord):
    """Maintenance ticket for a property."""

    __tablename__ = "maintenances"

    property_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[MaintenanceStatus] = mapped_column(
        Enum(MaintenanceStatus, name="maintenance_status"), default=MaintenanceStatus.REQUESTED, nullable=False
    )
    request_date: Mapped[date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[date | None] = mapped_column(Date)
    cost: Mapped[float | None] = mapped_column(Float)
