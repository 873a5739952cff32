"""Deadline model."""
from __future__ import annotations

import enum
from datetime import date

from sqlalchemy import Boolean, Date, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class DeadlineType(str, enum.Enum):
    RENT = "rent"
    TAX = "tax"
    MAINTENANCE = "maintenance"
    CONTRACT = "contract"
    DOCUMENT = "document"
    OTHER = "other"


class Deadline(ProjectRecord):
    """Dated obligation tied to a property."""

    __tablename__ = "deadlines"

    property_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[DeadlineType] = mapped_column(Enum(DeadlineType, name="deadline_type"), nullable=False)
    type_other: Mapped[str | None] = mapped_column(String)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    document_id: Mapped[str | None] = mapped_column(String, index=True)
