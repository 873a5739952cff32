"""Contract model."""
from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import JSON, Date, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class Contract(ProjectRecord):
    """Lease linking a property to a tenant."""

    __tablename__ = "contracts"

    property_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    tenant_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    rent_amount: Mapped[float] = mapped_column(Float, nullable=False)
    document_url: Mapped[str] = mapped_column(String, default="", nullable=False)
    custom_fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
