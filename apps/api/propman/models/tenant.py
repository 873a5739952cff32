"""Tenant model."""
from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class Tenant(ProjectRecord):
    """Person renting a property."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    contract_id: Mapped[str | None] = mapped_column(String)
    custom_fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
