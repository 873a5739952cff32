"""Property model."""
from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import JSON, Boolean, Enum, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class PropertyType(str, enum.Enum):
    APARTMENT = "apartment"
    VILLA = "villa"
    OFFICE = "office"
    SHOP = "shop"
    GARAGE = "garage"
    OTHER = "other"


class Property(ProjectRecord):
    """Managed real-estate unit."""

    __tablename__ = "properties"

    code: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[PropertyType] = mapped_column(Enum(PropertyType, name="property_type"), nullable=False)
    type_other: Mapped[str | None] = mapped_column(String)
    surface: Mapped[float] = mapped_column(Float, nullable=False)
    rooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_rented: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rent_amount: Mapped[float | None] = mapped_column(Float)
    image_url: Mapped[str] = mapped_column(String, default="", nullable=False)
    custom_fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
