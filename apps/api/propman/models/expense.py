"""Expense model."""
from __future__ import annotations

import enum
import datetime as dt
from typing import Any

from sqlalchemy import JSON, Date, Enum, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class ExpenseCategory(str, enum.Enum):
    CONDOMINIUM = "condominium"
    UTILITIES = "utilities"
    TAXES = "taxes"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class UtilityType(str, enum.Enum):
    ELECTRICITY = "electricity"
    GAS = "gas"
    WATER = "water"
    INTERNET = "internet"
    OTHER = "other"


class TaxType(str, enum.Enum):
    IMU = "imu"
    TARI = "tari"
    IRPEF = "irpef"
    OTHER = "other"


class Expense(ProjectRecord):
    """Cost booked against a property.

    ``category`` is kept as a column for filtering; ``category_details`` holds
    the category-specific payload including its ``kind`` tag.
    """

    __tablename__ = "expenses"

    property_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[ExpenseCategory] = mapped_column(
        Enum(ExpenseCategory, name="expense_category"), nullable=False
    )
    category_details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    provider_url: Mapped[str | None] = mapped_column(String)
    invoice_url: Mapped[str | None] = mapped_column(String)
    invoice_data: Mapped[str | None] = mapped_column(Text)
    invoice_name: Mapped[str | None] = mapped_column(String)
