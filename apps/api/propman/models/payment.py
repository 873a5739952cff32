"""Rent payment model."""
from __future__ import annotations

import enum
from datetime import date

from sqlalchemy import Date, Enum, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class PaymentStatus(str, enum.Enum):
    PAID = "paid"
    PENDING = "pending"
    LATE = "late"


class Payment(ProjectRecord):
    """Rent instalment due under a contract."""

    __tablename__ = "payments"

    contract_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    property_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_date: Mapped[date | None] = mapped_column(Date)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    reference_month: Mapped[int] = mapped_column(Integer, nullable=False)
    reference_year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status"), default=PaymentStatus.PENDING, nullable=False
    )
