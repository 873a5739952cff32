"""Document model."""
from __future__ import annotations

import enum
from datetime import date
from typing import Any

from sqlalchemy import JSON, Date, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProjectRecord


class DocumentType(str, enum.Enum):
    CONTRACT = "contract"
    FLOOR_PLAN = "floor_plan"
    CERTIFICATION = "certification"
    INSURANCE = "insurance"
    OTHER = "other"


class Document(ProjectRecord):
    """File or link attached to a property."""

    __tablename__ = "documents"

    property_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[DocumentType] = mapped_column(Enum(DocumentType, name="document_type"), nullable=False)
    type_other: Mapped[str | None] = mapped_column(String)
    upload_date: Mapped[date] = mapped_column(Date, nullable=False)
    file_url: Mapped[str | None] = mapped_column(String)
    file_data: Mapped[str | None] = mapped_column(Text)
    file_name: Mapped[str | None] = mapped_column(String)
    expiry_date: Mapped[date | None] = mapped_column(Date)
    custom_fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
