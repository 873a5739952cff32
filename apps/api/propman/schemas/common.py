"""Schemas shared by every project record."""
from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class HistoryLog(BaseModel):
    """Append-only audit entry attached to a record."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    description: str
    timestamp: datetime


class SourcedHistoryLog(HistoryLog):
    """History entry labelled with the record it belongs to."""

    source: str
    source_id: str


class CustomFieldType(str, enum.Enum):
    TEXT = "text"
    BOOLEAN = "boolean"


class CustomField(BaseModel):
    id: str
    label: NonEmptyStr
    type: CustomFieldType = CustomFieldType.TEXT
    value: bool | str = ""

    @model_validator(mode="after")
    def _value_matches_type(self) -> "CustomField":
        check_custom_value(self.type, self.value)
        return self


def check_custom_value(field_type: CustomFieldType, value: object) -> None:
    """Raise ValueError when ``value`` does not suit ``field_type``."""

    if field_type is CustomFieldType.BOOLEAN and not isinstance(value, bool):
        raise ValueError("Boolean custom fields require a true/false value")
    if field_type is CustomFieldType.TEXT and not isinstance(value, str):
        raise ValueError("Text custom fields require a string value")


def require_other(choice: enum.Enum, other: str | None, label: str) -> None:
    """Require the free-text companion when an enum resolves to OTHER."""

    if choice.value == "other" and not (other or "").strip():
        raise ValueError(f"Specifying the {label} is required when 'other' is selected")


class RecordOut(BaseModel):
    """Identity and audit columns present on every stored record."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    project_id: str
    history: list[HistoryLog] = Field(default_factory=list)
