"""Schemas for custom field operations."""
from __future__ import annotations

from pydantic import BaseModel, model_validator

from .common import CustomFieldType, NonEmptyStr, check_custom_value


class CustomFieldCreate(BaseModel):
    label: NonEmptyStr
    type: CustomFieldType = CustomFieldType.TEXT
    value: bool | str | None = None

    @model_validator(mode="after")
    def _value_matches_type(self) -> "CustomFieldCreate":
        if self.value is not None:
            check_custom_value(self.type, self.value)
        return self


class CustomFieldEdit(BaseModel):
    """Partial edit; a changed ``type`` resets the value unless one is supplied."""

    label: NonEmptyStr | None = None
    type: CustomFieldType | None = None
    value: bool | str | None = None
