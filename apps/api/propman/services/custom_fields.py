"""Lifecycle of user-defined fields owned by a single record."""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from ..schemas.common import CustomField, CustomFieldType, check_custom_value
from ..schemas.custom_fields import CustomFieldCreate, CustomFieldEdit
from .history import generate_id
from .records import RecordKind, get_record, record_change
from .store import ProjectStore

ZERO_VALUES: dict[CustomFieldType, bool | str] = {
    CustomFieldType.TEXT: "",
    CustomFieldType.BOOLEAN: False,
}


def zero_value(field_type: CustomFieldType) -> bool | str:
    return ZERO_VALUES[field_type]


def change_type(field: CustomField, new_type: CustomFieldType) -> CustomField:
    """Switch ``field`` to ``new_type``; the previous value is discarded."""

    if field.type is new_type:
        return field
    return field.model_copy(update={"type": new_type, "value": zero_value(new_type)})


def load_fields(raw: list[dict[str, Any]] | None) -> list[CustomField]:
    return [CustomField.model_validate(item) for item in raw or []]


def dump_fields(fields: list[CustomField]) -> list[dict[str, Any]]:
    return [field.model_dump(mode="json") for field in fields]


def add_field(fields: list[CustomField], payload: CustomFieldCreate) -> tuple[list[CustomField], CustomField]:
    """Append a new field with a generated id."""

    value = payload.value if payload.value is not None else zero_value(payload.type)
    field = CustomField(id=generate_id("cf"), label=payload.label, type=payload.type, value=value)
    return [*fields, field], field


def edit_field(
    fields: list[CustomField], field_id: str, payload: CustomFieldEdit
) -> tuple[list[CustomField], CustomField]:
    """Replace the field with ``field_id``, keeping its id."""

    current = _find(fields, field_id)
    updated = current
    if payload.type is not None:
        updated = change_type(updated, payload.type)
    if payload.label is not None:
        updated = updated.model_copy(update={"label": payload.label})
    if payload.value is not None:
        try:
            check_custom_value(updated.type, payload.value)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        updated = updated.model_copy(update={"value": payload.value})
    return [updated if field.id == field_id else field for field in fields], updated


def remove_field(fields: list[CustomField], field_id: str) -> tuple[list[CustomField], CustomField]:
    removed = _find(fields, field_id)
    return [field for field in fields if field.id != field_id], removed


def _find(fields: list[CustomField], field_id: str) -> CustomField:
    for field in fields:
        if field.id == field_id:
            return field
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Custom field not found")


async def add_custom_field(
    store: ProjectStore, kind: RecordKind, record_id: str, payload: CustomFieldCreate, user_id: str
) -> CustomField:
    record = await _owner(store, kind, record_id)
    fields, field = add_field(load_fields(record.custom_fields), payload)
    await record_change(
        store, kind, record, user_id, f'Custom field "{field.label}" added.', custom_fields=dump_fields(fields)
    )
    await store.save()
    return field


async def edit_custom_field(
    store: ProjectStore, kind: RecordKind, record_id: str, field_id: str, payload: CustomFieldEdit, user_id: str
) -> CustomField:
    record = await _owner(store, kind, record_id)
    fields, field = edit_field(load_fields(record.custom_fields), field_id, payload)
    await record_change(
        store, kind, record, user_id, f'Custom field "{field.label}" updated.', custom_fields=dump_fields(fields)
    )
    await store.save()
    return field


async def remove_custom_field(
    store: ProjectStore, kind: RecordKind, record_id: str, field_id: str, user_id: str
) -> None:
    record = await _owner(store, kind, record_id)
    fields, removed = remove_field(load_fields(record.custom_fields), field_id)
    await record_change(
        store, kind, record, user_id, f'Custom field "{removed.label}" removed.', custom_fields=dump_fields(fields)
    )
    await store.save()


async def _owner(store: ProjectStore, kind: RecordKind, record_id: str) -> Any:
    if not kind.has_custom_fields:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{kind.label} records do not support custom fields",
        )
    return await get_record(store, kind, record_id)
