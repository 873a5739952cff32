"""Lifecycle of project-scoped records: CRUD, audit history and side effects.

Every write goes through :func:`create_record`, :func:`update_record`,
:func:`delete_record` or :func:`record_change`, which keep each record's
``history`` append-only and attribute the change to the acting user.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel

from ..models.base import ProjectRecord
from ..models.contract import Contract
from ..models.deadline import Deadline, DeadlineType
from ..models.document import Document
from ..models.expense import Expense
from ..models.maintenance import Maintenance
from ..models.payment import Payment
from ..models.property import Property
from ..models.tenant import Tenant
from ..repositories import records as records_repo
from ..schemas import records as schemas
from ..schemas.common import RecordOut, SourcedHistoryLog
from .history import appended, generate_id, merge_histories, new_entry
from .store import ProjectStore

logger = logging.getLogger(__name__)


def _default_columns(payload: BaseModel) -> dict[str, Any]:
    values = payload.model_dump()
    if "custom_fields" in values:
        values["custom_fields"] = [item.model_dump(mode="json") for item in payload.custom_fields]  # type: ignore[attr-defined]
    return values


def _expense_columns(payload: schemas.ExpenseFields) -> dict[str, Any]:
    values = payload.model_dump(exclude={"category"})
    values["category"] = payload.category_kind
    values["category_details"] = payload.category.model_dump(mode="json")
    return values


@dataclass(frozen=True, slots=True)
class RecordKind:
    """Static description of one record type."""

    name: str
    path: str
    label: str
    model: type[ProjectRecord]
    fields_schema: type[BaseModel]
    out_schema: type[RecordOut]
    id_prefix: str
    describe_update: Callable[[Any], str]
    tracked_fields: dict[str, str] = field(default_factory=dict)
    references: dict[str, str] = field(default_factory=dict)
    to_columns: Callable[[Any], dict[str, Any]] = _default_columns
    has_custom_fields: bool = False
    property_scoped: bool = True

    @property
    def created_message(self) -> str:
        return f"{self.label} created."


PROPERTIES = RecordKind(
    name="property",
    path="properties",
    label="Property",
    model=Property,
    fields_schema=schemas.PropertyFields,
    out_schema=schemas.PropertyOut,
    id_prefix="prop",
    describe_update=lambda record: "Property details updated.",
    tracked_fields={
        "name": "name",
        "address": "address",
        "type": "type",
        "surface": "surface",
        "rooms": "rooms",
        "rent_amount": "rent",
        "custom_fields": "custom fields",
    },
    has_custom_fields=True,
    property_scoped=False,
)

TENANTS = RecordKind(
    name="tenant",
    path="tenants",
    label="Tenant",
    model=Tenant,
    fields_schema=schemas.TenantFields,
    out_schema=schemas.TenantOut,
    id_prefix="tenant",
    describe_update=lambda record: "Tenant details updated.",
    tracked_fields={"name": "name", "email": "email", "phone": "phone", "custom_fields": "custom fields"},
    has_custom_fields=True,
    property_scoped=False,
)

CONTRACTS = RecordKind(
    name="contract",
    path="contracts",
    label="Contract",
    model=Contract,
    fields_schema=schemas.ContractFields,
    out_schema=schemas.ContractOut,
    id_prefix="contract",
    describe_update=lambda record: "Contract details updated.",
    tracked_fields={
        "property_id": "property",
        "tenant_id": "tenant",
        "start_date": "start date",
        "end_date": "end date",
        "rent_amount": "rent",
        "custom_fields": "custom fields",
    },
    references={"property_id": "property", "tenant_id": "tenant"},
    has_custom_fields=True,
)

EXPENSES = RecordKind(
    name="expense",
    path="expenses",
    label="Expense",
    model=Expense,
    fields_schema=schemas.ExpenseFields,
    out_schema=schemas.ExpenseOut,
    id_prefix="exp",
    describe_update=lambda record: f'Expense "{record.description}" updated.',
    tracked_fields={
        "description": "description",
        "amount": "amount",
        "category_details": "category",
        "date": "date",
    },
    references={"property_id": "property"},
    to_columns=_expense_columns,
)

MAINTENANCES = RecordKind(
    name="maintenance",
    path="maintenances",
    label="Maintenance request",
    model=Maintenance,
    fields_schema=schemas.MaintenanceFields,
    out_schema=schemas.MaintenanceOut,
    id_prefix="maint",
    describe_update=lambda record: f'Maintenance status updated to "{record.status.value}".',
    tracked_fields={"description": "description", "cost": "cost", "completion_date": "completion date"},
    references={"property_id": "property"},
)

DEADLINES = RecordKind(
    name="deadline",
    path="deadlines",
    label="Deadline",
    model=Deadline,
    fields_schema=schemas.DeadlineFields,
    out_schema=schemas.DeadlineOut,
    id_prefix="deadline",
    describe_update=lambda record: f'Deadline "{record.title}" updated.',
    tracked_fields={"title": "title", "due_date": "due date", "is_completed": "completion"},
    references={"property_id": "property"},
)

DOCUMENTS = RecordKind(
    name="document",
    path="documents",
    label="Document",
    model=Document,
    fields_schema=schemas.DocumentFields,
    out_schema=schemas.DocumentOut,
    id_prefix="doc",
    describe_update=lambda record: f'Document "{record.name}" updated.',
    tracked_fields={
        "name": "name",
        "type": "type",
        "expiry_date": "expiry date",
        "custom_fields": "custom fields",
    },
    references={"property_id": "property"},
    has_custom_fields=True,
)

PAYMENTS = RecordKind(
    name="payment",
    path="payments",
    label="Payment",
    model=Payment,
    fields_schema=schemas.PaymentFields,
    out_schema=schemas.PaymentOut,
    id_prefix="pay",
    describe_update=lambda record: f"Payment updated. Status: {record.status.value}, amount: {record.amount:.2f}.",
    tracked_fields={"amount": "amount", "payment_date": "payment date", "due_date": "due date"},
    references={"property_id": "property", "contract_id": "contract"},
)

KINDS: dict[str, RecordKind] = {
    kind.name: kind
    for kind in (PROPERTIES, TENANTS, CONTRACTS, EXPENSES, MAINTENANCES, DEADLINES, DOCUMENTS, PAYMENTS)
}

PROPERTY_CHILDREN: tuple[RecordKind, ...] = (EXPENSES, MAINTENANCES, DEADLINES, DOCUMENTS)


async def list_records(
    store: ProjectStore, kind: RecordKind, *, property_id: str | None = None
) -> list[Any]:
    """Return every record of ``kind`` in the project, optionally for one property."""

    if property_id is not None and not kind.property_scoped:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{kind.label} records cannot be filtered by property",
        )
    return await records_repo.list_for_project(
        store.session, kind.model, project_id=store.project_id, property_id=property_id
    )


async def get_record(store: ProjectStore, kind: RecordKind, record_id: str) -> Any:
    record = await records_repo.get_by_id(
        store.session, kind.model, project_id=store.project_id, record_id=record_id
    )
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind.label} not found")
    return record


async def create_record(store: ProjectStore, kind: RecordKind, payload: BaseModel, user_id: str) -> Any:
    """Validate references, store the record with its first history entry and save."""

    values = kind.to_columns(payload)
    await _check_references(store, kind, values)
    record = await _insert(store, kind, values, user_id)

    if kind is CONTRACTS:
        await _set_rented(store, record.property_id, True, user_id)
        await _link_tenant(store, record.tenant_id, record.id, user_id)
    elif kind is DOCUMENTS:
        await _sync_document_deadline(store, record, user_id)

    await store.save()
    logger.info("Created %s %s in project %s", kind.name, record.id, store.project_id)
    return record


async def update_record(
    store: ProjectStore, kind: RecordKind, record_id: str, payload: BaseModel, user_id: str
) -> Any:
    """Replace the stored fields of a record and append one history entry."""

    record = await get_record(store, kind, record_id)
    values = kind.to_columns(payload)
    await _check_references(store, kind, values)
    previous = {column: getattr(record, column) for column in kind.references}

    changes = [label for column, label in kind.tracked_fields.items() if getattr(record, column) != values.get(column)]
    for column, value in values.items():
        setattr(record, column, value)

    description = kind.describe_update(record)
    if changes:
        description = f"{description} Changes: {', '.join(changes)}."
    record.history = appended(record.history, new_entry(user_id, description))
    await store.session.flush()

    if kind is CONTRACTS:
        await _move_contract_links(store, record, previous, user_id)
    elif kind is DOCUMENTS:
        await _sync_document_deadline(store, record, user_id)

    await store.save()
    logger.info("Updated %s %s in project %s", kind.name, record.id, store.project_id)
    return record


async def delete_record(store: ProjectStore, kind: RecordKind, record_id: str, user_id: str) -> None:
    """Remove a record; history held by other records is left untouched."""

    record = await get_record(store, kind, record_id)

    if kind is CONTRACTS:
        await _unlink_tenant(store, record.tenant_id, record.id, user_id)
    elif kind is DOCUMENTS:
        await _remove_document_deadline(store, record)

    await records_repo.remove(store.session, record)
    if kind is CONTRACTS:
        await _release_property(store, record.property_id, user_id)
    await store.save()
    logger.info("Deleted %s %s in project %s by %s", kind.name, record_id, store.project_id, user_id)


async def record_change(
    store: ProjectStore,
    kind: RecordKind,
    record: Any,
    user_id: str,
    description: str,
    **changes: Any,
) -> Any:
    """Apply ``changes`` to ``record`` and log them; the caller saves."""

    for column, value in changes.items():
        setattr(record, column, value)
    record.history = appended(record.history, new_entry(user_id, description))
    await store.session.flush()
    logger.debug("Logged change on %s %s: %s", kind.name, record.id, description)
    return record


async def toggle_deadline(store: ProjectStore, record_id: str, user_id: str) -> Deadline:
    deadline = await get_record(store, DEADLINES, record_id)
    completed = not deadline.is_completed
    state = "completed" if completed else "to do"
    await record_change(store, DEADLINES, deadline, user_id, f'Status changed to "{state}".', is_completed=completed)
    await store.save()
    return deadline


async def property_history(store: ProjectStore, property_id: str) -> list[SourcedHistoryLog]:
    """Merge a property's history with that of every record attached to it."""

    prop = await get_record(store, PROPERTIES, property_id)
    sources: list[tuple[str, str, list[dict[str, Any]]]] = [(PROPERTIES.name, prop.id, prop.history)]

    for kind in PROPERTY_CHILDREN:
        for record in await list_records(store, kind, property_id=prop.id):
            sources.append((kind.name, record.id, record.history))

    if prop.is_rented:
        contract = await records_repo.find_first(
            store.session, Contract, project_id=store.project_id, property_id=prop.id
        )
        if contract is not None:
            sources.append((CONTRACTS.name, contract.id, contract.history))
            tenant = await records_repo.get_by_id(
                store.session, Tenant, project_id=store.project_id, record_id=contract.tenant_id
            )
            if tenant is not None:
                sources.append((TENANTS.name, tenant.id, tenant.history))

    return merge_histories(sources)


async def _insert(store: ProjectStore, kind: RecordKind, values: dict[str, Any], user_id: str) -> Any:
    record = kind.model(
        id=generate_id(kind.id_prefix),
        project_id=store.project_id,
        history=appended([], new_entry(user_id, kind.created_message)),
        **values,
    )
    return await records_repo.add(store.session, record)


async def _check_references(store: ProjectStore, kind: RecordKind, values: dict[str, Any]) -> None:
    for column, target_name in kind.references.items():
        target_id = values.get(column)
        if target_id is None:
            continue
        target = KINDS[target_name]
        found = await records_repo.get_by_id(
            store.session, target.model, project_id=store.project_id, record_id=target_id
        )
        if found is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown {target.label.lower()} '{target_id}' for this project",
            )


async def _set_rented(store: ProjectStore, property_id: str, rented: bool, user_id: str) -> None:
    prop = await records_repo.get_by_id(store.session, Property, project_id=store.project_id, record_id=property_id)
    if prop is None or prop.is_rented == rented:
        return
    state = "rented" if rented else "not rented"
    await record_change(store, PROPERTIES, prop, user_id, f"Rental status changed to {state}.", is_rented=rented)


async def _release_property(store: ProjectStore, property_id: str, user_id: str) -> None:
    """Mark the property not rented once no contract refers to it."""

    remaining = await records_repo.find_first(
        store.session, Contract, project_id=store.project_id, property_id=property_id
    )
    if remaining is None:
        await _set_rented(store, property_id, False, user_id)


async def _move_contract_links(
    store: ProjectStore, contract: Contract, previous: dict[str, Any], user_id: str
) -> None:
    if previous["tenant_id"] != contract.tenant_id:
        await _unlink_tenant(store, previous["tenant_id"], contract.id, user_id)
        await _link_tenant(store, contract.tenant_id, contract.id, user_id)
    if previous["property_id"] != contract.property_id:
        await _release_property(store, previous["property_id"], user_id)
        await _set_rented(store, contract.property_id, True, user_id)


async def _link_tenant(store: ProjectStore, tenant_id: str, contract_id: str, user_id: str) -> None:
    tenant = await records_repo.get_by_id(store.session, Tenant, project_id=store.project_id, record_id=tenant_id)
    if tenant is None or tenant.contract_id == contract_id:
        return
    await record_change(store, TENANTS, tenant, user_id, "Linked to a new contract.", contract_id=contract_id)


async def _unlink_tenant(store: ProjectStore, tenant_id: str, contract_id: str, user_id: str) -> None:
    tenant = await records_repo.get_by_id(store.session, Tenant, project_id=store.project_id, record_id=tenant_id)
    if tenant is None or tenant.contract_id != contract_id:
        return
    await record_change(store, TENANTS, tenant, user_id, "Contract removed.", contract_id=None)


async def _sync_document_deadline(store: ProjectStore, document: Document, user_id: str) -> None:
    """Keep the DOCUMENT deadline generated from ``expiry_date`` in step with the document."""

    deadline = await records_repo.find_first(
        store.session, Deadline, project_id=store.project_id, document_id=document.id
    )
    if document.expiry_date is None:
        if deadline is not None:
            await records_repo.remove(store.session, deadline)
        return

    values: dict[str, Any] = {
        "property_id": document.property_id,
        "title": f"Document expiry: {document.name}",
        "due_date": document.expiry_date,
        "type": DeadlineType.DOCUMENT,
        "type_other": None,
        "document_id": document.id,
    }
    if deadline is None:
        await _insert(store, DEADLINES, {**values, "is_completed": False}, user_id)
        return

    if any(getattr(deadline, column) != value for column, value in values.items()):
        await record_change(
            store, DEADLINES, deadline, user_id, f'Deadline "{values["title"]}" updated.', **values
        )


async def _remove_document_deadline(store: ProjectStore, document: Document) -> None:
    deadline = await records_repo.find_first(
        store.session, Deadline, project_id=store.project_id, document_id=document.id
    )
    if deadline is not None:
        await records_repo.remove(store.session, deadline)
