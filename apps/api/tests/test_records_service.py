"""Record lifecycle, audit history and cross-record side effects."""
from __future__ import annotations

from datetime import date

import pytest
from fastapi import HTTPException

from propman.schemas.records import (
    ContractFields,
    DeadlineFields,
    DocumentFields,
    ExpenseFields,
    MaintenanceFields,
    PropertyFields,
    TenantFields,
)
from propman.services import records as records_service
from propman.services.records import (
    CONTRACTS,
    DEADLINES,
    DOCUMENTS,
    EXPENSES,
    MAINTENANCES,
    PROPERTIES,
    TENANTS,
)


def _property_payload(**overrides) -> PropertyFields:
    data = {"code": "APT-1", "name": "Harbour flat", "address": "1 Quay St", "surface": 64, "rooms": 3}
    data.update(overrides)
    return PropertyFields(**data)


async def _create_property(store, user_id, **overrides):
    return await records_service.create_record(store, PROPERTIES, _property_payload(**overrides), user_id)


async def _create_tenant(store, user_id):
    payload = TenantFields(name="Ada Rossi", email="ada@example.com", phone="+39 333 000")
    return await records_service.create_record(store, TENANTS, payload, user_id)


def _contract_payload(property_id: str, tenant_id: str) -> ContractFields:
    return ContractFields(
        property_id=property_id,
        tenant_id=tenant_id,
        start_date=date(2026, 1, 1),
        end_date=date(2027, 12, 31),
        rent_amount=950,
    )


@pytest.mark.asyncio
async def test_create_records_single_created_entry(store, seeded):
    prop = await _create_property(store, seeded.editor)

    assert prop.id.startswith("prop-")
    assert prop.project_id == seeded.project
    assert len(prop.history) == 1
    assert prop.history[0]["user_id"] == seeded.editor
    assert prop.history[0]["description"] == "Property created."


@pytest.mark.asyncio
async def test_update_appends_one_entry_and_keeps_prior_entries(store, seeded):
    prop = await _create_property(store, seeded.owner)
    first = dict(prop.history[0])

    updated = await records_service.update_record(
        store, PROPERTIES, prop.id, _property_payload(name="Harbour loft"), seeded.editor
    )

    assert updated.name == "Harbour loft"
    assert len(updated.history) == 2
    assert updated.history[0] == first
    assert updated.history[1]["user_id"] == seeded.editor
    assert updated.history[1]["description"] == "Property details updated. Changes: name."


@pytest.mark.asyncio
async def test_update_unknown_record_is_not_found(store, seeded):
    with pytest.raises(HTTPException) as exc:
        await records_service.update_record(store, PROPERTIES, "prop-missing", _property_payload(), seeded.owner)

    assert exc.value.status_code == 404
    assert exc.value.detail == "Property not found"


@pytest.mark.asyncio
async def test_child_record_requires_known_property(store, seeded):
    payload = ExpenseFields(
        property_id="prop-missing",
        description="Condo fee",
        amount=80,
        category={"kind": "condominium"},
        date=date(2026, 2, 1),
    )

    with pytest.raises(HTTPException) as exc:
        await records_service.create_record(store, EXPENSES, payload, seeded.owner)

    assert exc.value.status_code == 422
    assert "Unknown property 'prop-missing'" in exc.value.detail


@pytest.mark.asyncio
async def test_expense_category_details_are_stored_and_read_back(store, seeded):
    prop = await _create_property(store, seeded.owner)
    payload = ExpenseFields(
        property_id=prop.id,
        description="Lawyer",
        amount=300,
        category={"kind": "other", "category_other": "Legal fees"},
        date=date(2026, 2, 1),
    )

    expense = await records_service.create_record(store, EXPENSES, payload, seeded.owner)
    out = EXPENSES.out_schema.model_validate(expense)

    assert expense.category_details == {"kind": "other", "category_other": "Legal fees"}
    assert out.category.category_other == "Legal fees"


@pytest.mark.asyncio
async def test_list_filters_by_property(store, seeded):
    first = await _create_property(store, seeded.owner, code="A")
    second = await _create_property(store, seeded.owner, code="B")
    for prop in (first, second):
        await records_service.create_record(
            store,
            DEADLINES,
            DeadlineFields(property_id=prop.id, title="Rent", due_date=date(2026, 4, 1), type="rent"),
            seeded.owner,
        )

    scoped = await records_service.list_records(store, DEADLINES, property_id=first.id)

    assert [item.property_id for item in scoped] == [first.id]
    assert len(await records_service.list_records(store, DEADLINES)) == 2


@pytest.mark.asyncio
async def test_property_filter_rejected_for_unscoped_kind(store, seeded):
    with pytest.raises(HTTPException) as exc:
        await records_service.list_records(store, TENANTS, property_id="prop-1")

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_contract_marks_property_rented_and_links_tenant(store, seeded):
    prop = await _create_property(store, seeded.owner)
    tenant = await _create_tenant(store, seeded.owner)

    contract = await records_service.create_record(store, CONTRACTS, _contract_payload(prop.id, tenant.id), seeded.editor)

    assert prop.is_rented is True
    assert prop.history[-1]["description"] == "Rental status changed to rented."
    assert tenant.contract_id == contract.id

    await records_service.delete_record(store, CONTRACTS, contract.id, seeded.editor)

    assert prop.is_rented is False
    assert tenant.contract_id is None
    assert tenant.history[-1]["description"] == "Contract removed."


@pytest.mark.asyncio
async def test_document_expiry_creates_and_follows_deadline(store, seeded):
    prop = await _create_property(store, seeded.owner)
    payload = DocumentFields(
        property_id=prop.id, name="Insurance", type="insurance", expiry_date=date(2026, 12, 31)
    )

    document = await records_service.create_record(store, DOCUMENTS, payload, seeded.owner)
    deadlines = await records_service.list_records(store, DEADLINES, property_id=prop.id)

    assert len(deadlines) == 1
    assert deadlines[0].document_id == document.id
    assert deadlines[0].due_date == date(2026, 12, 31)
    assert deadlines[0].title == "Document expiry: Insurance"

    moved = payload.model_copy(update={"expiry_date": date(2027, 6, 30)})
    await records_service.update_record(store, DOCUMENTS, document.id, moved, seeded.owner)
    deadlines = await records_service.list_records(store, DEADLINES, property_id=prop.id)

    assert deadlines[0].due_date == date(2027, 6, 30)

    await records_service.delete_record(store, DOCUMENTS, document.id, seeded.owner)

    assert await records_service.list_records(store, DEADLINES, property_id=prop.id) == []


@pytest.mark.asyncio
async def test_toggle_deadline_logs_status(store, seeded):
    prop = await _create_property(store, seeded.owner)
    deadline = await records_service.create_record(
        store,
        DEADLINES,
        DeadlineFields(property_id=prop.id, title="Tax", due_date=date(2026, 6, 16), type="tax"),
        seeded.owner,
    )

    await records_service.toggle_deadline(store, deadline.id, seeded.editor)
    assert deadline.is_completed is True
    assert deadline.history[-1]["description"] == 'Status changed to "completed".'

    await records_service.toggle_deadline(store, deadline.id, seeded.editor)
    assert deadline.is_completed is False
    assert deadline.history[-1]["description"] == 'Status changed to "to do".'
    assert len(deadline.history) == 3


@pytest.mark.asyncio
async def test_property_history_merges_related_records(store, seeded):
    prop = await _create_property(store, seeded.owner)
    tenant = await _create_tenant(store, seeded.owner)
    await records_service.create_record(store, CONTRACTS, _contract_payload(prop.id, tenant.id), seeded.owner)
    await records_service.create_record(
        store,
        EXPENSES,
        ExpenseFields(
            property_id=prop.id,
            description="Condo fee",
            amount=80,
            category={"kind": "condominium"},
            date=date(2026, 2, 1),
        ),
        seeded.editor,
    )

    await records_service.create_record(
        store,
        MAINTENANCES,
        MaintenanceFields(property_id=prop.id, description="Leaking tap", request_date=date(2026, 2, 3)),
        seeded.editor,
    )
    await records_service.create_record(
        store,
        DEADLINES,
        DeadlineFields(property_id=prop.id, title="Rent", due_date=date(2026, 3, 1), type="rent"),
        seeded.owner,
    )
    await records_service.create_record(
        store,
        DOCUMENTS,
        DocumentFields(property_id=prop.id, name="Floor plan", type="floor_plan"),
        seeded.owner,
    )

    merged = await records_service.property_history(store, prop.id)

    assert {item.source for item in merged} == {
        "property",
        "expense",
        "maintenance",
        "deadline",
        "document",
        "contract",
        "tenant",
    }
    stamps = [item.timestamp for item in merged]
    assert stamps == sorted(stamps, reverse=True)
    assert sum(1 for item in merged if item.source == "property") == len(prop.history)


@pytest.mark.asyncio
async def test_deleting_a_record_leaves_other_history(store, seeded):
    prop = await _create_property(store, seeded.owner)
    expense = await records_service.create_record(
        store,
        EXPENSES,
        ExpenseFields(
            property_id=prop.id,
            description="Repair",
            amount=40,
            category={"kind": "maintenance"},
            date=date(2026, 2, 1),
        ),
        seeded.owner,
    )
    before = list(prop.history)

    await records_service.delete_record(store, EXPENSES, expense.id, seeded.owner)

    assert prop.history == before
    with pytest.raises(HTTPException):
        await records_service.get_record(store, EXPENSES, expense.id)


@pytest.mark.asyncio
async def test_edits_keep_links_set_by_contract(store, seeded):
    prop = await _create_property(store, seeded.owner)
    tenant = await _create_tenant(store, seeded.owner)
    contract = await records_service.create_record(
        store, CONTRACTS, _contract_payload(prop.id, tenant.id), seeded.owner
    )

    await records_service.update_record(store, PROPERTIES, prop.id, _property_payload(rooms=5), seeded.editor)
    await records_service.update_record(
        store,
        TENANTS,
        tenant.id,
        TenantFields(name="Ada Rossi", email="ada.rossi@example.com", phone="+39 333 000"),
        seeded.editor,
    )

    assert prop.is_rented is True
    assert tenant.contract_id == contract.id
    merged = await records_service.property_history(store, prop.id)
    assert {"contract", "tenant"} <= {item.source for item in merged}


def test_link_fields_are_not_accepted_from_payloads():
    prop = _property_payload(is_rented=True)
    tenant = TenantFields(name="Ada", email="ada@example.com", phone="1", contract_id="contract-x")
    deadline = DeadlineFields(
        property_id="prop-1", title="Renewal", due_date=date(2026, 1, 1), type="rent", document_id="doc-x"
    )

    assert "is_rented" not in prop.model_dump()
    assert "contract_id" not in tenant.model_dump()
    assert "document_id" not in deadline.model_dump()


@pytest.mark.asyncio
async def test_editing_generated_deadline_keeps_document_link(store, seeded):
    prop = await _create_property(store, seeded.owner)
    payload = DocumentFields(property_id=prop.id, name="Insurance", type="insurance", expiry_date=date(2026, 12, 31))
    document = await records_service.create_record(store, DOCUMENTS, payload, seeded.owner)
    [deadline] = await records_service.list_records(store, DEADLINES, property_id=prop.id)

    await records_service.update_record(
        store,
        DEADLINES,
        deadline.id,
        DeadlineFields(property_id=prop.id, title="Renewal", due_date=date(2026, 12, 15), type="document"),
        seeded.editor,
    )
    assert deadline.document_id == document.id

    moved = payload.model_copy(update={"expiry_date": date(2027, 1, 31)})
    await records_service.update_record(store, DOCUMENTS, document.id, moved, seeded.owner)
    deadlines = await records_service.list_records(store, DEADLINES, property_id=prop.id)
    assert [(item.id, item.document_id) for item in deadlines] == [(deadline.id, document.id)]
    assert deadlines[0].due_date == date(2027, 1, 31)

    await records_service.delete_record(store, DOCUMENTS, document.id, seeded.owner)
    assert await records_service.list_records(store, DEADLINES, property_id=prop.id) == []


@pytest.mark.asyncio
async def test_contract_update_moves_tenant_and_property_links(store, seeded):
    first_prop = await _create_property(store, seeded.owner, code="A")
    second_prop = await _create_property(store, seeded.owner, code="B")
    first_tenant = await _create_tenant(store, seeded.owner)
    second_tenant = await records_service.create_record(
        store, TENANTS, TenantFields(name="Bruno Neri", email="bruno@example.com", phone="+39 333 111"), seeded.owner
    )
    contract = await records_service.create_record(
        store, CONTRACTS, _contract_payload(first_prop.id, first_tenant.id), seeded.owner
    )

    await records_service.update_record(
        store, CONTRACTS, contract.id, _contract_payload(second_prop.id, second_tenant.id), seeded.editor
    )

    assert first_prop.is_rented is False
    assert second_prop.is_rented is True
    assert first_tenant.contract_id is None
    assert second_tenant.contract_id == contract.id
    assert contract.history[-1]["description"] == "Contract details updated. Changes: property, tenant."


@pytest.mark.asyncio
async def test_property_stays_rented_while_another_contract_remains(store, seeded):
    prop = await _create_property(store, seeded.owner)
    tenant = await _create_tenant(store, seeded.owner)
    first = await records_service.create_record(store, CONTRACTS, _contract_payload(prop.id, tenant.id), seeded.owner)
    await records_service.create_record(store, CONTRACTS, _contract_payload(prop.id, tenant.id), seeded.owner)

    await records_service.delete_record(store, CONTRACTS, first.id, seeded.owner)

    assert prop.is_rented is True
