"""Uploaded files are embedded as data URLs."""
from __future__ import annotations

import io
from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from propman.schemas.records import ExpenseFields, PropertyFields
from propman.services import attachments
from propman.services import records as records_service


def _upload(content: bytes, filename: str = "bill.pdf", content_type: str = "application/pdf") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.asyncio
async def test_to_data_url_encodes_content():
    data_url, name = await attachments.to_data_url(_upload(b"hello"))

    assert name == "bill.pdf"
    assert data_url == "data:application/pdf;base64,aGVsbG8="


@pytest.mark.asyncio
async def test_read_failure_is_bad_request():
    broken = SimpleNamespace(filename="bill.pdf", content_type=None, read=AsyncMock(side_effect=OSError("disk")))

    with pytest.raises(HTTPException) as exc:
        await attachments.to_data_url(broken)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Unable to read uploaded file"


@pytest.mark.asyncio
async def test_empty_upload_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await attachments.to_data_url(_upload(b""))

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_oversized_upload_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await attachments.to_data_url(_upload(b"x" * 11), max_bytes=10)

    assert exc.value.status_code == 413


@pytest.mark.asyncio
async def test_attach_invoice_logs_history(store, seeded):
    prop = await records_service.create_record(
        store,
        records_service.PROPERTIES,
        PropertyFields(code="S-1", name="Shop", address="3 Main St", type="shop", surface=40),
        seeded.owner,
    )
    expense = await records_service.create_record(
        store,
        records_service.EXPENSES,
        ExpenseFields(
            property_id=prop.id,
            description="Electricity",
            amount=55.5,
            category={"kind": "utilities", "utility_type": "electricity", "provider": "Enel"},
            date=date(2026, 1, 31),
            invoice_url="https://example.com/old.pdf",
        ),
        seeded.owner,
    )

    updated = await attachments.attach_invoice(store, expense.id, _upload(b"%PDF-1.4"), seeded.editor)

    assert updated.invoice_name == "bill.pdf"
    assert updated.invoice_data.startswith("data:application/pdf;base64,")
    assert updated.invoice_url is None
    assert updated.history[-1]["description"] == 'Invoice "bill.pdf" attached.'
    assert updated.history[-1]["user_id"] == seeded.editor
