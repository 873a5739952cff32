"""Turn uploaded files into embedded data URLs stored on records."""
from __future__ import annotations

import base64
import logging
import mimetypes

from fastapi import HTTPException, UploadFile, status

from ..core.config import settings
from ..models.document import Document
from ..models.expense import Expense
from . import records as records_service
from .store import ProjectStore

logger = logging.getLogger(__name__)


async def to_data_url(upload: UploadFile, *, max_bytes: int | None = None) -> tuple[str, str]:
    """Read ``upload`` and return ``(data_url, file_name)``.

    A read failure rejects the save that was waiting on it.
    """

    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes
    file_name = upload.filename or "upload"
    try:
        content = await upload.read()
    except OSError as exc:
        logger.exception("Failed reading upload %s: %s", file_name, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to read uploaded file") from exc

    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file was empty")
    if len(content) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploaded file exceeds {limit} bytes",
        )

    mime = upload.content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{payload}", file_name


async def attach_invoice(store: ProjectStore, expense_id: str, upload: UploadFile, user_id: str) -> Expense:
    expense = await records_service.get_record(store, records_service.EXPENSES, expense_id)
    data_url, file_name = await to_data_url(upload)
    await records_service.record_change(
        store,
        records_service.EXPENSES,
        expense,
        user_id,
        f'Invoice "{file_name}" attached.',
        invoice_data=data_url,
        invoice_name=file_name,
        invoice_url=None,
    )
    await store.save()
    return expense


async def attach_document_file(store: ProjectStore, document_id: str, upload: UploadFile, user_id: str) -> Document:
    document = await records_service.get_record(store, records_service.DOCUMENTS, document_id)
    data_url, file_name = await to_data_url(upload)
    await records_service.record_change(
        store,
        records_service.DOCUMENTS,
        document,
        user_id,
        f'File "{file_name}" uploaded.',
        file_data=data_url,
        file_name=file_name,
        file_url=None,
    )
    await store.save()
    return document
