"""CRUD endpoints for every project-scoped record type."""
# Route signatures reference per-kind schema classes, so annotations here
# must be evaluated when each route is defined.

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from ..schemas.common import CustomField, SourcedHistoryLog
from ..schemas.custom_fields import CustomFieldCreate, CustomFieldEdit
from ..services import attachments as attachments_service
from ..services import custom_fields as custom_fields_service
from ..services import records as records_service
from ..services.permissions import Action
from ..services.records import RecordKind
from ..services.store import ProjectStore
from .deps import get_actor_id, require


def build_router(kind: RecordKind) -> APIRouter:
    """Return the list/get/create/update/delete routes for ``kind``."""

    router = APIRouter(prefix=f"/{kind.path}", tags=[kind.path])
    fields_schema = kind.fields_schema
    out_schema = kind.out_schema

    @router.get("", response_model=list[out_schema], name=f"{kind.path}:list")
    async def list_records(
        property_id: str | None = None,
        store: ProjectStore = Depends(require(Action.VIEW)),
    ):
        records = await records_service.list_records(store, kind, property_id=property_id)
        return [out_schema.model_validate(record) for record in records]

    @router.post("", response_model=out_schema, status_code=status.HTTP_201_CREATED, name=f"{kind.path}:create")
    async def create_record(
        payload: fields_schema,  # type: ignore[valid-type]
        store: ProjectStore = Depends(require(Action.CREATE)),
        actor_id: str = Depends(get_actor_id),
    ):
        record = await records_service.create_record(store, kind, payload, actor_id)
        return out_schema.model_validate(record)

    @router.get("/{record_id}", response_model=out_schema, name=f"{kind.path}:get")
    async def get_record(record_id: str, store: ProjectStore = Depends(require(Action.VIEW))):
        return out_schema.model_validate(await records_service.get_record(store, kind, record_id))

    @router.put("/{record_id}", response_model=out_schema, name=f"{kind.path}:update")
    async def update_record(
        record_id: str,
        payload: fields_schema,  # type: ignore[valid-type]
        store: ProjectStore = Depends(require(Action.UPDATE)),
        actor_id: str = Depends(get_actor_id),
    ):
        record = await records_service.update_record(store, kind, record_id, payload, actor_id)
        return out_schema.model_validate(record)

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, name=f"{kind.path}:delete")
    async def delete_record(
        record_id: str,
        store: ProjectStore = Depends(require(Action.DELETE)),
        actor_id: str = Depends(get_actor_id),
    ):
        await records_service.delete_record(store, kind, record_id, actor_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if kind.has_custom_fields:
        _add_custom_field_routes(router, kind)

    return router


def _add_custom_field_routes(router: APIRouter, kind: RecordKind) -> None:
    @router.post(
        "/{record_id}/custom-fields",
        response_model=CustomField,
        status_code=status.HTTP_201_CREATED,
        name=f"{kind.path}:add_custom_field",
    )
    async def add_custom_field(
        record_id: str,
        payload: CustomFieldCreate,
        store: ProjectStore = Depends(require(Action.UPDATE)),
        actor_id: str = Depends(get_actor_id),
    ):
        return await custom_fields_service.add_custom_field(store, kind, record_id, payload, actor_id)

    @router.patch(
        "/{record_id}/custom-fields/{field_id}",
        response_model=CustomField,
        name=f"{kind.path}:edit_custom_field",
    )
    async def edit_custom_field(
        record_id: str,
        field_id: str,
        payload: CustomFieldEdit,
        store: ProjectStore = Depends(require(Action.UPDATE)),
        actor_id: str = Depends(get_actor_id),
    ):
        return await custom_fields_service.edit_custom_field(store, kind, record_id, field_id, payload, actor_id)

    @router.delete(
        "/{record_id}/custom-fields/{field_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"{kind.path}:remove_custom_field",
    )
    async def remove_custom_field(
        record_id: str,
        field_id: str,
        store: ProjectStore = Depends(require(Action.UPDATE)),
        actor_id: str = Depends(get_actor_id),
    ):
        await custom_fields_service.remove_custom_field(store, kind, record_id, field_id, actor_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


kind_routers: dict[str, APIRouter] = {name: build_router(kind) for name, kind in records_service.KINDS.items()}
property_router = kind_routers[records_service.PROPERTIES.name]
deadline_router = kind_routers[records_service.DEADLINES.name]
expense_router = kind_routers[records_service.EXPENSES.name]
document_router = kind_routers[records_service.DOCUMENTS.name]


@property_router.get("/{record_id}/history", response_model=list[SourcedHistoryLog])
async def property_history(record_id: str, store: ProjectStore = Depends(require(Action.VIEW_HISTORY))):
    """Return the merged, newest-first history of a property and its related records."""

    return await records_service.property_history(store, record_id)


@deadline_router.post("/{record_id}/toggle", response_model=records_service.DEADLINES.out_schema)
async def toggle_deadline(
    record_id: str,
    store: ProjectStore = Depends(require(Action.UPDATE)),
    actor_id: str = Depends(get_actor_id),
):
    deadline = await records_service.toggle_deadline(store, record_id, actor_id)
    return records_service.DEADLINES.out_schema.model_validate(deadline)


@expense_router.post("/{record_id}/invoice", response_model=records_service.EXPENSES.out_schema)
async def upload_invoice(
    record_id: str,
    upload: UploadFile = File(...),
    store: ProjectStore = Depends(require(Action.UPDATE)),
    actor_id: str = Depends(get_actor_id),
):
    expense = await attachments_service.attach_invoice(store, record_id, upload, actor_id)
    return records_service.EXPENSES.out_schema.model_validate(expense)


@document_router.post("/{record_id}/file", response_model=records_service.DOCUMENTS.out_schema)
async def upload_document_file(
    record_id: str,
    upload: UploadFile = File(...),
    store: ProjectStore = Depends(require(Action.UPDATE)),
    actor_id: str = Depends(get_actor_id),
):
    document = await attachments_service.attach_document_file(store, record_id, upload, actor_id)
    return records_service.DOCUMENTS.out_schema.model_validate(document)


router = APIRouter(prefix="/api/projects/{project_id}")
for kind_router in kind_routers.values():
    router.include_router(kind_router)
