"""Resource Routes — create/list/update/delete, built once and mounted per kind.

Invariants:
    - POST /<kind>/create, GET /<kind>/list, POST /<kind>/update/{id},
      DELETE /<kind>/delete/{id}
    - Mutations answer 200 with an empty body
    - The path identifier is decoded before the body
    - No route catches errors; they propagate to api/error_handlers.py

Design Decisions:
    - Router factory over one module per kind: the CRUD protocol exists once
    - StoreConnection reached through request.app.state via Depends: injected,
      so tests hand in a temporary store
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from tracker.core.identifiers import RecordRef
from tracker.infrastructure.store import RecordStore, StoreConnection
from tracker.resources import ResourceKind
from tracker.schemas.drinks import ErrorResponse, build_envelope_models

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_connection(request: Request) -> StoreConnection:
    """FastAPI dependency for the shared store handle."""
    return request.app.state.store


def build_resource_router(kind: ResourceKind) -> APIRouter:
    """Build the four CRUD routes for one resource kind."""
    router = APIRouter(
        prefix=f"/{kind.name}", tags=[kind.plural], responses=ERROR_RESPONSES,
    )
    record_type = kind.record_type
    item_model, list_model = build_envelope_models(kind.name, record_type)

    def get_store(
        connection: StoreConnection = Depends(get_connection),
    ) -> RecordStore:
        return RecordStore(connection, kind)

    def get_ref(record_id: str, store: RecordStore = Depends(get_store)) -> RecordRef:
        return store.parse_ref(record_id)

    @router.post(
        "/create", status_code=status.HTTP_200_OK, name=f"create_{kind.name}",
    )
    async def create_record(
        record: record_type, store: RecordStore = Depends(get_store),
    ) -> Response:
        await store.ensure_schema()
        await store.create(record)
        return Response(status_code=status.HTTP_200_OK)

    @router.get("/list", response_model=list_model, name=f"list_{kind.plural}")
    async def list_records(store: RecordStore = Depends(get_store)):
        entries = await store.list_all()
        return list_model(**{
            kind.plural: [
                item_model(id=str(ref), **{kind.name: record})
                for ref, record in entries
            ],
        })

    @router.post(
        "/update/{record_id}", status_code=status.HTTP_200_OK,
        name=f"update_{kind.name}",
    )
    async def update_record(
        record: record_type,
        ref: RecordRef = Depends(get_ref),
        store: RecordStore = Depends(get_store),
    ) -> Response:
        await store.update(ref, record)
        return Response(status_code=status.HTTP_200_OK)

    @router.delete(
        "/delete/{record_id}", status_code=status.HTTP_200_OK,
        name=f"delete_{kind.name}",
    )
    async def delete_record(
        ref: RecordRef = Depends(get_ref),
        store: RecordStore = Depends(get_store),
    ) -> Response:
        await store.delete(ref)
        return Response(status_code=status.HTTP_200_OK)

    return router
