from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from src.api.deps import CurrentSession, get_admin_controller
from src.api.schemas import MutationResponse, ReadFlagRequest
from src.components.admin import AdminController

router = APIRouter()


def _dump(items: list[Any]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


@router.get("")
def list_all_collections(
    session: CurrentSession,
    admin: AdminController = Depends(get_admin_controller),
) -> dict[str, list[dict[str, Any]]]:
    """Every collection, for the admin dashboard."""
    return {table: _dump(items) for table, items in admin.list_all(session).items()}


@router.put("/profile", response_model=MutationResponse)
def upsert_profile(
    session: CurrentSession,
    fields: dict[str, Any] = Body(...),
    admin: AdminController = Depends(get_admin_controller),
) -> dict[str, Any]:
    return admin.upsert_profile(session, fields).to_dict()


@router.patch("/contact_messages/{message_id}/read", response_model=MutationResponse)
def mark_message_read(
    message_id: UUID,
    session: CurrentSession,
    body: ReadFlagRequest | None = None,
    admin: AdminController = Depends(get_admin_controller),
) -> dict[str, Any]:
    read = body.read if body is not None else True
    return admin.mark_read(session, message_id, read=read).to_dict()


@router.get("/{table}")
def list_collection(
    table: str,
    session: CurrentSession,
    admin: AdminController = Depends(get_admin_controller),
) -> list[dict[str, Any]]:
    return _dump(admin.list(session, table))


@router.post("/{table}", response_model=MutationResponse, status_code=201)
def create_entity(
    table: str,
    session: CurrentSession,
    fields: dict[str, Any] = Body(...),
    admin: AdminController = Depends(get_admin_controller),
) -> dict[str, Any]:
    return admin.create(session, table, fields).to_dict()


@router.put("/{table}/{entity_id}", response_model=MutationResponse)
def update_entity(
    table: str,
    entity_id: UUID,
    session: CurrentSession,
    fields: dict[str, Any] = Body(...),
    admin: AdminController = Depends(get_admin_controller),
) -> dict[str, Any]:
    return admin.update(session, table, entity_id, fields).to_dict()


@router.delete("/{table}/{entity_id}", response_model=MutationResponse)
def delete_entity(
    table: str,
    entity_id: UUID,
    session: CurrentSession,
    admin: AdminController = Depends(get_admin_controller),
) -> dict[str, Any]:
    """Irreversible once authorized."""
    return admin.delete(session, table, entity_id).to_dict()
