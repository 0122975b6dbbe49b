"""
Endpoints CRUD para `notes`, siempre acotados al usuario de la sesión.
"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from notes_api.api.deps import get_current_user
from notes_api.api.schemas.auth import MessageOut
from notes_api.api.schemas.note import NoteCreate, NoteOut, NoteUpdate
from notes_api.core.context import AppContext, get_context
from notes_api.services import note_service as service

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get("", response_model=List[NoteOut], summary="Listar notas", description="Notas del usuario, más recientes primero.")
async def list_notes(user=Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    items = await service.list_notes(ctx.db, user["_id"])
    return [NoteOut.from_doc(i) for i in items]


@router.post("", response_model=NoteOut, summary="Crear nota")
async def create_note(
    payload: Optional[NoteCreate] = Body(default=None),
    user=Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    note = await service.create_note(ctx.db, user["_id"], payload or NoteCreate())
    return NoteOut.from_doc(note)


@router.put(
    "/{note_id}",
    response_model=NoteOut,
    summary="Actualizar nota",
    description="Actualización parcial: los campos omitidos conservan su valor.",
)
async def update_note(
    note_id: str,
    payload: Optional[NoteUpdate] = Body(default=None),
    user=Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    note = await service.update_note(ctx.db, user["_id"], note_id, payload or NoteUpdate())
    return NoteOut.from_doc(note)


@router.delete("/{note_id}", response_model=MessageOut, summary="Eliminar nota")
async def delete_note(note_id: str, user=Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    await service.delete_note(ctx.db, user["_id"], note_id)
    return MessageOut(message="Note deleted")
