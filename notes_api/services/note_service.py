"""
Service layer for notes: validación de entrada y ownership sobre el repo.

Una nota ajena se reporta igual que una inexistente (404).
"""
from typing import Any, Dict, List

from bson import ObjectId

from notes_api.api.schemas.note import NoteCreate, NoteUpdate
from notes_api.core.exceptions import NotFoundError, ValidationError
from notes_api.repositories import note_repo as repo

NOTE_NOT_FOUND = "Note not found"


def _present(v: str | None) -> bool:
    return bool(v and v.strip())


async def list_notes(db, user_id: ObjectId) -> List[Dict[str, Any]]:
    return await repo.list_notes(db, user_id)


async def create_note(db, user_id: ObjectId, payload: NoteCreate) -> Dict[str, Any]:
    if not _present(payload.title) or not _present(payload.content):
        raise ValidationError("Title and content required")
    return await repo.insert_note(db, user_id, payload.title, payload.content)


async def update_note(db, user_id: ObjectId, note_id: str, payload: NoteUpdate) -> Dict[str, Any]:
    changes = {k: v for k, v in payload.model_dump().items() if _present(v)}
    note = await repo.update_note(db, note_id, user_id, changes)
    if not note:
        raise NotFoundError(NOTE_NOT_FOUND)
    return note


async def delete_note(db, user_id: ObjectId, note_id: str) -> None:
    if not await repo.delete_note(db, note_id, user_id):
        raise NotFoundError(NOTE_NOT_FOUND)
