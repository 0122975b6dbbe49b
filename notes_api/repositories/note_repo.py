"""Repo de la colección `notes`. Todo acceso filtra por dueño (`user`)."""
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from notes_api.core import time as clock
from notes_api.repositories.user_repo import to_object_id

NOTE_COLL = "notes"


def _owned(note_id: str, user_id: ObjectId) -> Optional[Dict[str, Any]]:
    oid = to_object_id(note_id)
    if oid is None:
        return None
    return {"_id": oid, "user": user_id}


async def list_notes(db, user_id: ObjectId) -> List[Dict[str, Any]]:
    """Notas del usuario, más recientes primero."""
    cursor = db[NOTE_COLL].find({"user": user_id}, sort=[("created_at", DESCENDING), ("_id", DESCENDING)])
    return await cursor.to_list(length=None)


async def insert_note(db, user_id: ObjectId, title: str, content: str) -> Dict[str, Any]:
    now = clock.utcnow()
    doc = {"title": title, "content": content, "user": user_id, "created_at": now, "updated_at": now}
    res = await db[NOTE_COLL].insert_one(doc)
    doc["_id"] = res.inserted_id
    return doc


async def update_note(db, note_id: str, user_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Actualización parcial; None si la nota no existe o no es del usuario."""
    filtro = _owned(note_id, user_id)
    if filtro is None:
        return None
    return await db[NOTE_COLL].find_one_and_update(
        filtro,
        {"$set": {**changes, "updated_at": clock.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )


async def delete_note(db, note_id: str, user_id: ObjectId) -> bool:
    filtro = _owned(note_id, user_id)
    if filtro is None:
        return False
    res = await db[NOTE_COLL].delete_one(filtro)
    return res.deleted_count == 1
