"""
Bootstrap de la base Mongo: asegura los índices que sostienen los invariantes.

- `users.email` único (registro duplicado).
- `users.google_id` único y sparse (sólo cuentas de Google lo tienen).
- `notes (user, created_at desc)` para el listado por dueño.

No tumba la app si algo falla; deja warnings en el log.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from notes_api.repositories.note_repo import NOTE_COLL
from notes_api.repositories.user_repo import USER_COLL

_log = logging.getLogger("notes.mongo.bootstrap")

INDEXES: Dict[str, List[Dict[str, Any]]] = {
    USER_COLL: [
        {"keys": [("email", ASCENDING)], "name": "uniq_email", "unique": True},
        {"keys": [("google_id", ASCENDING)], "name": "uniq_google_id", "unique": True, "sparse": True},
    ],
    NOTE_COLL: [
        {"keys": [("user", ASCENDING), ("created_at", DESCENDING)], "name": "user_created_at"},
    ],
}


async def _ensure_indexes(db, name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = db[name]
    for ix in indexes:
        opts = dict(ix)
        keys = opts.pop("keys")
        try:
            await coll.create_index(keys, **opts)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


async def ensure_indexes(db) -> None:
    for name, indexes in INDEXES.items():
        await _ensure_indexes(db, name, indexes)
