"""Persistencia de usuarios (colección `users`)."""
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from notes_api.core import time as clock

USER_COLL = "users"

# Nunca salen del repositorio hacia la capa HTTP
PRIVATE_FIELDS = {"password": 0, "otp": 0, "otp_expires": 0}


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Convierte a ObjectId; None si el valor no es un id válido."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


async def find_user_by_email(db, email: str) -> Optional[Dict[str, Any]]:
    return await db[USER_COLL].find_one({"email": email})


async def find_user_by_google_id(db, google_id: str) -> Optional[Dict[str, Any]]:
    return await db[USER_COLL].find_one({"google_id": google_id})


async def get_public_user_by_id(db, user_id: str) -> Optional[Dict[str, Any]]:
    """Obtiene usuario por id (str) sin password ni OTP."""
    oid = to_object_id(user_id)
    if oid is None:
        return None
    return await db[USER_COLL].find_one({"_id": oid}, PRIVATE_FIELDS)


async def insert_user(db, doc: Dict[str, Any]) -> str:
    """Inserta usuario con timestamps y devuelve id (str).

    Propaga `DuplicateKeyError` si el email (o google_id) ya existe.
    """
    data = dict(doc)
    now = clock.utcnow()
    data.setdefault("is_verified", False)
    data["created_at"] = now
    data["updated_at"] = now
    res = await db[USER_COLL].insert_one(data)
    return str(res.inserted_id)


async def verify_pending_otp(db, email: str, otp: str, now: datetime) -> Optional[Dict[str, Any]]:
    """Match atómico de (email, otp, otp_expires > now) y marca verificado.

    Una sola operación `find_one_and_update`: un código expirado o ya
    consumido nunca se acepta. Devuelve el documento actualizado o None.
    """
    return await db[USER_COLL].find_one_and_update(
        {"email": email, "otp": otp, "otp_expires": {"$gt": now}},
        {
            "$set": {"is_verified": True, "updated_at": now},
            "$unset": {"otp": "", "otp_expires": ""},
        },
        projection=PRIVATE_FIELDS,
        return_document=ReturnDocument.AFTER,
    )


async def set_otp_for_unverified(db, email: str, otp: str, expires_at: datetime) -> Optional[Dict[str, Any]]:
    """Reemplaza el OTP de un usuario no verificado; None si no hay tal usuario."""
    return await db[USER_COLL].find_one_and_update(
        {"email": email, "is_verified": False},
        {"$set": {"otp": otp, "otp_expires": expires_at, "updated_at": clock.utcnow()}},
        projection=PRIVATE_FIELDS,
        return_document=ReturnDocument.AFTER,
    )
