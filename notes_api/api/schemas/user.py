"""
Esquemas Pydantic para la colección `users`.

Reglas clave:
- Campos en snake_case.
- `password` (hash), `otp` y `otp_expires` nunca se serializan hacia el cliente.
- Timestamps en ISO-8601 UTC.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel

from notes_api.core.time import isoformat


class UserOut(BaseModel):
    """Respuesta pública de usuario (sin secretos)."""
    id: str
    name: str
    email: str
    google_id: Optional[str] = None
    is_verified: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserOut":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            google_id=doc.get("google_id"),
            is_verified=bool(doc.get("is_verified")),
            created_at=isoformat(doc.get("created_at")),
            updated_at=isoformat(doc.get("updated_at")),
        )


class MeOut(BaseModel):
    user: UserOut
