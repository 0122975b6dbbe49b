"""
Esquemas Pydantic para `notes`.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel

from notes_api.core.time import isoformat


class NoteCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class NoteUpdate(BaseModel):
    """Actualización parcial: un campo ausente o vacío conserva su valor."""
    title: Optional[str] = None
    content: Optional[str] = None


class NoteOut(BaseModel):
    id: str
    title: str
    content: str
    user: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "NoteOut":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            content=doc["content"],
            user=str(doc["user"]),
            created_at=isoformat(doc.get("created_at")),
            updated_at=isoformat(doc.get("updated_at")),
        )
