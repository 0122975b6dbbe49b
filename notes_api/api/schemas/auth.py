"""
Esquemas Pydantic para operaciones de autenticación.

- Los campos son opcionales a nivel de esquema: la obligatoriedad la valida el
  servicio para devolver los mensajes de la API ("All fields are required", ...).
- `email` se valida como dirección (EmailStr); un email mal formado es 400.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator


class _Payload(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        # "" cuenta como ausente, igual que un campo que no vino
        if isinstance(v, str) and not v.strip():
            return None
        return v


class RegisterPayload(_Payload):
    name: Optional[str] = None
    # EmailStr normaliza sólo el dominio ("Ana@Notes.IO" -> "Ana@notes.io");
    # login, verify-otp y resend-otp pasan por el mismo tipo y coinciden.
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class VerifyOtpPayload(_Payload):
    email: Optional[EmailStr] = None
    otp: Optional[str] = None

    @field_validator("otp", mode="before")
    @classmethod
    def _normalize_otp(cls, v):
        # Algunos clientes mandan el código como número
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        return v.strip() if isinstance(v, str) else v


class LoginPayload(_Payload):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class ResendOtpPayload(_Payload):
    email: Optional[EmailStr] = None


# === Response models ===

class UserSummary(BaseModel):
    """Proyección mínima que devuelven verify-otp y login."""
    id: str
    name: str
    email: str


class RegisterOut(BaseModel):
    message: str
    userId: str


class SessionOut(BaseModel):
    message: str
    user: UserSummary


class MessageOut(BaseModel):
    message: str
