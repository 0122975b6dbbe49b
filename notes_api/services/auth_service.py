"""
Lógica de autenticación: registro, verificación OTP, login, reenvío de OTP y
alta/login vía Google.

Las funciones reciben el `AppContext` (db, settings, canal de correo) y lanzan
errores de `notes_api.core.exceptions`; la emisión de la cookie la hace el
router con el id que devuelven.
"""
import logging
from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from notes_api.api.schemas.auth import LoginPayload, RegisterPayload, ResendOtpPayload, VerifyOtpPayload
from notes_api.core import time as clock
from notes_api.core.context import AppContext
from notes_api.core.exceptions import AuthenticationError, ConflictError, ValidationError
from notes_api.repositories import user_repo as repo
from notes_api.services import otp_service, password_service

_log = logging.getLogger("notes.auth")

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid credentials"


def user_summary(u: Dict[str, Any]) -> Dict[str, str]:
    return {"id": str(u["_id"]), "name": u.get("name", ""), "email": u.get("email", "")}


async def _send_otp(ctx: AppContext, email: str, code: str) -> None:
    try:
        await ctx.mail.send(email, code)
    except Exception:
        # No abortar el registro por fallo de correo: el usuario puede pedir reenvío
        _log.exception("No se pudo enviar el código de verificación a %s", email)


async def register_user(ctx: AppContext, payload: RegisterPayload) -> str:
    """
    Registra un usuario local sin verificar y envía el OTP por correo.
    Devuelve el id del usuario; no emite sesión.
    """
    if not payload.name or not payload.email or not payload.password:
        raise ValidationError("All fields are required")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = str(payload.email)
    if await repo.find_user_by_email(ctx.db, email):
        raise ConflictError("User already exists")

    password_hash = await password_service.hash_password_async(payload.password)
    code, expires_at = otp_service.generate_otp(ctx.settings)
    try:
        user_id = await repo.insert_user(
            ctx.db,
            {
                "name": payload.name.strip(),
                "email": email,
                "password": password_hash,
                "is_verified": False,
                "otp": code,
                "otp_expires": expires_at,
            },
        )
    except DuplicateKeyError:
        # Carrera con otro registro del mismo email (índice único)
        raise ConflictError("User already exists")

    _log.info("Usuario registrado id=%s", user_id)
    await _send_otp(ctx, email, code)
    return user_id


async def verify_otp(ctx: AppContext, payload: VerifyOtpPayload) -> Dict[str, Any]:
    """
    Verificación por código (OTP). Un código incorrecto y uno expirado
    producen el mismo error.
    """
    if not payload.email or not payload.otp:
        raise ValidationError("Email and OTP are required")
    u = await repo.verify_pending_otp(ctx.db, str(payload.email), payload.otp, clock.utcnow())
    if not u:
        raise AuthenticationError("Invalid or expired OTP")
    _log.info("Email verificado id=%s", u["_id"])
    return u


async def login_local(ctx: AppContext, payload: LoginPayload) -> Dict[str, Any]:
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")
    u = await repo.find_user_by_email(ctx.db, str(payload.email))
    if not u:
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not await password_service.verify_password_async(payload.password, u.get("password")):
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not u.get("is_verified"):
        raise AuthenticationError("Please verify your email first")
    return u


async def resend_otp(ctx: AppContext, payload: ResendOtpPayload) -> None:
    if not payload.email:
        raise ValidationError("Email is required")
    email = str(payload.email)
    code, expires_at = otp_service.generate_otp(ctx.settings)
    u = await repo.set_otp_for_unverified(ctx.db, email, code, expires_at)
    if not u:
        raise AuthenticationError("User not found or already verified")
    await _send_otp(ctx, email, code)


async def login_with_google(ctx: AppContext, *, google_id: str, name: str, email: str) -> Dict[str, Any]:
    """
    Busca el usuario por `google_id`; si no existe lo crea ya verificado
    (la identidad la prueba Google). Devuelve el documento del usuario.
    """
    u = await repo.find_user_by_google_id(ctx.db, google_id)
    if u:
        return u
    if not email:
        raise AuthenticationError("Google account has no email")
    try:
        inserted_id = await repo.insert_user(
            ctx.db,
            {
                "google_id": google_id,
                "name": name or email,
                "email": email,
                "is_verified": True,
            },
        )
    except DuplicateKeyError:
        # Carrera con otro callback del mismo google_id, o el email ya
        # pertenece a una cuenta con password
        u = await repo.find_user_by_google_id(ctx.db, google_id)
        if u:
            return u
        raise ConflictError("An account with this email already exists")
    _log.info("Usuario creado vía Google id=%s", inserted_id)
    return {"_id": inserted_id, "google_id": google_id, "name": name or email, "email": email}
