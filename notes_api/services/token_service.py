"""
Creación y verificación de JWTs de sesión.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt as pyjwt

from notes_api.core.config import Settings


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_session_token(*, user_id: str, settings: Settings) -> str:
    """
    Genera un JWT firmado válido por `session_expire_days`.
    Claims: sub(user_id), iat, exp.
    """
    now = _now_utc()
    exp = now + timedelta(days=settings.session_expire_days)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return pyjwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Decodifica y valida firma/expiración. Devuelve payload.
    Lanza `jwt.InvalidTokenError` (o subclase) si no es válido.
    """
    return pyjwt.decode(
        token,
        key=settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
