"""
Emisión de la sesión como cookie HTTP-only.

La sesión no se guarda en servidor: cerrar sesión sólo borra la cookie del
cliente y el token sigue siendo válido hasta su `exp`.
"""
from fastapi import Response

from notes_api.core.config import Settings
from notes_api.services.token_service import create_session_token


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def issue_session(response: Response, user_id: str, settings: Settings) -> str:
    token = create_session_token(user_id=user_id, settings=settings)
    set_session_cookie(response, token, settings)
    return token


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
