"""
Dependencias reutilizables para routers (FastAPI Depends).

- Autenticación: extrae y valida el token de sesión (cookie o Bearer) y
  devuelve el usuario actual.
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request

from notes_api.core.context import AppContext, get_context
from notes_api.core.exceptions import NotAuthenticatedError
from notes_api.repositories import user_repo as repo
from notes_api.services.token_service import verify_session_token

NOT_AUTHENTICATED = "Not authenticated"


def _extract_token(request: Request, cookie_name: str) -> Optional[str]:
    token = request.cookies.get(cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization") or ""
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_current_user(request: Request, ctx: AppContext = Depends(get_context)) -> Dict[str, Any]:
    token = _extract_token(request, ctx.settings.session_cookie_name)
    if not token:
        raise NotAuthenticatedError(NOT_AUTHENTICATED)
    try:
        payload = verify_session_token(token, ctx.settings)
    except jwt.InvalidTokenError:
        raise NotAuthenticatedError(NOT_AUTHENTICATED)

    u = await repo.get_public_user_by_id(ctx.db, payload.get("sub"))
    if not u:
        raise NotAuthenticatedError(NOT_AUTHENTICATED)
    request.state.user = u
    return u
