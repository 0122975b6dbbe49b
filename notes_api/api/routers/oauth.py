"""
Login con Google (redirect OAuth). Montado en la raíz (`/auth/google`), fuera
del prefijo de la API.
"""
import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import RedirectResponse

from notes_api.core.context import AppContext, get_context
from notes_api.core.exceptions import AppError
from notes_api.infrastructure.http import google_oauth_client as google
from notes_api.services import auth_service as service
from notes_api.services.session_service import issue_session

router = APIRouter(prefix="/auth/google", tags=["OAuth"])

STATE_COOKIE = "oauth_state"
STATE_MAX_AGE = 600

_log = logging.getLogger("notes.oauth")


def _require_google(ctx: AppContext) -> None:
    if not ctx.settings.google_configured:
        raise AppError("Google OAuth is not configured")


def _failure_redirect(ctx: AppContext) -> RedirectResponse:
    front = ctx.settings.frontend_origin.rstrip("/")
    resp = RedirectResponse(f"{front}/login?error=google_auth_failed", status_code=302)
    resp.delete_cookie(STATE_COOKIE, path="/auth/google")
    return resp


@router.get("", summary="Iniciar login con Google", response_class=RedirectResponse)
async def google_login(ctx: AppContext = Depends(get_context)):
    _require_google(ctx)
    state = secrets.token_urlsafe(24)
    resp = RedirectResponse(google.authorization_url(ctx.settings, state))
    resp.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_MAX_AGE,
        path="/auth/google",
        httponly=True,
        samesite="lax",
        secure=ctx.settings.is_production,
    )
    return resp


@router.get("/callback", summary="Callback de Google", response_class=RedirectResponse)
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    oauth_state: Optional[str] = Cookie(default=None),
    ctx: AppContext = Depends(get_context),
):
    _require_google(ctx)
    if error or not code:
        _log.warning("Google devolvió error=%s", error or "missing code")
        return _failure_redirect(ctx)
    if not state or not oauth_state or not secrets.compare_digest(state.encode(), oauth_state.encode()):
        _log.warning("OAuth state no coincide")
        return _failure_redirect(ctx)

    try:
        identity = await google.fetch_identity(code, ctx.settings)
        u = await service.login_with_google(ctx, **identity)
    except (google.GoogleOAuthError, AppError) as e:
        _log.warning("Login con Google falló: %s", e)
        return _failure_redirect(ctx)

    resp = RedirectResponse(ctx.settings.frontend_origin, status_code=302)
    resp.delete_cookie(STATE_COOKIE, path="/auth/google")
    issue_session(resp, str(u["_id"]), ctx.settings)
    return resp
