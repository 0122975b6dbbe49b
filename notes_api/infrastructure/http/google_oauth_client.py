"""
Cliente OAuth 2.0 de Google (flujo authorization code).

1. `authorization_url(state)`: URL a la que se redirige al navegador.
2. `exchange_code(code)`: canjea el código en el token endpoint (requests)
   y verifica el `id_token` devuelto con `google.oauth2.id_token`.

Ambas llamadas de red son bloqueantes; `fetch_identity` las corre en el
thread pool.
"""
import logging
from typing import Any, Dict
from urllib.parse import urlencode

import requests
from google.auth.transport import requests as grequests
from google.oauth2 import id_token
from starlette.concurrency import run_in_threadpool

from notes_api.core.config import Settings

AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = "openid email profile"
VALID_ISSUERS = {"https://accounts.google.com", "accounts.google.com"}


class GoogleOAuthError(Exception):
    pass


_log = logging.getLogger("notes.oauth")


def authorization_url(settings: Settings, state: str) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.google_redirect_uri,
        "response_type": "code",
        "scope": SCOPES,
        "state": state,
        "prompt": "select_account",
    }
    return f"{AUTH_URI}?{urlencode(params)}"


def verify_id_token(id_token_str: str, settings: Settings) -> Dict[str, Any]:
    """
    Verifica un Google ID Token y devuelve sus claims si es válido.
    Requiere `settings.google_client_id` configurado (audiencia).
    """
    try:
        req = grequests.Request()
        # Tolerancia ante pequeñas desincronizaciones de reloj
        claims = id_token.verify_oauth2_token(
            id_token_str,
            req,
            settings.google_client_id,
            clock_skew_in_seconds=300,
        )
    except Exception as e:
        _log.warning("Error verificando Google ID Token: %s", e)
        raise GoogleOAuthError("Token de Google inválido") from e
    # `aud` lo valida verify_oauth2_token; aseguramos que sea emitido por cuentas de Google
    if claims.get("iss") not in VALID_ISSUERS:
        raise GoogleOAuthError("Emisor no válido")
    return claims


def exchange_code(code: str, settings: Settings) -> Dict[str, Any]:
    """Canjea el authorization code y devuelve los claims del ID token."""
    try:
        resp = requests.post(
            TOKEN_URI,
            data={
                "code": code,
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "redirect_uri": settings.google_redirect_uri,
                "grant_type": "authorization_code",
            },
            timeout=10,
        )
    except requests.RequestException as e:
        raise GoogleOAuthError(f"Token endpoint no disponible: {e}") from e
    if resp.status_code != 200:
        raise GoogleOAuthError(f"Canje de código rechazado (status={resp.status_code})")
    raw = resp.json().get("id_token")
    if not raw:
        raise GoogleOAuthError("Respuesta de Google sin id_token")
    return verify_id_token(raw, settings)


async def fetch_identity(code: str, settings: Settings) -> Dict[str, str]:
    """Devuelve {google_id, name, email} para el código del callback."""
    claims = await run_in_threadpool(exchange_code, code, settings)
    google_id = claims.get("sub")
    if not google_id:
        raise GoogleOAuthError("Token de Google incompleto")
    return {
        "google_id": str(google_id),
        "name": claims.get("name") or "",
        "email": claims.get("email") or "",
    }
