"""
Middlewares de aplicación: request id, logging por petición y CORS.
"""
import logging
import re
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from notes_api.core.config import Settings


REQUEST_ID_HEADER = "X-Request-Id"
# Ids entrantes aceptados tal cual; cualquier otro valor se reemplaza
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _incoming_request_id(request: Request) -> Optional[str]:
    rid = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    return rid if _VALID_REQUEST_ID.match(rid) else None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Propaga el id del cliente si es razonable; si no, genera uno nuevo.

    El id queda en `request.state.request_id` para los handlers de error
    y el log de acceso, y vuelve en la cabecera de respuesta.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = _incoming_request_id(request) or uuid.uuid4().hex
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("notes.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 0
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            rid = getattr(request.state, "request_id", None)
            self.log.info(
                "method=%s path=%s status=%s latency_ms=%s request_id=%s",
                request.method, request.url.path, status, dt_ms, rid,
            )


def add_middlewares(app: FastAPI, settings: Settings) -> None:
    # El front-end envía la cookie de sesión: se requieren credenciales
    # y orígenes explícitos (no comodín).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggingMiddleware)
