"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from notes_api.api.router import api_router, oauth_router
from notes_api.core.config import Settings, settings as default_settings
from notes_api.core.context import AppContext, build_context
from notes_api.core.exceptions import register_exception_handlers
from notes_api.core.logging import setup_logging
from notes_api.core.middleware import add_middlewares
from notes_api.infrastructure.db.bootstrap import ensure_indexes

_log = logging.getLogger("notes.startup")


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Construye la app. Sin `context`, se arma uno real al arrancar."""
    settings: Settings = context.settings if context else default_settings
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)
    app.state.context = context

    add_middlewares(app, settings)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup():
        if app.state.context is None:
            app.state.context = build_context(settings)
        await ensure_indexes(app.state.context.db)
        _log.info("%s lista (env=%s)", settings.app_name, settings.environment)

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.context is not None:
            app.state.context.close()

    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    app.include_router(oauth_router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "notes_api.main:app",
        host="0.0.0.0",
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
