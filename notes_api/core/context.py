"""
Contexto de aplicación construido explícitamente al arrancar.

Agrupa lo que antes eran globales (configuración, conexión a Mongo y canal de
correo) y se inyecta en routers vía `Depends(get_context)`.
"""
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request

from notes_api.core.config import Settings
from notes_api.infrastructure.db.mongo_async import build_async_client, get_async_db
from notes_api.infrastructure.email.email_client import MailChannel, build_mail_channel


@dataclass
class AppContext:
    settings: Settings
    db: Any  # AsyncIOMotorDatabase (o un doble compatible en tests)
    mail: MailChannel
    client: Optional[Any] = None

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


def build_context(settings: Settings) -> AppContext:
    """Contexto de producción: Motor + canal de correo según configuración."""
    if not settings.jwt_secret:
        raise RuntimeError("Falta JWT_SECRET en configuración")
    # El canal de correo primero: en producción sin SMTP no se abre Mongo
    mail = build_mail_channel(settings)
    client = build_async_client(settings)
    return AppContext(
        settings=settings,
        db=get_async_db(client, settings),
        mail=mail,
        client=client,
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context
