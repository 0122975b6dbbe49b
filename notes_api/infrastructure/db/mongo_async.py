"""Cliente MongoDB asíncrono (Motor).

El cliente se construye una sola vez al arrancar y vive dentro del
`AppContext`; los repositorios reciben la base de datos como argumento.
"""
from __future__ import annotations

import logging

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from notes_api.core.config import Settings

_log = logging.getLogger("notes.mongo")


def build_async_client(settings: Settings) -> AsyncIOMotorClient:
    uri = settings.mongo_uri
    kwargs = dict(serverSelectionTimeoutMS=15000)
    # Atlas (srv) siempre va por TLS; para URIs simples sólo si se pide
    if uri.startswith("mongodb+srv://") or settings.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if settings.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
    return AsyncIOMotorClient(uri, **kwargs)


def get_async_db(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    db = client[settings.mongo_db]
    _log.info("Motor listo (db=%s)", settings.mongo_db)
    return db
