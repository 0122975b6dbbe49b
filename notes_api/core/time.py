"""
Reloj de la aplicación.

Todas las fechas que se guardan en Mongo son UTC "naive" (sin tzinfo), que es
como pymongo las devuelve por defecto; así las comparaciones entre lo leído y
`utcnow()` nunca mezclan fechas aware y naive.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(dt: datetime | None) -> str | None:
    """ISO-8601 UTC con sufijo Z (o None)."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
