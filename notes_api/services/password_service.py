"""
Hash y verificación de contraseñas (Argon2id).

Ambas operaciones son CPU-bound: se ejecutan en el thread pool para no
bloquear el event loop.
"""
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from argon2.low_level import Type
from starlette.concurrency import run_in_threadpool

ph = PasswordHasher(time_cost=2, memory_cost=51200, parallelism=2, hash_len=32, salt_len=16, type=Type.ID)


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    # Cuentas sólo-Google no tienen password: nunca autentican por esta vía
    if not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(password: str, password_hash: str | None) -> bool:
    return await run_in_threadpool(verify_password, password, password_hash)
