import asyncio
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from notes_api.core.config import Settings
from notes_api.core.context import AppContext
from notes_api.main import create_app

PASSWORD = "secret123"


class RecordingMailChannel:
    """Canal de correo en memoria: guarda (destinatario, código)."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str]] = []

    async def send(self, recipient: str, code: str) -> None:
        self.sent.append((recipient, code))

    def last_code(self, recipient: str) -> str:
        codes = [c for r, c in self.sent if r == recipient]
        assert codes, f"no OTP sent to {recipient}"
        return codes[-1]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jwt_secret="test-secret",
        google_client_id="google-client-id",
        google_client_secret="google-client-secret",
        frontend_origin="http://localhost:3000",
    )


@pytest.fixture
def mail():
    return RecordingMailChannel()


@pytest.fixture
def db():
    return AsyncMongoMockClient()["notes_test"]


@pytest.fixture
def client(settings, db, mail):
    app = create_app(AppContext(settings=settings, db=db, mail=mail))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    def _register(email="ana@notes.io", name="Ana", password=PASSWORD):
        return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    return _register


@pytest.fixture
def make_user(client, register, mail):
    """Registra y verifica un usuario; devuelve su token de sesión.

    Deja el cookie jar del cliente vacío para que cada test elija cómo
    autenticarse (Bearer o cookie).
    """
    def _make_user(email="ana@notes.io", name="Ana"):
        assert register(email=email, name=name).status_code == 200
        r = client.post("/api/auth/verify-otp", json={"email": email, "otp": mail.last_code(email)})
        assert r.status_code == 200
        token = r.cookies["token"]
        client.cookies.clear()
        return token
    return _make_user


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer


@pytest.fixture
def find_user(db):
    """Lee el documento crudo de `users` (incluye password/otp)."""
    def _find(**filtro):
        return asyncio.run(db["users"].find_one(filtro))
    return _find


@pytest.fixture
def count_users(db):
    def _count(**filtro):
        return asyncio.run(db["users"].count_documents(filtro))
    return _count
