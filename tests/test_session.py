from datetime import datetime, timedelta, timezone

import jwt
from bson import ObjectId
from fastapi.testclient import TestClient

from notes_api.core.config import Settings
from notes_api.core.context import AppContext
from notes_api.main import create_app


def test_me_requires_session(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "Not authenticated"


def test_me_with_cookie_hides_secrets(client, register, mail):
    user_id = register().json()["userId"]
    client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": mail.last_code("ana@notes.io")})

    r = client.get("/api/auth/me")
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["id"] == user_id
    assert user["email"] == "ana@notes.io"
    assert user["is_verified"] is True
    for secret in ("password", "otp", "otp_expires"):
        assert secret not in user


def test_me_with_bearer_header(client, make_user, auth_headers):
    token = make_user()
    r = client.get("/api/auth/me", headers=auth_headers(token))
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Ana"


def test_session_token_carries_only_user_id(make_user, settings):
    token = make_user()
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert set(claims) == {"sub", "iat", "exp"}
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


def test_rejects_tampered_and_foreign_tokens(client, make_user, auth_headers):
    token = make_user()
    forged = jwt.encode({"sub": jwt.decode(token, options={"verify_signature": False})["sub"],
                         "exp": datetime.now(timezone.utc) + timedelta(days=1)},
                        "other-secret", algorithm="HS256")
    for bad in (token[:-2] + "xx", forged, "garbage"):
        r = client.get("/api/auth/me", headers=auth_headers(bad))
        assert r.status_code == 401


def test_rejects_expired_token(client, make_user, auth_headers, settings):
    sub = jwt.decode(make_user(), options={"verify_signature": False})["sub"]
    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {"sub": sub, "iat": now - timedelta(days=8), "exp": now - timedelta(days=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    r = client.get("/api/auth/me", headers=auth_headers(expired))
    assert r.status_code == 401


def test_rejects_token_for_missing_user(client, auth_headers, settings):
    now = datetime.now(timezone.utc)
    for sub in (str(ObjectId()), "not-an-object-id"):
        token = jwt.encode({"sub": sub, "exp": now + timedelta(days=1)}, settings.jwt_secret, algorithm="HS256")
        r = client.get("/api/auth/me", headers=auth_headers(token))
        assert r.status_code == 401
        assert r.json()["message"] == "Not authenticated"


def test_logout_clears_cookie_but_token_stays_valid(client, register, mail, auth_headers):
    register()
    verified = client.post(
        "/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": mail.last_code("ana@notes.io")}
    )
    token = verified.cookies["token"]
    assert client.get("/api/auth/me").status_code == 200

    r = client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out successfully"
    assert "max-age=0" in r.headers["set-cookie"].lower()
    assert client.get("/api/auth/me").status_code == 401

    # Sin estado en servidor: el token capturado sigue autenticando
    assert client.get("/api/auth/me", headers=auth_headers(token)).status_code == 200


def _cookie_flags(response):
    return [p.strip().lower() for p in response.headers["set-cookie"].split(";")]


def test_session_cookie_is_secure_only_in_production(db, mail):
    prod = Settings(_env_file=None, environment="production", jwt_secret="test-secret")
    app = create_app(AppContext(settings=prod, db=db, mail=mail))
    with TestClient(app) as c:
        c.post("/api/auth/register", json={"name": "Ana", "email": "ana@notes.io", "password": "secret123"})
        r = c.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": mail.last_code("ana@notes.io")})
        assert r.status_code == 200
        flags = _cookie_flags(r)
        assert flags[0].startswith("token=")
        assert {"secure", "httponly", "samesite=lax", "path=/"} <= set(flags)

        # El borrado debe llevar los mismos atributos para que el navegador lo aplique
        out = c.post("/api/auth/logout")
        assert out.status_code == 200
        assert {"secure", "httponly", "samesite=lax", "max-age=0"} <= set(_cookie_flags(out))


def test_session_cookie_is_not_secure_in_development(client, register, mail):
    register()
    r = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": mail.last_code("ana@notes.io")})
    assert "secure" not in _cookie_flags(r)
    assert "secure" not in _cookie_flags(client.post("/api/auth/logout"))
