from datetime import datetime, timedelta

import pytest

from notes_api.core import time as clock


def test_register_creates_unverified_user_and_sends_otp(register, mail, find_user):
    r = register()
    assert r.status_code == 200
    body = r.json()
    assert body["userId"]
    assert "token" not in r.cookies

    u = find_user(email="ana@notes.io")
    assert str(u["_id"]) == body["userId"]
    assert u["is_verified"] is False
    assert u["password"] != "secret123"
    assert u["otp"] == mail.last_code("ana@notes.io")
    assert u["otp_expires"] is not None


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "ana@notes.io", "password": "secret123"},
        {"name": "Ana", "password": "secret123"},
        {"name": "Ana", "email": "ana@notes.io"},
        {"name": "", "email": "ana@notes.io", "password": "secret123"},
    ],
)
def test_register_requires_all_fields(client, payload):
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 400
    assert r.json()["message"] == "All fields are required"


@pytest.mark.parametrize(
    "path, message",
    [
        ("/api/auth/register", "All fields are required"),
        ("/api/auth/verify-otp", "Email and OTP are required"),
        ("/api/auth/login", "Email and password are required"),
        ("/api/auth/resend-otp", "Email is required"),
    ],
)
def test_missing_body_gets_the_endpoint_message(client, path, message):
    r = client.post(path)
    assert r.status_code == 400
    assert r.json()["message"] == message


def test_register_rejects_short_password(register):
    r = register(password="12345")
    assert r.status_code == 400
    assert r.json()["message"] == "Password must be at least 6 characters"


def test_register_rejects_malformed_email(register):
    r = register(email="not-an-email")
    assert r.status_code == 400
    assert r.json()["message"] == "Validation error"


def test_email_domain_is_normalized_consistently(client, register, mail, find_user):
    assert register(email="Ana@Notes.IO").status_code == 200
    u = find_user(email="Ana@notes.io")
    assert u is not None
    assert mail.sent[-1][0] == "Ana@notes.io"

    r = client.post("/api/auth/verify-otp", json={"email": "Ana@NOTES.io", "otp": mail.last_code("Ana@notes.io")})
    assert r.status_code == 200
    client.cookies.clear()

    r = client.post("/api/auth/login", json={"email": "Ana@Notes.IO", "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "Ana@notes.io"
    # La parte local conserva mayúsculas: es otra dirección
    r = client.post("/api/auth/login", json={"email": "ana@notes.io", "password": "secret123"})
    assert r.json()["message"] == "Invalid credentials"


def test_register_duplicate_email(register, count_users):
    assert register().status_code == 200
    r = register(name="Otra")
    assert r.status_code == 400
    assert r.json()["message"] == "User already exists"
    assert count_users(email="ana@notes.io") == 1


def test_login_before_verification_asks_to_verify(client, register):
    register()
    r = client.post("/api/auth/login", json={"email": "ana@notes.io", "password": "secret123"})
    assert r.status_code == 400
    assert r.json()["message"] == "Please verify your email first"
    assert "token" not in r.cookies


def test_verify_otp_opens_session_and_clears_code(client, register, mail, find_user):
    user_id = register().json()["userId"]
    code = mail.last_code("ana@notes.io")

    r = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": code})
    assert r.status_code == 200
    assert r.json()["user"] == {"id": user_id, "name": "Ana", "email": "ana@notes.io"}
    assert r.cookies.get("token")
    set_cookie = r.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "max-age=604800" in set_cookie

    u = find_user(email="ana@notes.io")
    assert u["is_verified"] is True
    assert "otp" not in u
    assert "otp_expires" not in u

    again = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": code})
    assert again.status_code == 400
    assert again.json()["message"] == "Invalid or expired OTP"


def test_verify_otp_wrong_code(client, register):
    register()
    r = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": "000000"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid or expired OTP"


def test_verify_otp_requires_fields(client):
    r = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io"})
    assert r.status_code == 400
    assert r.json()["message"] == "Email and OTP are required"


def test_otp_valid_only_before_expiry(client, register, mail, monkeypatch):
    t0 = datetime(2031, 3, 1, 12, 0, 0)
    monkeypatch.setattr(clock, "utcnow", lambda: t0)
    register()
    code = mail.last_code("ana@notes.io")
    expires = t0 + timedelta(minutes=10)

    def verify_at(when):
        monkeypatch.setattr(clock, "utcnow", lambda: when)
        return client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": code})

    expired = verify_at(expires + timedelta(seconds=1))
    assert expired.status_code == 400
    assert expired.json()["message"] == "Invalid or expired OTP"
    # La expiración es estricta: en el instante exacto ya no vale
    assert verify_at(expires).status_code == 400
    assert verify_at(expires - timedelta(seconds=1)).status_code == 200


def test_login_success(client, make_user):
    make_user()
    r = client.post("/api/auth/login", json={"email": "ana@notes.io", "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["message"] == "Login successful"
    assert r.json()["user"]["email"] == "ana@notes.io"
    assert r.cookies.get("token")


def test_login_failures_are_indistinguishable(client, make_user):
    make_user()
    headers = {"X-Request-Id": "fixed-request-id"}
    wrong_password = client.post(
        "/api/auth/login", json={"email": "ana@notes.io", "password": "wrong-password"}, headers=headers
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nadie@notes.io", "password": "secret123"}, headers=headers
    )
    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.content == unknown_email.content
    assert wrong_password.json()["message"] == "Invalid credentials"


def test_login_requires_fields(client):
    r = client.post("/api/auth/login", json={"email": "ana@notes.io"})
    assert r.status_code == 400
    assert r.json()["message"] == "Email and password are required"


def test_resend_otp_replaces_code(client, register, mail):
    register()
    old = mail.last_code("ana@notes.io")
    r = client.post("/api/auth/resend-otp", json={"email": "ana@notes.io"})
    assert r.status_code == 200
    assert r.json()["message"] == "OTP resent successfully"
    assert len(mail.sent) == 2

    new = mail.last_code("ana@notes.io")
    if new != old:
        stale = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": old})
        assert stale.status_code == 400
    ok = client.post("/api/auth/verify-otp", json={"email": "ana@notes.io", "otp": new})
    assert ok.status_code == 200


def test_resend_otp_rejects_verified_and_unknown(client, make_user):
    make_user()
    for email in ("ana@notes.io", "nadie@notes.io"):
        r = client.post("/api/auth/resend-otp", json={"email": email})
        assert r.status_code == 400
        assert r.json()["message"] == "User not found or already verified"


def test_registration_survives_mail_failure(client, mail, find_user):
    async def broken_send(recipient, code):
        raise ConnectionError("smtp down")

    mail.send = broken_send
    r = client.post("/api/auth/register", json={"name": "Ana", "email": "ana@notes.io", "password": "secret123"})
    assert r.status_code == 200
    assert find_user(email="ana@notes.io") is not None
