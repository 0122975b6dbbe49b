"""
Canal de correo saliente para los códigos de verificación (OTP).

El núcleo sólo depende de `MailChannel.send(recipient, code)`:
- `SmtpMailChannel`: envío real por SMTP (smtplib en el thread pool).
- `LogMailChannel`: sólo desarrollo; escribe el código en el log del servidor.
"""
import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from starlette.concurrency import run_in_threadpool

from notes_api.core.config import Settings

_log = logging.getLogger("notes.mail")


class MailChannel(Protocol):
    async def send(self, recipient: str, code: str) -> None:
        ...


def _verification_bodies(code: str, expires_in_minutes: int) -> tuple[str, str]:
    html = f"""
    <h1>Verify Your Email</h1>
    <p>Your OTP code is: <strong>{code}</strong></p>
    <p>This code will expire in {expires_in_minutes} minutes.</p>
    """
    text = f"Your OTP code is: {code}. This code will expire in {expires_in_minutes} minutes."
    return html, text


class SmtpMailChannel:
    """Envía el código por SMTP usando la configuración SMTP_* del .env."""

    subject = "Verify Your Email - Personal Notes App"

    def __init__(self, settings: Settings) -> None:
        if not settings.smtp_configured:
            raise RuntimeError("SMTP no configurado. Define SMTP_HOST/SMTP_USER/SMTP_PASS en .env")
        self.settings = settings

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str | None = None) -> None:
        s = self.settings
        msg = EmailMessage()
        msg["From"] = f"{s.smtp_from_name} <{s.smtp_from_email or s.smtp_user}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        if text_body:
            msg.set_content(text_body)
        msg.add_alternative(html_body, subtype="html")

        # Conexión TLS por defecto (587)
        if s.smtp_use_tls:
            with smtplib.SMTP(s.smtp_host, s.smtp_port) as server:
                server.starttls()
                server.login(s.smtp_user, s.smtp_pass)
                server.send_message(msg)
        else:
            with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port) as server:
                server.login(s.smtp_user, s.smtp_pass)
                server.send_message(msg)

    async def send(self, recipient: str, code: str) -> None:
        html, text = _verification_bodies(code, self.settings.otp_expire_minutes)
        await run_in_threadpool(self._send_email, recipient, self.subject, html, text)
        _log.info("Código de verificación enviado a %s", recipient)


class LogMailChannel:
    """Canal de desarrollo: no envía nada, deja el código en el log."""

    async def send(self, recipient: str, code: str) -> None:
        _log.warning("SMTP no configurado; OTP for %s: %s", recipient, code)


def build_mail_channel(settings: Settings) -> MailChannel:
    if settings.smtp_configured:
        return SmtpMailChannel(settings)
    if settings.is_production:
        raise RuntimeError("SMTP requerido en producción (el canal de log expone los códigos)")
    return LogMailChannel()
