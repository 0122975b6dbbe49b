"""
Generación de códigos OTP de verificación de email.
"""
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional, Tuple

from notes_api.core import time as clock
from notes_api.core.config import Settings

OTP_LENGTH = 6


def generate_numeric_code(length: int = OTP_LENGTH) -> str:
    # El primer dígito no es 0: el código siempre cae en 100000-999999
    first = secrets.choice("123456789")
    rest = "".join(secrets.choice(string.digits) for _ in range(max(0, length - 1)))
    return first + rest


def generate_otp(settings: Settings, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Devuelve (código, expira_en) con la ventana `otp_expire_minutes`."""
    now = now or clock.utcnow()
    return generate_numeric_code(), now + timedelta(minutes=settings.otp_expire_minutes)
