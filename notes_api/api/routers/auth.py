"""
Rutas de autenticación: registro, verificación OTP, login, reenvío, me y logout.

Una petición sin cuerpo equivale a un cuerpo vacío: llega al servicio y
recibe su mensaje de validación ("All fields are required", ...).
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Response

from notes_api.api.deps import get_current_user
from notes_api.api.schemas.auth import (
    LoginPayload,
    MessageOut,
    RegisterOut,
    RegisterPayload,
    ResendOtpPayload,
    SessionOut,
    VerifyOtpPayload,
)
from notes_api.api.schemas.user import MeOut, UserOut
from notes_api.core.context import AppContext, get_context
from notes_api.services import auth_service as service
from notes_api.services.session_service import clear_session_cookie, issue_session

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterOut,
    summary="Registrar usuario",
    description="Crea el usuario sin verificar y envía un código OTP por correo.",
)
async def register(
    payload: Optional[RegisterPayload] = Body(default=None),
    ctx: AppContext = Depends(get_context),
):
    user_id = await service.register_user(ctx, payload or RegisterPayload())
    return RegisterOut(
        message="User registered successfully. Please verify your email with the OTP sent.",
        userId=user_id,
    )


@router.post(
    "/verify-otp",
    response_model=SessionOut,
    summary="Verificar email con código",
    description="Valida el OTP, marca el email como verificado y abre sesión.",
)
async def verify_otp(
    response: Response,
    payload: Optional[VerifyOtpPayload] = Body(default=None),
    ctx: AppContext = Depends(get_context),
):
    u = await service.verify_otp(ctx, payload or VerifyOtpPayload())
    issue_session(response, str(u["_id"]), ctx.settings)
    return {"message": "Email verified successfully", "user": service.user_summary(u)}


@router.post(
    "/login",
    response_model=SessionOut,
    summary="Login con email y password",
)
async def login(
    response: Response,
    payload: Optional[LoginPayload] = Body(default=None),
    ctx: AppContext = Depends(get_context),
):
    u = await service.login_local(ctx, payload or LoginPayload())
    issue_session(response, str(u["_id"]), ctx.settings)
    return {"message": "Login successful", "user": service.user_summary(u)}


@router.post(
    "/resend-otp",
    response_model=MessageOut,
    summary="Reenviar código OTP",
    description="Sólo para usuarios registrados que aún no verificaron su email.",
)
async def resend_otp(
    payload: Optional[ResendOtpPayload] = Body(default=None),
    ctx: AppContext = Depends(get_context),
):
    await service.resend_otp(ctx, payload or ResendOtpPayload())
    return MessageOut(message="OTP resent successfully")


@router.get(
    "/me",
    response_model=MeOut,
    summary="Usuario autenticado",
    description="Devuelve el usuario de la sesión (cookie o Bearer), sin campos sensibles.",
)
async def me(user=Depends(get_current_user)):
    return MeOut(user=UserOut.from_doc(user))


@router.post(
    "/logout",
    response_model=MessageOut,
    summary="Cerrar sesión",
    description="Borra la cookie de sesión. El token no se revoca en servidor.",
)
async def logout(response: Response, ctx: AppContext = Depends(get_context)):
    clear_session_cookie(response, ctx.settings)
    return MessageOut(message="Logged out successfully")
