"""
Router de Autenticación
Sistema BOA Tracking

Endpoints:
- POST /users/login - Iniciar sesión
- GET /users/me - Usuario autenticado
- POST /users/forgot-password - Solicitar recuperación de contraseña
- POST /users/verify-reset-token - Verificar token de recuperación
- POST /users/reset-password - Cambiar contraseña con el token
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_current_user, get_clock
from boa_tracking.models.user import User
from boa_tracking.schemas.common import MessageResponse
from boa_tracking.schemas.users import UserResponse, LoginResponse, ResetTokenCheckResponse
from boa_tracking.services.auth_service import get_auth_service
from boa_tracking.services.email_service import EmailService, get_email_service


# =============================================================================
# SCHEMAS ESPECÍFICOS DE AUTENTICACIÓN
# =============================================================================

class LoginRequest(BaseModel):
    """Request para login"""
    email: str = Field(..., min_length=1, description="Email del usuario")
    password: str = Field(..., min_length=1, description="Contraseña")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "ana@example.com",
                "password": "secreto123"
            }
        }


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)


class VerifyResetTokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    """Request para cambiar la contraseña con un token de recuperación"""
    token: str = Field(..., min_length=1)
    newPassword: str = Field(..., description="Nueva contraseña (mínimo 6 caracteres)")

    class Config:
        json_schema_extra = {
            "example": {
                "token": "3f9a...c1",
                "newPassword": "nuevoSecreto"
            }
        }


FORGOT_PASSWORD_MESSAGE = (
    "Si el email está registrado, recibirás un enlace para restablecer tu contraseña"
)


# =============================================================================
# ROUTER
# =============================================================================

router = APIRouter(
    prefix="/users",
    tags=["Autenticación"]
)


# =============================================================================
# ENDPOINTS PÚBLICOS (Sin autenticación)
# =============================================================================

@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Iniciar sesión

    Returns:
        - **user**: Perfil del usuario (sin contraseña)
        - **access_token**: Token JWT para autenticación
        - **token_type**: Tipo de token (siempre "bearer")
    """
    user, access_token = await get_auth_service(db, clock).login(
        email=request.email,
        password=request.password
    )

    return LoginResponse(
        message="Login exitoso",
        user=UserResponse.model_validate(user),
        access_token=access_token
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Solicitar recuperación de contraseña

    La respuesta es la misma exista o no el email. El correo se envía en
    segundo plano y el enlace expira en 1 hora.
    """
    issued = await get_auth_service(db, clock).forgot_password(request.email)

    if issued is not None:
        user, token = issued
        background_tasks.add_task(
            email_service.send_password_reset,
            user.email,
            user.name,
            token
        )

    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/verify-reset-token", response_model=ResetTokenCheckResponse)
async def verify_reset_token(
    request: VerifyResetTokenRequest,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    user = await get_auth_service(db, clock).verify_reset_token(request.token)
    if user is None:
        return ResetTokenCheckResponse(valid=False)
    return ResetTokenCheckResponse(valid=True, user=UserResponse.model_validate(user))


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Cambia la contraseña; el token queda invalidado"""
    await get_auth_service(db, clock).reset_password(request.token, request.newPassword)
    return MessageResponse(message="Contraseña actualizada exitosamente")


# =============================================================================
# ENDPOINTS PROTEGIDOS (Requieren autenticación)
# =============================================================================

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Obtener información del usuario actual

    **Requiere:** Token JWT en el header `Authorization: Bearer <token>`
    """
    return current_user
