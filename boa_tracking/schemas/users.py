"""
Schemas de Usuarios
Sistema BOA Tracking
"""
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    """Schema para crear usuario"""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: str = Field(default="public", max_length=50, description="public o admin")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ana Quispe",
                "email": "ana@example.com",
                "password": "secreto123",
                "role": "public"
            }
        }


class UserResponse(BaseModel):
    """Schema de respuesta de usuario (sin contraseña)"""
    id: int
    name: str
    email: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# SCHEMAS DE AUTENTICACIÓN
# =============================================================================

class LoginResponse(BaseModel):
    """Perfil del usuario y token de acceso"""
    message: str
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class ResetTokenCheckResponse(BaseModel):
    valid: bool
    user: Optional[UserResponse] = None
