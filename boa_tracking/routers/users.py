"""
Router de Usuarios
Sistema BOA Tracking

Endpoints:
- GET /users - Listar usuarios
- GET /users/{id} - Ver usuario
- POST /users - Registrar usuario
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.schemas.users import UserCreate, UserResponse
from boa_tracking.services.user_service import get_user_service


# =============================================================================
# ROUTER
# =============================================================================

router = APIRouter(
    prefix="/users",
    tags=["Usuarios"]
)


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("", response_model=List[UserResponse], status_code=status.HTTP_200_OK)
async def list_users(
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Lista todos los usuarios (sin contraseñas)"""
    return await get_user_service(db, clock).list_users()


@router.get("/{user_id}", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Ver detalle de un usuario

    - **user_id**: ID del usuario
    """
    return await get_user_service(db, clock).get_user_by_id(user_id)


# =============================================================================
# ENDPOINTS DE ESCRITURA
# =============================================================================

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Registrar un usuario

    - **role**: `public` por defecto
    - La contraseña se guarda hasheada con bcrypt
    """
    return await get_user_service(db, clock).create_user(user_data)
