"""
Servicio de Usuarios
Sistema BOA Tracking

Maneja toda la lógica de negocio para:
- Listado y consulta de usuarios (sin exponer contraseñas)
- Registro de usuarios con contraseña hasheada
"""

import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.security import hash_password, validate_password_strength
from boa_tracking.models.user import User
from boa_tracking.repositories.user_repository import UserRepository
from boa_tracking.schemas.users import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """Servicio para gestión de usuarios"""

    def __init__(self, db: AsyncSession, clock: Clock):
        """
        Inicializa el servicio con la sesión de BD

        Args:
            db: Sesión asíncrona de SQLAlchemy
            clock: Reloj de negocio
        """
        self.db = db
        self.clock = clock
        self.user_repo = UserRepository(db)

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_user_by_id(self, user_id: int) -> User:
        """
        Obtiene un usuario por ID

        Args:
            user_id: ID del usuario

        Returns:
            Usuario encontrado

        Raises:
            HTTPException 404: Si no existe
        """
        user = await self.user_repo.get_by_id(user_id)

        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Usuario no encontrado"
            )

        return user

    async def list_users(self) -> List[User]:
        return await self.user_repo.get_all()

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create_user(self, data: UserCreate) -> User:
        """
        Registra un usuario

        Raises:
            HTTPException 400: Si el email ya existe o la contraseña es muy corta
        """
        is_valid, error_message = validate_password_strength(data.password)
        if not is_valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=error_message
            )

        if await self.user_repo.exists_by_email(data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El email ya está registrado"
            )

        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            role=data.role or "public",
            created_at=self.clock.now(),
        )

        try:
            created = await self.user_repo.create(user)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El email ya está registrado"
            )

        logger.info(f"Usuario registrado: {created.email} ({created.role})")
        return created


def get_user_service(db: AsyncSession, clock: Clock) -> UserService:
    """
    Factory function para obtener instancia del servicio

    Args:
        db: Sesión de base de datos
        clock: Reloj de negocio

    Returns:
        Instancia de UserService
    """
    return UserService(db, clock)
