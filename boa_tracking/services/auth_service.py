"""
Servicio de Autenticación
Sistema BOA Tracking

Maneja toda la lógica de negocio relacionada con:
- Login y generación del token de acceso
- Recuperación de contraseña con token de un solo uso
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.config import settings
from boa_tracking.core.security import (
    verify_password,
    hash_password,
    create_access_token,
    generate_reset_token,
    validate_password_strength,
)
from boa_tracking.models.user import User
from boa_tracking.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Servicio de autenticación y recuperación de contraseña"""

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
    # AUTENTICACIÓN
    # =========================================================================

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Autentica un usuario y genera su token JWT

        Args:
            email: Email del usuario
            password: Contraseña en texto plano

        Returns:
            (usuario, access_token)

        Raises:
            HTTPException 401: Si el usuario no existe o la contraseña es incorrecta
        """
        user = await self.user_repo.get_by_email(email)

        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Usuario no encontrado",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not verify_password(password, user.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Contraseña incorrecta",
                headers={"WWW-Authenticate": "Bearer"},
            )

        # "sub" debe ser string en el JWT
        access_token = create_access_token({
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
        })

        logger.info(f"Login exitoso: {user.email}")
        return user, access_token

    # =========================================================================
    # RECUPERACIÓN DE CONTRASEÑA
    # =========================================================================

    async def forgot_password(self, email: str) -> Optional[Tuple[User, str]]:
        """
        Genera y guarda un token de recuperación

        Returns:
            (usuario, token) o None si el email no está registrado. El router
            responde igual en ambos casos para no revelar qué emails existen.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info(f"Recuperación solicitada para email no registrado: {email}")
            return None

        token = generate_reset_token()
        expiry = self.clock.now() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)

        await self.user_repo.set_reset_token(user.id, token, expiry)
        await self.db.commit()

        return user, token

    async def verify_reset_token(self, token: str) -> Optional[User]:
        """Usuario dueño del token si sigue vigente"""
        if not token:
            return None
        return await self.user_repo.get_by_valid_reset_token(token, self.clock.now())

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Cambia la contraseña usando un token de recuperación

        El token queda invalidado tras usarse.

        Raises:
            HTTPException 400: Si la contraseña es muy corta o el token no es válido
        """
        is_valid, error_message = validate_password_strength(new_password)
        if not is_valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=error_message
            )

        user = await self.verify_reset_token(token)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Token inválido o expirado"
            )

        await self.user_repo.update_password(user.id, hash_password(new_password))
        await self.db.commit()
        logger.info(f"Contraseña restablecida para {user.email}")


def get_auth_service(db: AsyncSession, clock: Clock) -> AuthService:
    """Factory function para obtener instancia del servicio"""
    return AuthService(db, clock)
