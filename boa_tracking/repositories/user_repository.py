"""
Repository de Usuarios
Sistema BOA Tracking

Maneja todas las operaciones de base de datos relacionadas con usuarios.
Implementa el patrón Repository para separar la lógica de acceso a datos.
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from boa_tracking.models.user import User


class UserRepository:
    """Repository para operaciones CRUD de usuarios"""

    def __init__(self, db: AsyncSession):
        """
        Inicializa el repository con una sesión de base de datos

        Args:
            db: Sesión asíncrona de SQLAlchemy
        """
        self.db = db

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Obtiene un usuario por su ID

        Args:
            user_id: ID del usuario

        Returns:
            Usuario encontrado o None si no existe
        """
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_all(self) -> List[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    async def exists_by_email(self, email: str) -> bool:
        """
        Verifica si existe un usuario con el email dado

        Args:
            email: Email a verificar

        Returns:
            True si existe, False si no
        """
        result = await self.db.execute(
            select(func.count(User.id)).where(User.email == email)
        )
        count = result.scalar()
        return count > 0

    async def get_by_valid_reset_token(self, token: str, now: datetime) -> Optional[User]:
        """
        Obtiene el usuario dueño de un token de recuperación vigente

        Args:
            token: Token de recuperación
            now: Hora actual del reloj de negocio

        Returns:
            Usuario si el token existe y no ha expirado, None en otro caso
        """
        result = await self.db.execute(
            select(User).where(
                User.reset_token == token,
                User.reset_token_expiry > now,
            )
        )
        return result.scalar_one_or_none()

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, user: User) -> User:
        """
        Crea un nuevo usuario en la base de datos

        Args:
            user: Instancia de User a crear

        Returns:
            Usuario creado con su ID asignado
        """
        self.db.add(user)
        await self.db.flush()  # Para obtener el ID sin hacer commit
        await self.db.refresh(user)
        return user

    async def set_reset_token(self, user_id: int, token: str, expiry: datetime) -> bool:
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(reset_token=token, reset_token_expiry=expiry)
        )
        return result.rowcount > 0

    async def update_password(self, user_id: int, new_password_hash: str) -> bool:
        """
        Actualiza la contraseña e invalida el token de recuperación

        Args:
            user_id: ID del usuario
            new_password_hash: Hash de la nueva contraseña

        Returns:
            True si se actualizó correctamente
        """
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                password=new_password_hash,
                reset_token=None,
                reset_token_expiry=None,
            )
        )
        return result.rowcount > 0


# =============================================================================
# FUNCIÓN HELPER PARA OBTENER EL REPOSITORY
# =============================================================================

def get_user_repository(db: AsyncSession) -> UserRepository:
    """
    Factory function para obtener una instancia del UserRepository

    Args:
        db: Sesión de base de datos

    Returns:
        Instancia de UserRepository
    """
    return UserRepository(db)
