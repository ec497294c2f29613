"""
Repository de Pre-registros
Sistema BOA Tracking
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete

from boa_tracking.models.preregistration import Preregistration
from boa_tracking.models.enums import PreregistrationStatus


class PreregistrationRepository:
    """Repository para operaciones CRUD de pre-registros"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, preregistration_id: int) -> Optional[Preregistration]:
        result = await self.db.execute(
            select(Preregistration).where(Preregistration.id == preregistration_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        search: Optional[str] = None,
        status: Optional[PreregistrationStatus] = None
    ) -> List[Preregistration]:
        """
        Lista todos los pre-registros (vista de administración)

        Args:
            search: Texto a buscar en el número provisional de tracking
            status: Filtrar por estado (Pendiente / Aprobado)
        """
        query = select(Preregistration)

        if search:
            query = query.where(
                Preregistration.preregistration_tracking_number.ilike(f"%{search}%")
            )
        if status is not None:
            query = query.where(Preregistration.status == status)

        query = query.order_by(Preregistration.created_at.desc(), Preregistration.id.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_user_email(self, user_email: str) -> List[Preregistration]:
        result = await self.db.execute(
            select(Preregistration)
            .where(Preregistration.user_email == user_email)
            .order_by(Preregistration.created_at.desc(), Preregistration.id.desc())
        )
        return list(result.scalars().all())

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, preregistration: Preregistration) -> Preregistration:
        self.db.add(preregistration)
        await self.db.flush()
        await self.db.refresh(preregistration)
        return preregistration

    async def update(self, preregistration: Preregistration) -> Preregistration:
        await self.db.flush()
        return preregistration

    async def mark_approved(
        self,
        preregistration_id: int,
        approved_at: datetime,
        tracking_number: str
    ) -> bool:
        """
        Marca el pre-registro como aprobado solo si sigue pendiente

        Returns:
            False si otro proceso ya lo aprobó
        """
        result = await self.db.execute(
            update(Preregistration)
            .where(
                Preregistration.id == preregistration_id,
                Preregistration.status == PreregistrationStatus.PENDIENTE,
            )
            .values(
                status=PreregistrationStatus.APROBADO,
                approved_at=approved_at,
                approved_tracking_number=tracking_number,
            )
        )
        return result.rowcount > 0

    async def delete(self, preregistration_id: int) -> bool:
        result = await self.db.execute(
            delete(Preregistration).where(Preregistration.id == preregistration_id)
        )
        return result.rowcount > 0


def get_preregistration_repository(db: AsyncSession) -> PreregistrationRepository:
    return PreregistrationRepository(db)
