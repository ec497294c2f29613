"""
Repository de Devoluciones
Sistema BOA Tracking

Maneja las solicitudes de devolución y el archivo de paquetes devueltos.
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from boa_tracking.models.return_request import ReturnRequest, ReturnArchive
from boa_tracking.models.enums import ReturnRequestStatus


class ReturnRepository:
    """Repository para solicitudes de devolución y su archivo"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # SOLICITUDES
    # =========================================================================

    async def get_request(self, request_id: int) -> Optional[ReturnRequest]:
        result = await self.db.execute(
            select(ReturnRequest).where(ReturnRequest.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_requests(
        self,
        status: Optional[ReturnRequestStatus] = None
    ) -> List[ReturnRequest]:
        query = select(ReturnRequest)
        if status is not None:
            query = query.where(ReturnRequest.status == status)
        query = query.order_by(ReturnRequest.created_at.desc(), ReturnRequest.id.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_requests_by_user(self, user_email: str) -> List[ReturnRequest]:
        result = await self.db.execute(
            select(ReturnRequest)
            .where(ReturnRequest.user_email == user_email)
            .order_by(ReturnRequest.created_at.desc(), ReturnRequest.id.desc())
        )
        return list(result.scalars().all())

    async def create_request(self, return_request: ReturnRequest) -> ReturnRequest:
        self.db.add(return_request)
        await self.db.flush()
        await self.db.refresh(return_request)
        return return_request

    async def decide_request(
        self,
        request_id: int,
        target: ReturnRequestStatus,
        updated_at: datetime,
        **values
    ) -> bool:
        """
        Cambia una solicitud pendiente a aprobada o rechazada

        Returns:
            False si la solicitud ya no estaba pendiente
        """
        result = await self.db.execute(
            update(ReturnRequest)
            .where(
                ReturnRequest.id == request_id,
                ReturnRequest.status == ReturnRequestStatus.PENDING,
            )
            .values(status=target, updated_at=updated_at, **values)
        )
        return result.rowcount > 0

    # =========================================================================
    # ARCHIVO DE DEVOLUCIONES
    # =========================================================================

    async def get_archive(self) -> List[ReturnArchive]:
        result = await self.db.execute(
            select(ReturnArchive).order_by(ReturnArchive.created_at.desc(), ReturnArchive.id.desc())
        )
        return list(result.scalars().all())

    async def create_archive(self, archive: ReturnArchive) -> ReturnArchive:
        self.db.add(archive)
        await self.db.flush()
        return archive


def get_return_repository(db: AsyncSession) -> ReturnRepository:
    return ReturnRepository(db)
