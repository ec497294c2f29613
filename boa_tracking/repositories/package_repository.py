"""
Repository de Paquetes
Sistema BOA Tracking

Maneja todas las operaciones de base de datos para:
- Paquetes
- Eventos de tracking
- Consulta de inactividad usada por el monitoreo de retrasos
"""

from datetime import datetime
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_
from sqlalchemy.orm import selectinload

from boa_tracking.models.package import Package, TrackingEvent


PackageWithStats = Tuple[Package, int, Optional[datetime]]


class PackageRepository:
    """Repository para operaciones CRUD de paquetes y sus eventos"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, package_id: int) -> Optional[Package]:
        result = await self.db.execute(
            select(Package).where(Package.id == package_id)
        )
        return result.scalar_one_or_none()

    async def get_by_tracking_number(
        self,
        tracking_number: str,
        with_events: bool = False
    ) -> Optional[Package]:
        """Obtiene un paquete por su número de tracking, opcionalmente con eventos"""
        query = select(Package).where(Package.tracking_number == tracking_number)
        if with_events:
            query = query.options(selectinload(Package.events))

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def exists_by_tracking_number(self, tracking_number: str) -> bool:
        result = await self.db.execute(
            select(func.count(Package.id)).where(Package.tracking_number == tracking_number)
        )
        return result.scalar() > 0

    async def list_with_event_stats(
        self,
        email: Optional[str] = None
    ) -> List[PackageWithStats]:
        """
        Lista paquetes con el conteo de eventos y la fecha del último evento

        Args:
            email: Si se indica, solo paquetes donde es remitente o destinatario

        Returns:
            Lista de tuplas (paquete, events_count, last_event_time)
        """
        query = (
            select(
                Package,
                func.count(TrackingEvent.id).label("events_count"),
                func.max(TrackingEvent.timestamp).label("last_event_time"),
            )
            .outerjoin(TrackingEvent, TrackingEvent.package_id == Package.id)
            .group_by(Package.id)
            .order_by(Package.created_at.desc(), Package.id.desc())
        )

        if email is not None:
            query = query.where(
                or_(Package.sender_email == email, Package.recipient_email == email)
            )

        result = await self.db.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def list_staleness(self) -> List[Tuple[int, str, datetime]]:
        """Obtiene (id, tracking_number, updated_at) de todos los paquetes"""
        result = await self.db.execute(
            select(Package.id, Package.tracking_number, Package.updated_at)
            .order_by(Package.id)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, package: Package) -> Package:
        self.db.add(package)
        await self.db.flush()
        await self.db.refresh(package)
        return package

    async def update(self, package: Package) -> Package:
        await self.db.flush()
        return package

    async def delete_by_tracking_number(self, tracking_number: str) -> bool:
        result = await self.db.execute(
            delete(Package).where(Package.tracking_number == tracking_number)
        )
        return result.rowcount > 0

    # =========================================================================
    # EVENTOS DE TRACKING
    # =========================================================================

    async def get_event(self, event_id: int) -> Optional[TrackingEvent]:
        result = await self.db.execute(
            select(TrackingEvent).where(TrackingEvent.id == event_id)
        )
        return result.scalar_one_or_none()

    async def create_event(self, tracking_event: TrackingEvent) -> TrackingEvent:
        self.db.add(tracking_event)
        await self.db.flush()
        return tracking_event

    async def delete_event(self, event_id: int) -> bool:
        result = await self.db.execute(
            delete(TrackingEvent).where(TrackingEvent.id == event_id)
        )
        return result.rowcount > 0


def get_package_repository(db: AsyncSession) -> PackageRepository:
    """Factory function para obtener instancia del repository"""
    return PackageRepository(db)
