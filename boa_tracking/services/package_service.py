"""
Servicio de Paquetes
Sistema BOA Tracking

Maneja toda la lógica de negocio para:
- Registro y consulta de paquetes
- Cambios de estado validados contra la máquina de estados
- Eventos de tracking (el evento y el estado del paquete se guardan juntos)
- Verificación de elegibilidad para devoluciones
"""

import json
import logging
from typing import List, Optional, Dict, Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.models.enums import (
    PackageStatus,
    PACKAGE_TRANSITIONS,
    RETURN_ELIGIBLE_STATUSES,
    can_transition,
)
from boa_tracking.models.package import Package, TrackingEvent
from boa_tracking.repositories.package_repository import PackageRepository, PackageWithStats
from boa_tracking.schemas.packages import (
    PackageCreate,
    TrackingEventCreate,
    TrackingEventUpdate,
)

logger = logging.getLogger(__name__)


def ensure_package_transition(current: PackageStatus, target: PackageStatus) -> None:
    """
    Valida un cambio de estado de paquete

    Raises:
        HTTPException 400: Si la transición no está permitida
    """
    if not can_transition(PACKAGE_TRANSITIONS, current, target):
        if current == PackageStatus.ENTREGADO:
            detail = "El paquete ya fue entregado y no admite más cambios de estado"
        else:
            detail = f"Transición de estado no permitida: '{current.value}' a '{target.value}'"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def dump_coordinates(coordinates: Any) -> Optional[str]:
    if coordinates is None:
        return None
    return json.dumps(coordinates)


class PackageService:
    """Servicio para gestión de paquetes y eventos de tracking"""

    def __init__(self, db: AsyncSession, clock: Clock):
        """
        Args:
            db: Sesión asíncrona de SQLAlchemy
            clock: Reloj de negocio
        """
        self.db = db
        self.clock = clock
        self.package_repo = PackageRepository(db)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    async def list_packages(self, email: Optional[str] = None) -> List[PackageWithStats]:
        """Paquetes (más recientes primero) con conteo y fecha del último evento"""
        return await self.package_repo.list_with_event_stats(email=email)

    async def get_package(self, tracking_number: str) -> Package:
        """
        Obtiene un paquete con su historial de eventos

        Raises:
            HTTPException 404: Si no existe
        """
        package = await self.package_repo.get_by_tracking_number(tracking_number, with_events=True)
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )
        return package

    async def check_return_eligibility(self, tracking_number: str) -> Dict[str, Any]:
        """
        Indica si se puede solicitar la devolución del paquete

        Returns:
            Dict con elegible, tracking_number, status y cost
        """
        package = await self.package_repo.get_by_tracking_number(tracking_number)
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )

        return {
            "elegible": package.status in RETURN_ELIGIBLE_STATUSES,
            "tracking_number": package.tracking_number,
            "status": package.status,
            "cost": package.cost,
        }

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create_package(self, data: PackageCreate) -> Package:
        """
        Registra un paquete nuevo

        Raises:
            HTTPException 400: Si el número de tracking ya existe
        """
        if await self.package_repo.exists_by_tracking_number(data.tracking_number):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El número de tracking ya existe"
            )

        now = self.clock.now()
        package = Package(**data.model_dump(), created_at=now, updated_at=now)

        try:
            created = await self.package_repo.create(package)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El número de tracking ya existe"
            )

        logger.info(f"Paquete creado: {created.tracking_number}")
        return created

    async def update_status(
        self,
        package_id: int,
        new_status: PackageStatus,
        location: Optional[str] = None
    ) -> Package:
        """
        Cambia el estado (y opcionalmente la ubicación) de un paquete

        Raises:
            HTTPException 404: Si no existe
            HTTPException 400: Si la transición no está permitida
        """
        package = await self.package_repo.get_by_id(package_id)
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )

        ensure_package_transition(package.status, new_status)

        package.status = new_status
        if location is not None:
            package.location = location
        package.updated_at = self.clock.now()

        await self.package_repo.update(package)
        await self.db.commit()
        return package

    # =========================================================================
    # EVENTOS DE TRACKING
    # =========================================================================

    async def add_event(self, data: TrackingEventCreate) -> TrackingEvent:
        """
        Registra un evento y actualiza el estado del paquete en la misma transacción

        Raises:
            HTTPException 404: Si el paquete no existe
            HTTPException 400: Si el paquete no admite el nuevo estado
        """
        package = await self.package_repo.get_by_tracking_number(data.package_tracking)
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )

        ensure_package_transition(package.status, data.event_type)

        now = self.clock.now()
        tracking_event = TrackingEvent(
            package_id=package.id,
            event_type=data.event_type,
            location=data.location,
            operator=data.operator,
            notes=data.notes,
            coordinates=dump_coordinates(data.coordinates),
            timestamp=self.clock.to_local(data.timestamp) or now,
            updated_at=now,
        )
        await self.package_repo.create_event(tracking_event)

        package.status = data.event_type
        package.location = data.location
        package.updated_at = now
        await self.package_repo.update(package)

        await self.db.commit()

        logger.info(
            f"Evento '{data.event_type.value}' registrado para {package.tracking_number} en {data.location}"
        )
        return tracking_event

    async def update_event(self, event_id: int, data: TrackingEventUpdate) -> TrackingEvent:
        tracking_event = await self.package_repo.get_event(event_id)
        if tracking_event is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Evento no encontrado"
            )

        tracking_event.event_type = data.event_type
        tracking_event.location = data.location
        tracking_event.notes = data.notes
        tracking_event.operator = data.operator
        tracking_event.coordinates = dump_coordinates(data.coordinates)
        tracking_event.updated_at = self.clock.now()

        await self.db.commit()
        return tracking_event

    async def delete_event(self, event_id: int) -> None:
        deleted = await self.package_repo.delete_event(event_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Evento no encontrado"
            )
        await self.db.commit()


def get_package_service(db: AsyncSession, clock: Clock) -> PackageService:
    """Factory function para obtener instancia del servicio"""
    return PackageService(db, clock)
