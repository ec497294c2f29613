"""
Servicio de Devoluciones
Sistema BOA Tracking

Maneja toda la lógica de negocio para:
- Solicitudes de devolución de los clientes
- Aprobación: archiva el paquete, lo retira del seguimiento y cierra la solicitud
- Rechazo con motivo obligatorio
"""

import logging
from typing import List, Optional, Dict, Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.config import settings
from boa_tracking.models.enums import (
    ReturnRequestStatus,
    RETURN_ELIGIBLE_STATUSES,
    RETURN_REQUEST_TRANSITIONS,
    can_transition,
)
from boa_tracking.models.return_request import ReturnRequest, ReturnArchive
from boa_tracking.repositories.package_repository import PackageRepository
from boa_tracking.repositories.return_repository import ReturnRepository
from boa_tracking.schemas.returns import ReturnRequestCreate

logger = logging.getLogger(__name__)


def parse_return_status(value: Optional[str]) -> Optional[ReturnRequestStatus]:
    if value is None:
        return None
    try:
        return ReturnRequestStatus(value)
    except ValueError:
        return None


class ReturnService:
    """Servicio para el flujo de devoluciones"""

    def __init__(self, db: AsyncSession, clock: Clock):
        self.db = db
        self.clock = clock
        self.return_repo = ReturnRepository(db)
        self.package_repo = PackageRepository(db)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    async def list_requests(self, status_filter: Optional[str] = None) -> List[ReturnRequest]:
        return await self.return_repo.get_requests(status=parse_return_status(status_filter))

    async def list_user_requests(self, user_email: str) -> List[Dict[str, Any]]:
        """Solicitudes del cliente, con el tracking del paquete como original_tracking_number"""
        requests = await self.return_repo.get_requests_by_user(user_email)
        return [
            {
                "id": r.id,
                "original_tracking_number": r.package_tracking_number,
                "first_name": r.first_name,
                "last_name": r.last_name,
                "reason": r.reason,
                "status": r.status,
                "rejection_comment": r.rejection_comment,
                "return_tracking_number": r.return_tracking_number,
                "created_at": r.created_at,
                "updated_at": r.updated_at,
            }
            for r in requests
        ]

    async def list_archive(self) -> List[ReturnArchive]:
        return await self.return_repo.get_archive()

    async def get_request(self, request_id: int) -> ReturnRequest:
        return_request = await self.return_repo.get_request(request_id)
        if return_request is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Solicitud de devolución no encontrada"
            )
        return return_request

    # =========================================================================
    # SOLICITUD
    # =========================================================================

    async def request_return(self, data: ReturnRequestCreate) -> ReturnRequest:
        """
        Registra una solicitud de devolución

        Raises:
            HTTPException 404: Si el paquete no existe
            HTTPException 400: Si el estado del paquete no admite devolución
        """
        package = await self.package_repo.get_by_tracking_number(data.tracking_number)
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )

        if package.status not in RETURN_ELIGIBLE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No se puede solicitar la devolución. Estado actual: {package.status.value}."
            )

        now = self.clock.now()
        return_request = ReturnRequest(
            user_email=data.user_email,
            package_tracking_number=data.tracking_number,
            first_name=data.first_name,
            last_name=data.last_name,
            reason=data.reason,
            status=ReturnRequestStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        created = await self.return_repo.create_request(return_request)
        await self.db.commit()

        logger.info(f"Solicitud de devolución {created.id} para {data.tracking_number}")
        return created

    # =========================================================================
    # DECISIÓN DEL ADMINISTRADOR
    # =========================================================================

    async def approve(self, request_id: int) -> str:
        """
        Aprueba una devolución pendiente

        En una sola transacción: guarda la copia del paquete en el archivo,
        elimina el paquete (y sus eventos) y marca la solicitud como aprobada.

        Returns:
            Número de tracking de la devolución (RTN-<epoch ms>)

        Raises:
            HTTPException 404: Si la solicitud o el paquete no existen
            HTTPException 400: Si la solicitud ya fue procesada
        """
        return_request = await self.get_request(request_id)
        self._ensure_pending(return_request, ReturnRequestStatus.APPROVED)

        package = await self.package_repo.get_by_tracking_number(
            return_request.package_tracking_number
        )
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )

        now = self.clock.now()
        return_tracking_number = f"{settings.RETURN_PREFIX}-{self.clock.timestamp_ms()}"

        archive = ReturnArchive(
            original_tracking_number=package.tracking_number,
            return_tracking_number=return_tracking_number,
            description=package.description,
            sender_name=package.sender_name,
            recipient_name=package.recipient_name,
            origin=package.origin,
            destination=package.destination,
            weight=package.weight,
            cost=package.cost,
            created_at=now,
        )

        try:
            await self.return_repo.create_archive(archive)
            await self.package_repo.delete_by_tracking_number(package.tracking_number)
            decided = await self.return_repo.decide_request(
                request_id,
                ReturnRequestStatus.APPROVED,
                now,
                return_tracking_number=return_tracking_number,
            )
            if not decided:
                await self.db.rollback()
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="La solicitud de devolución ya fue procesada"
                )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El número de devolución generado ya existe, intente nuevamente"
            )

        logger.info(
            f"Devolución aprobada: {return_request.package_tracking_number} archivado como {return_tracking_number}"
        )
        return return_tracking_number

    async def reject(self, request_id: int, comment: Optional[str]) -> None:
        """
        Rechaza una devolución pendiente

        Raises:
            HTTPException 400: Si falta el motivo o la solicitud ya fue procesada
            HTTPException 404: Si la solicitud no existe
        """
        if comment is None or not comment.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El motivo del rechazo es requerido."
            )

        return_request = await self.get_request(request_id)
        self._ensure_pending(return_request, ReturnRequestStatus.REJECTED)

        decided = await self.return_repo.decide_request(
            request_id,
            ReturnRequestStatus.REJECTED,
            self.clock.now(),
            rejection_comment=comment.strip(),
        )
        if not decided:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La solicitud de devolución ya fue procesada"
            )
        await self.db.commit()
        logger.info(f"Solicitud de devolución {request_id} rechazada")

    def _ensure_pending(self, return_request: ReturnRequest, target: ReturnRequestStatus) -> None:
        if not can_transition(RETURN_REQUEST_TRANSITIONS, return_request.status, target):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La solicitud de devolución ya fue procesada"
            )


def get_return_service(db: AsyncSession, clock: Clock) -> ReturnService:
    return ReturnService(db, clock)
