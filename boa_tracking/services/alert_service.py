"""
Servicio de Alertas
Sistema BOA Tracking

Maneja:
- Suscripciones de clientes a alertas de paquetes
- Consulta y solución de alertas de monitoreo interno
- Reactivación manual del monitoreo de un paquete
"""

import logging
import math
from typing import List, Optional, Dict, Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock, hours_between
from boa_tracking.core.config import settings
from boa_tracking.models.alert import Alert
from boa_tracking.models.enums import AlertSeverity, AlertStatus, INTERNAL_MONITORING
from boa_tracking.repositories.alert_repository import AlertRepository, AlertWithDescription
from boa_tracking.repositories.package_repository import PackageRepository
from boa_tracking.schemas.alerts import AlertCreate, AlertPreferencesUpdate
from boa_tracking.services.alert_sweeper import build_delay_alert, classify_delay

logger = logging.getLogger(__name__)

DUPLICATE_ACTIVE_ALERT = "Ya existe una alerta de monitoreo activa para este paquete"


def parse_alert_status(value: Optional[str]) -> Optional[AlertStatus]:
    """Convierte el filtro de estado; valores desconocidos se ignoran"""
    if value is None:
        return None
    try:
        return AlertStatus(value)
    except ValueError:
        return None


class AlertService:
    """Servicio para gestión de alertas"""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock,
        reactivation_hours: float = settings.ALERT_REACTIVATION_HOURS
    ):
        self.db = db
        self.clock = clock
        self.reactivation_hours = reactivation_hours
        self.alert_repo = AlertRepository(db)
        self.package_repo = PackageRepository(db)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    async def list_alerts(
        self,
        user_email: Optional[str] = None,
        alert_type: Optional[str] = None,
        status_filter: Optional[str] = None
    ) -> List[AlertWithDescription]:
        return await self.alert_repo.list_with_package(
            user_email=user_email,
            alert_type=alert_type,
            status=parse_alert_status(status_filter),
        )

    async def get_alert(self, alert_id: int) -> Alert:
        alert = await self.alert_repo.get_by_id(alert_id)
        if alert is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Alerta no encontrada"
            )
        return alert

    async def can_reactivate(self, tracking_number: str) -> Dict[str, Any]:
        """
        Indica si se puede reactivar el monitoreo de un paquete

        Reglas:
        - Sin alertas previas: sí
        - Con una alerta activa: no
        - Última alerta solucionada: sí, si pasaron al menos
          `reactivation_hours` horas desde su solución

        Returns:
            Dict con canReactivate, reason y, si aplica, lastSolvedAt y remainingHours
        """
        latest = await self.alert_repo.get_latest_monitoring(tracking_number)

        if latest is None:
            return {"canReactivate": True, "reason": "No hay alertas previas"}

        if latest.status == AlertStatus.ACTIVE:
            return {"canReactivate": False, "reason": "Ya existe una alerta activa"}

        if latest.solved_at is None:
            return {"canReactivate": False, "reason": "La última alerta no tiene fecha de solución"}

        hours = hours_between(self.clock.now(), latest.solved_at)

        if hours >= self.reactivation_hours:
            return {
                "canReactivate": True,
                "reason": f"Han pasado {math.floor(hours)} horas desde la última solución",
                "lastSolvedAt": latest.solved_at,
            }

        # Se redondea hacia arriba: mientras se rechace, quedan horas positivas
        remaining = math.ceil(self.reactivation_hours - hours)
        return {
            "canReactivate": False,
            "reason": (
                f"Deben pasar al menos {self.reactivation_hours:g} horas desde la última "
                f"solución ({remaining} horas restantes)"
            ),
            "lastSolvedAt": latest.solved_at,
            "remainingHours": remaining,
        }

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create_alert(self, data: AlertCreate) -> Alert:
        """
        Crea una alerta (suscripción de cliente o monitoreo)

        Raises:
            HTTPException 400: Si ya hay una alerta de monitoreo activa para el paquete
                o la última se solucionó hace menos de `reactivation_hours` horas
        """
        if data.alert_type == INTERNAL_MONITORING and data.package_tracking:
            check = await self.can_reactivate(data.package_tracking)
            if not check["canReactivate"]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=check["reason"]
                )

        alert = Alert(
            **data.model_dump(),
            status=AlertStatus.ACTIVE,
            created_at=self.clock.now(),
        )

        try:
            created = await self.alert_repo.create(alert)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DUPLICATE_ACTIVE_ALERT
            )

        return created

    async def update_preferences(self, alert_id: int, data: AlertPreferencesUpdate) -> None:
        updated = await self.alert_repo.update_preferences(
            alert_id,
            sms_enabled=data.sms_enabled,
            email_enabled=data.email_enabled,
            push_enabled=data.push_enabled,
        )
        if not updated:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Alerta no encontrada"
            )
        await self.db.commit()

    async def solve_alert(self, alert_id: int) -> None:
        """Marca la alerta como solucionada con la hora actual"""
        solved = await self.alert_repo.mark_solved(alert_id, self.clock.now())
        if not solved:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Alerta no encontrada"
            )
        await self.db.commit()
        logger.info(f"Alerta {alert_id} marcada como solucionada")

    async def delete_alert(self, alert_id: int) -> None:
        deleted = await self.alert_repo.delete(alert_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Alerta no encontrada"
            )
        await self.db.commit()

    async def reactivate(self, tracking_number: str) -> Alert:
        """
        Crea una nueva alerta de monitoreo para el paquete

        La severidad corresponde al retraso actual del paquete (mínimo medium).

        Raises:
            HTTPException 404: Si el paquete no existe
            HTTPException 400: Si todavía no se puede reactivar
        """
        package = await self.package_repo.get_by_tracking_number(tracking_number)
        if package is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Paquete no encontrado"
            )

        check = await self.can_reactivate(tracking_number)
        if not check["canReactivate"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=check["reason"]
            )

        now = self.clock.now()
        hours = max(hours_between(now, package.updated_at), 0.0)
        severity = classify_delay(hours) or AlertSeverity.MEDIUM

        try:
            alert = await self.alert_repo.create(
                build_delay_alert(tracking_number, severity, hours, now)
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DUPLICATE_ACTIVE_ALERT
            )

        logger.info(f"Monitoreo reactivado para {tracking_number} ({severity.value})")
        return alert


def get_alert_service(db: AsyncSession, clock: Clock) -> AlertService:
    return AlertService(db, clock)
