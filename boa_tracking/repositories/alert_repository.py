"""
Repository de Alertas
Sistema BOA Tracking
"""

from datetime import datetime
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete

from boa_tracking.models.alert import Alert
from boa_tracking.models.enums import AlertStatus, INTERNAL_MONITORING
from boa_tracking.models.package import Package


AlertWithDescription = Tuple[Alert, Optional[str]]


class AlertRepository:
    """Repository para operaciones CRUD de alertas"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, alert_id: int) -> Optional[Alert]:
        result = await self.db.execute(select(Alert).where(Alert.id == alert_id))
        return result.scalar_one_or_none()

    async def list_with_package(
        self,
        user_email: Optional[str] = None,
        alert_type: Optional[str] = None,
        status: Optional[AlertStatus] = None
    ) -> List[AlertWithDescription]:
        """
        Lista alertas junto con la descripción del paquete asociado

        Args:
            user_email: Filtrar por email del usuario
            alert_type: Filtrar por tipo de alerta
            status: Filtrar por estado (active/solved)
        """
        query = (
            select(Alert, Package.description.label("package_description"))
            .outerjoin(Package, Alert.package_tracking == Package.tracking_number)
        )

        if user_email is not None:
            query = query.where(Alert.user_email == user_email)
        if alert_type is not None:
            query = query.where(Alert.alert_type == alert_type)
        if status is not None:
            query = query.where(Alert.status == status)

        query = query.order_by(Alert.created_at.desc(), Alert.id.desc())

        result = await self.db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def get_latest_monitoring(self, tracking_number: str) -> Optional[Alert]:
        """Última alerta de monitoreo interno para un paquete"""
        result = await self.db.execute(
            select(Alert)
            .where(
                Alert.package_tracking == tracking_number,
                Alert.alert_type == INTERNAL_MONITORING,
            )
            .order_by(Alert.created_at.desc(), Alert.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, alert: Alert) -> Alert:
        self.db.add(alert)
        await self.db.flush()
        await self.db.refresh(alert)
        return alert

    async def update_preferences(
        self,
        alert_id: int,
        sms_enabled: bool,
        email_enabled: bool,
        push_enabled: bool
    ) -> bool:
        result = await self.db.execute(
            update(Alert)
            .where(Alert.id == alert_id)
            .values(
                sms_enabled=sms_enabled,
                email_enabled=email_enabled,
                push_enabled=push_enabled,
            )
        )
        return result.rowcount > 0

    async def mark_solved(self, alert_id: int, solved_at: datetime) -> bool:
        result = await self.db.execute(
            update(Alert)
            .where(Alert.id == alert_id)
            .values(status=AlertStatus.SOLVED, solved_at=solved_at)
        )
        return result.rowcount > 0

    async def delete(self, alert_id: int) -> bool:
        result = await self.db.execute(delete(Alert).where(Alert.id == alert_id))
        return result.rowcount > 0


def get_alert_repository(db: AsyncSession) -> AlertRepository:
    return AlertRepository(db)
