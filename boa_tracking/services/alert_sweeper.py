"""
Monitoreo de paquetes retrasados
Sistema BOA Tracking

Revisa periódicamente cuánto tiempo lleva cada paquete sin actualizarse y crea
una alerta de monitoreo interno cuando supera los umbrales de retraso:

- 2 horas o más: medium
- 3 horas o más: high
- 4 horas o más: critical

Cada paquete se procesa en su propia transacción; un error en uno se registra
en el log y la revisión continúa con el siguiente.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from boa_tracking.core.clock import Clock, hours_between
from boa_tracking.core.config import settings
from boa_tracking.models.alert import Alert
from boa_tracking.models.enums import (
    AlertSeverity,
    AlertStatus,
    INTERNAL_MONITORING,
    SYSTEM_USER,
)
from boa_tracking.repositories.alert_repository import AlertRepository
from boa_tracking.repositories.package_repository import PackageRepository

logger = logging.getLogger(__name__)

# Umbrales en horas, de mayor a menor
DELAY_THRESHOLDS = (
    (4.0, AlertSeverity.CRITICAL),
    (3.0, AlertSeverity.HIGH),
    (2.0, AlertSeverity.MEDIUM),
)


def classify_delay(hours: float) -> Optional[AlertSeverity]:
    """Severidad correspondiente a las horas sin actualización (None si no hay retraso)"""
    for threshold, severity in DELAY_THRESHOLDS:
        if hours >= threshold:
            return severity
    return None


def build_delay_alert(
    tracking_number: str,
    severity: AlertSeverity,
    hours: float,
    now: datetime
) -> Alert:
    """Alerta de monitoreo interno para un paquete retrasado"""
    return Alert(
        user_email=SYSTEM_USER,
        package_tracking=tracking_number,
        alert_type=INTERNAL_MONITORING,
        title=f"Retraso - {severity.value.capitalize()}",
        description=(
            f"El paquete {tracking_number} tiene un retraso de más de "
            f"{math.floor(hours)} horas."
        ),
        severity=severity,
        status=AlertStatus.ACTIVE,
        created_at=now,
    )


@dataclass
class SweepSummary:
    """Resultado de una revisión"""
    checked: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0


class AlertSweeper:
    """
    Tarea periódica de detección de retrasos

    Args:
        session_factory: Fábrica de sesiones asíncronas
        clock: Reloj de negocio
        interval_minutes: Minutos entre revisiones
        cooldown_hours: Horas tras la solución de una alerta antes de poder
            crear otra automáticamente. None: nunca se vuelve a crear.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        clock: Clock,
        interval_minutes: float = settings.ALERT_SWEEP_INTERVAL_MINUTES,
        cooldown_hours: Optional[float] = settings.ALERT_SWEEP_COOLDOWN_HOURS
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.interval_minutes = interval_minutes
        self.cooldown_hours = cooldown_hours
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    # =========================================================================
    # REVISIÓN
    # =========================================================================

    async def run_once(self) -> SweepSummary:
        """Ejecuta una revisión completa (nunca dos a la vez en el mismo proceso)"""
        async with self._lock:
            return await self._sweep()

    async def _sweep(self) -> SweepSummary:
        now = self.clock.now()
        logger.info("Revisando paquetes retrasados...")

        async with self.session_factory() as session:
            packages = await PackageRepository(session).list_staleness()

        summary = SweepSummary(checked=len(packages))

        for _package_id, tracking_number, updated_at in packages:
            hours = hours_between(now, updated_at)
            severity = classify_delay(hours)
            if severity is None:
                continue

            try:
                created = await self._create_if_needed(tracking_number, severity, hours, now)
            except IntegrityError:
                # Otra revisión creó la alerta activa primero
                logger.info(f"Alerta activa duplicada para {tracking_number}, se omite")
                summary.skipped += 1
                continue
            except SQLAlchemyError as e:
                logger.error(f"Error revisando el paquete {tracking_number}: {e}")
                summary.failed += 1
                continue

            if created:
                summary.created += 1
                logger.info(
                    f"Alerta '{severity.value}' creada para {tracking_number} "
                    f"({math.floor(hours)} horas sin actualización)"
                )
            else:
                summary.skipped += 1
                logger.debug(f"Alerta existente para {tracking_number}, se omite")

        logger.info(
            f"Revisión completada: {summary.checked} paquetes, {summary.created} alertas nuevas, "
            f"{summary.skipped} omitidas, {summary.failed} con error"
        )
        return summary

    async def _create_if_needed(
        self,
        tracking_number: str,
        severity: AlertSeverity,
        hours: float,
        now: datetime
    ) -> bool:
        async with self.session_factory() as session:
            alert_repo = AlertRepository(session)
            latest = await alert_repo.get_latest_monitoring(tracking_number)

            if not self._should_create(latest, now):
                return False

            await alert_repo.create(build_delay_alert(tracking_number, severity, hours, now))
            await session.commit()
            return True

    def _should_create(self, latest: Optional[Alert], now: datetime) -> bool:
        if latest is None:
            return True
        if latest.status == AlertStatus.ACTIVE:
            return False

        # Solucionada: solo se vuelve a crear pasado el tiempo de espera
        if self.cooldown_hours is None or latest.solved_at is None:
            return False
        return hours_between(now, latest.solved_at) >= self.cooldown_hours

    # =========================================================================
    # TAREA EN SEGUNDO PLANO
    # =========================================================================

    async def run_forever(self) -> None:
        """Revisa al iniciar y luego cada interval_minutes"""
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Error en la revisión de retrasos: {e}")
            await asyncio.sleep(self.interval_minutes * 60)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever())
            logger.info(f"Monitoreo de retrasos iniciado (cada {self.interval_minutes:g} minutos)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Monitoreo de retrasos detenido")
