"""
Servicio de Pre-registros
Sistema BOA Tracking

Maneja toda la lógica de negocio para:
- Registro de solicitudes de envío por parte de los clientes
- Cálculo de tarifa según el peso
- Aprobación: genera el número de tracking y crea el paquete
"""

import logging
import math
import random
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.config import settings
from boa_tracking.models.enums import (
    PackageStatus,
    PreregistrationStatus,
    PREREGISTRATION_TRANSITIONS,
    can_transition,
)
from boa_tracking.models.package import Package
from boa_tracking.models.preregistration import Preregistration
from boa_tracking.repositories.package_repository import PackageRepository
from boa_tracking.repositories.preregistration_repository import PreregistrationRepository
from boa_tracking.schemas.preregistrations import PreregistrationCreate, PreregistrationUpdate

logger = logging.getLogger(__name__)

# (peso máximo en kg, costo en Bs)
WEIGHT_TARIFF = (
    (1, 15),
    (3, 25),
    (5, 35),
    (10, 50),
)
EXTRA_KG_COST = 5

MAX_TRACKING_ATTEMPTS = 20


def calculate_cost(weight: float) -> float:
    """
    Tarifa por peso

    Hasta 10 kg por tramos; desde ahí 50 más 5 por cada kg (o fracción) adicional.
    """
    for max_weight, cost in WEIGHT_TARIFF:
        if weight <= max_weight:
            return float(cost)
    base = WEIGHT_TARIFF[-1][1]
    return float(base + math.ceil(weight - WEIGHT_TARIFF[-1][0]) * EXTRA_KG_COST)


def parse_preregistration_status(value: Optional[str]) -> Optional[PreregistrationStatus]:
    if value is None:
        return None
    try:
        return PreregistrationStatus(value)
    except ValueError:
        return None


class PreregistrationService:
    """Servicio para gestión de pre-registros"""

    def __init__(self, db: AsyncSession, clock: Clock):
        self.db = db
        self.clock = clock
        self.preregistration_repo = PreregistrationRepository(db)
        self.package_repo = PackageRepository(db)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    async def get_preregistration(self, preregistration_id: int) -> Preregistration:
        preregistration = await self.preregistration_repo.get_by_id(preregistration_id)
        if preregistration is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pre-registro no encontrado"
            )
        return preregistration

    async def list_all(
        self,
        search: Optional[str] = None,
        status_filter: Optional[str] = None
    ) -> List[Preregistration]:
        """Listado de administración; estados distintos de Pendiente/Aprobado se ignoran"""
        return await self.preregistration_repo.get_all(
            search=search,
            status=parse_preregistration_status(status_filter),
        )

    async def list_by_user(self, user_email: str) -> List[Preregistration]:
        return await self.preregistration_repo.get_by_user_email(user_email)

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create_preregistration(self, data: PreregistrationCreate) -> Preregistration:
        """
        Crea un pre-registro en estado Pendiente

        Si no se indica costo y hay peso, el costo se calcula con la tarifa.
        """
        now = self.clock.now()
        values = data.model_dump()

        if not values.get("preregistration_tracking_number"):
            values["preregistration_tracking_number"] = self._provisional_number(now)
        if values.get("cost") is None and values.get("weight") is not None:
            values["cost"] = calculate_cost(values["weight"])

        preregistration = Preregistration(
            **values,
            status=PreregistrationStatus.PENDIENTE,
            created_at=now,
        )
        created = await self.preregistration_repo.create(preregistration)
        await self.db.commit()

        logger.info(f"Pre-registro creado: {created.preregistration_tracking_number}")
        return created

    async def update_preregistration(
        self,
        preregistration_id: int,
        data: PreregistrationUpdate
    ) -> Preregistration:
        """
        Edita un pre-registro pendiente y recalcula su costo

        Raises:
            HTTPException 404: Si no existe
            HTTPException 400: Si ya fue aprobado
        """
        preregistration = await self.get_preregistration(preregistration_id)

        if preregistration.status != PreregistrationStatus.PENDIENTE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se puede editar un pre-registro aprobado"
            )

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(preregistration, field, value)
        preregistration.cost = calculate_cost(data.weight)

        await self.preregistration_repo.update(preregistration)
        await self.db.commit()
        return preregistration

    async def delete_preregistration(self, preregistration_id: int) -> None:
        deleted = await self.preregistration_repo.delete(preregistration_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pre-registro no encontrado"
            )
        await self.db.commit()

    async def approve(self, preregistration_id: int) -> Package:
        """
        Aprueba un pre-registro: crea el paquete y marca el pre-registro

        Ambas escrituras se confirman en un solo commit; si algo falla no
        queda ni el paquete ni el cambio de estado.

        Returns:
            Paquete creado

        Raises:
            HTTPException 404: Si el pre-registro no existe
            HTTPException 400: Si ya fue aprobado
        """
        preregistration = await self.get_preregistration(preregistration_id)

        if not can_transition(
            PREREGISTRATION_TRANSITIONS,
            preregistration.status,
            PreregistrationStatus.APROBADO
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El pre-registro ya fue aprobado"
            )

        now = self.clock.now()
        tracking_number = await self._generate_tracking_number(now)

        package = Package(
            tracking_number=tracking_number,
            description=preregistration.description,
            status=PackageStatus.EN_PROCESO,
            sender_name=preregistration.sender_name,
            sender_phone=preregistration.sender_phone,
            sender_address=preregistration.sender_address,
            sender_email=preregistration.sender_email,
            recipient_name=preregistration.recipient_name,
            recipient_phone=preregistration.recipient_phone,
            recipient_address=preregistration.recipient_address,
            recipient_email=preregistration.recipient_email,
            weight=preregistration.weight,
            cost=preregistration.cost,
            user_email=preregistration.user_email,
            origin=preregistration.origin_city,
            destination=preregistration.destination_city,
            estimated_delivery_date=preregistration.estimated_delivery_date,
            priority=preregistration.priority or "normal",
            created_at=now,
            updated_at=now,
        )

        try:
            package = await self.package_repo.create(package)
            approved = await self.preregistration_repo.mark_approved(
                preregistration_id, now, tracking_number
            )
            if not approved:
                await self.db.rollback()
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="El pre-registro ya fue aprobado"
                )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El número de tracking generado ya existe, intente nuevamente"
            )

        logger.info(f"Pre-registro {preregistration_id} aprobado con tracking {tracking_number}")
        return package

    # =========================================================================
    # MÉTODOS AUXILIARES
    # =========================================================================

    def _provisional_number(self, now: datetime) -> str:
        """Número provisional (formato: PRE-YYYYMMDD-XXXX)"""
        return f"{settings.PREREGISTRATION_PREFIX}-{now:%Y%m%d}-{random.randint(1000, 9999)}"

    async def _generate_tracking_number(self, now: datetime) -> str:
        """
        Genera un número de tracking libre (formato: BOA-YYYY-XXXX)

        Raises:
            HTTPException 500: Si no se encontró un número libre
        """
        for _ in range(MAX_TRACKING_ATTEMPTS):
            candidate = f"{settings.TRACKING_PREFIX}-{now.year}-{random.randint(1000, 9999)}"
            if not await self.package_repo.exists_by_tracking_number(candidate):
                return candidate

        logger.error(f"Sin números de tracking libres tras {MAX_TRACKING_ATTEMPTS} intentos")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo generar un número de tracking único"
        )


def get_preregistration_service(db: AsyncSession, clock: Clock) -> PreregistrationService:
    return PreregistrationService(db, clock)
