"""
Router de Paquetes
Sistema BOA Tracking

Endpoints:
- GET /packages - Listar paquetes con estadísticas de eventos
- GET /packages/user/{email} - Paquetes de un cliente (remitente o destinatario)
- GET /packages/tracking/{tracking_number} - Detalle con historial
- GET /packages/check-return/{tracking_number} - Verificar si admite devolución
- POST /packages - Registrar paquete
- PUT /packages/{id}/status - Cambiar estado
- POST /packages/events - Registrar evento de tracking
- PUT /packages/events/{id} - Editar evento
- DELETE /packages/events/{id} - Eliminar evento
- GET /packages/{tracking_number} - Detalle con historial
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.repositories.package_repository import PackageWithStats
from boa_tracking.schemas.common import MessageResponse
from boa_tracking.schemas.packages import (
    PackageCreate,
    PackageStatusUpdate,
    PackageResponse,
    PackageSummaryResponse,
    PackageDetailResponse,
    PackageCreatedResponse,
    ReturnEligibilityResponse,
    TrackingEventCreate,
    TrackingEventUpdate,
    EventCreatedResponse,
)
from boa_tracking.services.package_service import get_package_service


# =============================================================================
# ROUTER
# =============================================================================

router = APIRouter(
    prefix="/packages",
    tags=["Paquetes"]
)


def to_summary(row: PackageWithStats) -> PackageSummaryResponse:
    package, events_count, last_event_time = row
    return PackageSummaryResponse.model_validate(package).model_copy(
        update={"events_count": events_count, "last_event_time": last_event_time}
    )


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("", response_model=List[PackageSummaryResponse])
async def list_packages(
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Lista todos los paquetes (más recientes primero)

    Cada paquete incluye `events_count` y `last_event_time`.
    """
    rows = await get_package_service(db, clock).list_packages()
    return [to_summary(row) for row in rows]


@router.get("/user/{email}", response_model=List[PackageSummaryResponse])
async def list_user_packages(
    email: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Paquetes donde el email es remitente o destinatario"""
    rows = await get_package_service(db, clock).list_packages(email=email)
    return [to_summary(row) for row in rows]


@router.get("/tracking/{tracking_number}", response_model=PackageDetailResponse)
async def track_package(
    tracking_number: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Seguimiento de un paquete

    Devuelve el paquete con sus eventos, del más reciente al más antiguo.
    """
    return await get_package_service(db, clock).get_package(tracking_number)


@router.get("/check-return/{tracking_number}", response_model=ReturnEligibilityResponse)
async def check_return(
    tracking_number: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Verifica si el paquete admite una solicitud de devolución

    Solo los paquetes en estado `received` o `pending` son elegibles.
    """
    return await get_package_service(db, clock).check_return_eligibility(tracking_number)


# =============================================================================
# ENDPOINTS DE PAQUETES
# =============================================================================

@router.post("", response_model=PackageCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_package(
    package_data: PackageCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Registra un paquete

    - **tracking_number**: obligatorio y único
    - **priority**: por defecto `normal`
    """
    package = await get_package_service(db, clock).create_package(package_data)
    return PackageCreatedResponse(
        id=package.id,
        tracking_number=package.tracking_number,
        message="Paquete creado exitosamente"
    )


@router.put("/{package_id}/status", response_model=PackageResponse)
async def update_package_status(
    package_id: int,
    request: PackageStatusUpdate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Cambia el estado del paquete (validado contra las transiciones permitidas)"""
    return await get_package_service(db, clock).update_status(
        package_id,
        new_status=request.status,
        location=request.location
    )


# =============================================================================
# ENDPOINTS DE EVENTOS
# =============================================================================

@router.post("/events", response_model=EventCreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_tracking_event(
    event_data: TrackingEventCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Registra un evento de tracking

    El estado del paquete pasa a ser `event_type` y su ubicación la del evento.
    """
    tracking_event = await get_package_service(db, clock).add_event(event_data)
    return EventCreatedResponse(
        message="Evento agregado exitosamente",
        eventId=tracking_event.id
    )


@router.put("/events/{event_id}", response_model=MessageResponse)
async def update_tracking_event(
    event_id: int,
    event_data: TrackingEventUpdate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    await get_package_service(db, clock).update_event(event_id, event_data)
    return MessageResponse(message="Evento actualizado exitosamente")


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_tracking_event(
    event_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    await get_package_service(db, clock).delete_event(event_id)
    return MessageResponse(message="Evento eliminado exitosamente")


# Debe ir al final: captura cualquier segmento
@router.get("/{tracking_number}", response_model=PackageDetailResponse)
async def get_package(
    tracking_number: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    return await get_package_service(db, clock).get_package(tracking_number)
