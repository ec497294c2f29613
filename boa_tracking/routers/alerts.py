"""
Router de Alertas
Sistema BOA Tracking

Endpoints:
- GET /alerts - Listar alertas
- GET /alerts/user/{email} - Alertas de un usuario
- GET /alerts/type/{alert_type} - Alertas por tipo (filtro opcional de estado)
- GET /alerts/can-reactivate/{tracking_number} - Consultar reactivación
- POST /alerts/reactivate/{tracking_number} - Reactivar monitoreo
- POST /alerts - Crear alerta
- PUT /alerts/{id} - Cambiar canales de notificación
- PUT /alerts/{id}/solve - Marcar como solucionada
- DELETE /alerts/{id} - Eliminar alerta
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.repositories.alert_repository import AlertWithDescription
from boa_tracking.schemas.alerts import (
    AlertCreate,
    AlertPreferencesUpdate,
    AlertResponse,
    AlertCreatedResponse,
    ReactivationCheckResponse,
    ReactivationResponse,
)
from boa_tracking.schemas.common import MessageResponse
from boa_tracking.services.alert_service import get_alert_service


router = APIRouter(
    prefix="/alerts",
    tags=["Alertas"]
)


def to_response(row: AlertWithDescription) -> AlertResponse:
    alert, package_description = row
    return AlertResponse.model_validate(alert).model_copy(
        update={"package_description": package_description}
    )


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("", response_model=List[AlertResponse])
async def list_alerts(
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Todas las alertas (más recientes primero) con la descripción del paquete"""
    rows = await get_alert_service(db, clock).list_alerts()
    return [to_response(row) for row in rows]


@router.get("/user/{email}", response_model=List[AlertResponse])
async def list_user_alerts(
    email: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    rows = await get_alert_service(db, clock).list_alerts(user_email=email)
    return [to_response(row) for row in rows]


@router.get("/type/{alert_type}", response_model=List[AlertResponse])
async def list_alerts_by_type(
    alert_type: str,
    status_filter: Optional[str] = Query(None, alias="status", description="active o solved"),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Alertas de un tipo, p. ej. `internal_monitoring`

    **Filtros:**
    - `status`: `active` o `solved` (otros valores se ignoran)
    """
    rows = await get_alert_service(db, clock).list_alerts(
        alert_type=alert_type,
        status_filter=status_filter
    )
    return [to_response(row) for row in rows]


@router.get(
    "/can-reactivate/{tracking_number}",
    response_model=ReactivationCheckResponse,
    response_model_exclude_none=True
)
async def can_reactivate(
    tracking_number: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Indica si se puede reactivar el monitoreo del paquete

    Se requieren 24 horas desde la solución de la última alerta.
    """
    return await get_alert_service(db, clock).can_reactivate(tracking_number)


# =============================================================================
# ENDPOINTS DE ESCRITURA
# =============================================================================

@router.post(
    "/reactivate/{tracking_number}",
    response_model=ReactivationResponse,
    status_code=status.HTTP_201_CREATED
)
async def reactivate_monitoring(
    tracking_number: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Crea una nueva alerta de monitoreo si la reactivación está permitida"""
    alert = await get_alert_service(db, clock).reactivate(tracking_number)
    return ReactivationResponse(
        message="Monitoreo reactivado exitosamente",
        alertId=alert.id,
        severity=alert.severity
    )


@router.post("", response_model=AlertCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    alert_data: AlertCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    alert = await get_alert_service(db, clock).create_alert(alert_data)
    return AlertCreatedResponse(
        id=alert.id,
        user_email=alert.user_email,
        alert_type=alert.alert_type,
        message="Alerta creada exitosamente"
    )


@router.put("/{alert_id}", response_model=MessageResponse)
async def update_alert(
    alert_id: int,
    preferences: AlertPreferencesUpdate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    await get_alert_service(db, clock).update_preferences(alert_id, preferences)
    return MessageResponse(message="Alerta actualizada exitosamente")


@router.put("/{alert_id}/solve", response_model=MessageResponse)
async def solve_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    await get_alert_service(db, clock).solve_alert(alert_id)
    return MessageResponse(message="Alerta marcada como solucionada")


@router.delete("/{alert_id}", response_model=MessageResponse)
async def delete_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    await get_alert_service(db, clock).delete_alert(alert_id)
    return MessageResponse(message="Alerta eliminada exitosamente")
