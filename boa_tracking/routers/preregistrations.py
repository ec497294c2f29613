"""
Router de Pre-registros
Sistema BOA Tracking

Endpoints:
- POST /preregistrations - Crear pre-registro
- GET /preregistrations/all - Listado de administración (búsqueda y estado)
- GET /preregistrations/{user_email} - Pre-registros de un cliente
- PUT /preregistrations/{id} - Editar (recalcula el costo)
- DELETE /preregistrations/{id} - Eliminar
- POST /preregistrations/{id}/approve - Aprobar y crear el paquete
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.schemas.common import MessageResponse
from boa_tracking.schemas.preregistrations import (
    PreregistrationCreate,
    PreregistrationUpdate,
    PreregistrationResponse,
    PreregistrationCreatedResponse,
    ApprovalResponse,
)
from boa_tracking.services.preregistration_service import get_preregistration_service


router = APIRouter(
    prefix="/preregistrations",
    tags=["Pre-registros"]
)


@router.post("", response_model=PreregistrationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_preregistration(
    data: PreregistrationCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Crea un pre-registro en estado `Pendiente`

    - **user_email**, **description**, **sender_name**, **recipient_name**: obligatorios
    - Si no se envía `cost`, se calcula a partir de `weight`
    """
    preregistration = await get_preregistration_service(db, clock).create_preregistration(data)
    return PreregistrationCreatedResponse(
        message="Pre-registro creado exitosamente",
        preregistrationId=preregistration.id,
        preregistration_tracking_number=preregistration.preregistration_tracking_number
    )


@router.get("/all", response_model=List[PreregistrationResponse])
async def list_all_preregistrations(
    search: Optional[str] = Query(None, description="Buscar por número provisional"),
    status_filter: Optional[str] = Query(None, alias="status", description="Aprobado o Pendiente"),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Listado de administración"""
    return await get_preregistration_service(db, clock).list_all(
        search=search,
        status_filter=status_filter
    )


@router.get("/{user_email}", response_model=List[PreregistrationResponse])
async def list_user_preregistrations(
    user_email: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    return await get_preregistration_service(db, clock).list_by_user(user_email)


@router.put("/{preregistration_id}", response_model=PreregistrationResponse)
async def update_preregistration(
    preregistration_id: int,
    data: PreregistrationUpdate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Edita un pre-registro pendiente

    Requiere `sender_name`, `recipient_name` y `weight`; el costo se recalcula
    con la tarifa por peso.
    """
    return await get_preregistration_service(db, clock).update_preregistration(
        preregistration_id, data
    )


@router.delete("/{preregistration_id}", response_model=MessageResponse)
async def delete_preregistration(
    preregistration_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    await get_preregistration_service(db, clock).delete_preregistration(preregistration_id)
    return MessageResponse(message="Pre-registro eliminado exitosamente")


@router.post("/{preregistration_id}/approve", response_model=ApprovalResponse)
async def approve_preregistration(
    preregistration_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Aprueba el pre-registro

    Genera el número de tracking `BOA-<año>-<4 dígitos>`, crea el paquete en
    estado `En proceso` y marca el pre-registro como `Aprobado`.
    """
    package = await get_preregistration_service(db, clock).approve(preregistration_id)
    return ApprovalResponse(
        message="Pre-registro aprobado exitosamente",
        trackingNumber=package.tracking_number,
        packageId=package.id,
        preregistrationId=preregistration_id
    )
