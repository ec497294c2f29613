"""
Router de Devoluciones
Sistema BOA Tracking

Endpoints:
- POST /returns/request - Solicitar devolución
- GET /returns/requests - Solicitudes (administración)
- GET /returns/user/{email} - Solicitudes de un cliente
- GET /returns - Archivo de paquetes devueltos
- PUT /returns/requests/{id}/approve - Aprobar
- PUT /returns/requests/{id}/reject - Rechazar con motivo
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.schemas.common import MessageResponse
from boa_tracking.schemas.returns import (
    ReturnRequestCreate,
    ReturnRejectRequest,
    ReturnRequestResponse,
    UserReturnRequestResponse,
    ReturnArchiveResponse,
    ReturnRequestCreatedResponse,
    ReturnApprovalResponse,
)
from boa_tracking.services.return_service import get_return_service


router = APIRouter(
    prefix="/returns",
    tags=["Devoluciones"]
)


# =============================================================================
# ENDPOINTS DEL CLIENTE
# =============================================================================

@router.post("/request", response_model=ReturnRequestCreatedResponse, status_code=status.HTTP_201_CREATED)
async def request_return(
    data: ReturnRequestCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Solicita la devolución de un paquete

    Solo se aceptan paquetes en estado `received` o `pending`.
    """
    return_request = await get_return_service(db, clock).request_return(data)
    return ReturnRequestCreatedResponse(
        message="Solicitud de devolución enviada con éxito.",
        requestId=return_request.id
    )


@router.get("/user/{email}", response_model=List[UserReturnRequestResponse])
async def list_user_returns(
    email: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    return await get_return_service(db, clock).list_user_requests(email)


# =============================================================================
# ENDPOINTS DE ADMINISTRACIÓN
# =============================================================================

@router.get("", response_model=List[ReturnArchiveResponse])
async def list_returns_archive(
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Paquetes retirados del seguimiento por devolución"""
    return await get_return_service(db, clock).list_archive()


@router.get("/requests", response_model=List[ReturnRequestResponse])
async def list_return_requests(
    status_filter: Optional[str] = Query(None, alias="status", description="pending, approved o rejected"),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    return await get_return_service(db, clock).list_requests(status_filter=status_filter)


@router.put("/requests/{request_id}/approve", response_model=ReturnApprovalResponse)
async def approve_return(
    request_id: int,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Aprueba la devolución

    Archiva una copia del paquete, lo elimina del seguimiento y marca la
    solicitud como `approved`, todo en una sola transacción.
    """
    return_tracking_number = await get_return_service(db, clock).approve(request_id)
    return ReturnApprovalResponse(
        message="Devolución aprobada con éxito.",
        return_tracking_number=return_tracking_number
    )


@router.put("/requests/{request_id}/reject", response_model=MessageResponse)
async def reject_return(
    request_id: int,
    data: ReturnRejectRequest,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Rechaza la devolución; `comment` es obligatorio"""
    await get_return_service(db, clock).reject(request_id, data.comment)
    return MessageResponse(message="Solicitud de devolución rechazada.")
