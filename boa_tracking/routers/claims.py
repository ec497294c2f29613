"""
Router de Reclamos
Sistema BOA Tracking

Endpoints:
- GET /claims - Listar reclamos
- GET /claims/user/{email} - Reclamos de un cliente
- GET /claims/type/{claim_type} - Reclamos por tipo
- GET /claims/status/{status} - Reclamos por estado
- POST /claims - Crear reclamo
- PUT /claims/{id}/respond - Responder reclamo
- PUT /claims/{id}/status - Cambiar estado
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.repositories.claim_repository import ClaimWithDescription
from boa_tracking.schemas.claims import (
    ClaimCreate,
    ClaimRespondRequest,
    ClaimStatusUpdate,
    ClaimResponse,
    ClaimCreatedResponse,
)
from boa_tracking.services.claim_service import get_claim_service


router = APIRouter(
    prefix="/claims",
    tags=["Reclamos"]
)


def to_response(row: ClaimWithDescription) -> ClaimResponse:
    claim, package_description = row
    return ClaimResponse.model_validate(claim).model_copy(
        update={"package_description": package_description}
    )


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("", response_model=List[ClaimResponse])
async def list_claims(
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    rows = await get_claim_service(db, clock).list_claims()
    return [to_response(row) for row in rows]


@router.get("/user/{email}", response_model=List[ClaimResponse])
async def list_user_claims(
    email: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    rows = await get_claim_service(db, clock).list_claims(email=email)
    return [to_response(row) for row in rows]


@router.get("/type/{claim_type}", response_model=List[ClaimResponse])
async def list_claims_by_type(
    claim_type: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    rows = await get_claim_service(db, clock).list_claims(claim_type=claim_type)
    return [to_response(row) for row in rows]


@router.get("/status/{claim_status}", response_model=List[ClaimResponse])
async def list_claims_by_status(
    claim_status: str,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Estados: Pendiente, En revisión, Respondido, Cerrado"""
    rows = await get_claim_service(db, clock).list_claims(status_filter=claim_status)
    return [to_response(row) for row in rows]


# =============================================================================
# ENDPOINTS DE ESCRITURA
# =============================================================================

@router.post("", response_model=ClaimCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_claim(
    claim_data: ClaimCreate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """
    Registra un reclamo

    - **name**, **email**, **claim_type**, **description**: obligatorios
    - **tracking_number**: opcional
    """
    claim = await get_claim_service(db, clock).create_claim(claim_data)
    return ClaimCreatedResponse(message="Reclamo creado exitosamente", claimId=claim.id)


@router.put("/{claim_id}/respond", response_model=ClaimResponse)
async def respond_claim(
    claim_id: int,
    request: ClaimRespondRequest,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    """Guarda la respuesta del administrador; el reclamo pasa a `Respondido`"""
    return await get_claim_service(db, clock).respond(
        claim_id,
        response=request.response,
        admin_name=request.admin_name
    )


@router.put("/{claim_id}/status", response_model=ClaimResponse)
async def update_claim_status(
    claim_id: int,
    request: ClaimStatusUpdate,
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock)
):
    return await get_claim_service(db, clock).update_status(claim_id, request.status)
