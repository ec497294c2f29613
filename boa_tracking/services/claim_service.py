"""
Servicio de Reclamos
Sistema BOA Tracking
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import Clock
from boa_tracking.models.claim import Claim
from boa_tracking.models.enums import ClaimStatus
from boa_tracking.repositories.claim_repository import ClaimRepository, ClaimWithDescription
from boa_tracking.schemas.claims import ClaimCreate

logger = logging.getLogger(__name__)


class ClaimService:
    """Servicio para gestión de reclamos"""

    def __init__(self, db: AsyncSession, clock: Clock):
        self.db = db
        self.clock = clock
        self.claim_repo = ClaimRepository(db)

    async def list_claims(
        self,
        email: Optional[str] = None,
        claim_type: Optional[str] = None,
        status_filter: Optional[str] = None
    ) -> List[ClaimWithDescription]:
        """
        Lista reclamos con la descripción del paquete

        Raises:
            HTTPException 400: Si el estado indicado no existe
        """
        claim_status = None
        if status_filter is not None:
            try:
                claim_status = ClaimStatus(status_filter)
            except ValueError:
                allowed = ", ".join(s.value for s in ClaimStatus)
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Estado inválido. Valores permitidos: {allowed}"
                )

        return await self.claim_repo.list_with_package(
            email=email,
            claim_type=claim_type,
            status=claim_status,
        )

    async def get_claim(self, claim_id: int) -> Claim:
        claim = await self.claim_repo.get_by_id(claim_id)
        if claim is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Reclamo no encontrado"
            )
        return claim

    async def create_claim(self, data: ClaimCreate) -> Claim:
        now = self.clock.now()
        claim = Claim(
            **data.model_dump(),
            status=ClaimStatus.PENDIENTE,
            created_at=now,
            updated_at=now,
        )
        created = await self.claim_repo.create(claim)
        await self.db.commit()
        logger.info(f"Reclamo {created.id} creado ({created.claim_type})")
        return created

    async def respond(self, claim_id: int, response: str, admin_name: str) -> Claim:
        """Guarda la respuesta del administrador y marca el reclamo como Respondido"""
        claim = await self.get_claim(claim_id)
        now = self.clock.now()

        claim.response = response
        claim.response_by = admin_name
        claim.responded_at = now
        claim.status = ClaimStatus.RESPONDIDO
        claim.updated_at = now

        await self.claim_repo.update(claim)
        await self.db.commit()
        return claim

    async def update_status(self, claim_id: int, new_status: ClaimStatus) -> Claim:
        claim = await self.get_claim(claim_id)
        claim.status = new_status
        claim.updated_at = self.clock.now()

        await self.claim_repo.update(claim)
        await self.db.commit()
        return claim


def get_claim_service(db: AsyncSession, clock: Clock) -> ClaimService:
    return ClaimService(db, clock)
