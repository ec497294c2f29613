"""
Repository de Reclamos
Sistema BOA Tracking
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from boa_tracking.models.claim import Claim
from boa_tracking.models.enums import ClaimStatus
from boa_tracking.models.package import Package


ClaimWithDescription = Tuple[Claim, Optional[str]]


class ClaimRepository:
    """Repository para operaciones CRUD de reclamos"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, claim_id: int) -> Optional[Claim]:
        result = await self.db.execute(select(Claim).where(Claim.id == claim_id))
        return result.scalar_one_or_none()

    async def list_with_package(
        self,
        email: Optional[str] = None,
        claim_type: Optional[str] = None,
        status: Optional[ClaimStatus] = None
    ) -> List[ClaimWithDescription]:
        """
        Lista reclamos con la descripción del paquete relacionado (si existe)

        Args:
            email: Filtrar por email del cliente
            claim_type: Filtrar por tipo de reclamo
            status: Filtrar por estado
        """
        query = (
            select(Claim, Package.description.label("package_description"))
            .outerjoin(Package, Claim.tracking_number == Package.tracking_number)
        )

        if email is not None:
            query = query.where(Claim.email == email)
        if claim_type is not None:
            query = query.where(Claim.claim_type == claim_type)
        if status is not None:
            query = query.where(Claim.status == status)

        query = query.order_by(Claim.created_at.desc(), Claim.id.desc())

        result = await self.db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def create(self, claim: Claim) -> Claim:
        self.db.add(claim)
        await self.db.flush()
        await self.db.refresh(claim)
        return claim

    async def update(self, claim: Claim) -> Claim:
        await self.db.flush()
        return claim


def get_claim_repository(db: AsyncSession) -> ClaimRepository:
    return ClaimRepository(db)
