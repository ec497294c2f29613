"""
Schemas de Reclamos
Sistema BOA Tracking
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from boa_tracking.models.enums import ClaimStatus


class ClaimCreate(BaseModel):
    """Schema para crear un reclamo"""
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=1, max_length=200)
    claim_type: str = Field(..., min_length=1, max_length=50, description="Tipo: demora, daño, pérdida, etc.")
    description: str = Field(..., min_length=1)
    tracking_number: Optional[str] = Field(None, max_length=50)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ana Quispe",
                "email": "ana@example.com",
                "claim_type": "demora",
                "description": "El paquete lleva una semana sin movimiento",
                "tracking_number": "BOA-2024-0001"
            }
        }


class ClaimRespondRequest(BaseModel):
    """Respuesta de un administrador a un reclamo"""
    response: str = Field(..., min_length=1)
    admin_name: str = Field(..., min_length=1, max_length=200)


class ClaimStatusUpdate(BaseModel):
    status: ClaimStatus


class ClaimResponse(BaseModel):
    """Schema de respuesta de reclamo"""
    id: int
    tracking_number: Optional[str] = None
    name: str
    email: str
    claim_type: str
    description: str
    status: ClaimStatus
    response: Optional[str] = None
    response_by: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    package_description: Optional[str] = None

    class Config:
        from_attributes = True


class ClaimCreatedResponse(BaseModel):
    message: str
    claimId: int
