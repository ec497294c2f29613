"""
Schemas de Devoluciones
Sistema BOA Tracking
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from boa_tracking.models.enums import ReturnRequestStatus


class ReturnRequestCreate(BaseModel):
    """Schema para solicitar una devolución"""
    user_email: str = Field(..., min_length=1, max_length=200)
    tracking_number: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    reason: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "user_email": "cliente@example.com",
                "tracking_number": "BOA-2024-0001",
                "first_name": "Ana",
                "last_name": "Quispe",
                "reason": "El destinatario ya no vive en la dirección"
            }
        }


class ReturnRejectRequest(BaseModel):
    """Motivo del rechazo (obligatorio, se valida en el servicio)"""
    comment: Optional[str] = None


class ReturnRequestResponse(BaseModel):
    """Solicitud de devolución (vista de administración)"""
    id: int
    user_email: str
    package_tracking_number: str
    first_name: str
    last_name: str
    reason: str
    status: ReturnRequestStatus
    rejection_comment: Optional[str] = None
    return_tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserReturnRequestResponse(BaseModel):
    """Solicitud de devolución vista por el cliente"""
    id: int
    original_tracking_number: str
    first_name: str
    last_name: str
    reason: str
    status: ReturnRequestStatus
    rejection_comment: Optional[str] = None
    return_tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ReturnArchiveResponse(BaseModel):
    """Paquete devuelto (archivo)"""
    id: int
    original_tracking_number: str
    return_tracking_number: str
    description: Optional[str] = None
    sender_name: Optional[str] = None
    recipient_name: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    weight: Optional[float] = None
    cost: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ReturnRequestCreatedResponse(BaseModel):
    message: str
    requestId: int


class ReturnApprovalResponse(BaseModel):
    message: str
    return_tracking_number: str
