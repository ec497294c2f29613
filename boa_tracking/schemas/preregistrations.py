"""
Schemas de Pre-registros
Sistema BOA Tracking
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from boa_tracking.models.enums import PreregistrationStatus


class PreregistrationFields(BaseModel):
    """Campos opcionales comunes a creación y edición"""
    sender_phone: Optional[str] = Field(None, max_length=50)
    sender_address: Optional[str] = Field(None, max_length=300)
    sender_email: Optional[str] = Field(None, max_length=200)
    recipient_phone: Optional[str] = Field(None, max_length=50)
    recipient_address: Optional[str] = Field(None, max_length=300)
    recipient_email: Optional[str] = Field(None, max_length=200)
    cargo_type: Optional[str] = Field(None, max_length=100)
    origin_city: Optional[str] = Field(None, max_length=200)
    destination_city: Optional[str] = Field(None, max_length=200)
    priority: Optional[str] = Field(None, max_length=20)
    shipping_type: Optional[str] = Field(None, max_length=50)
    estimated_delivery_date: Optional[str] = Field(None, max_length=50)


class PreregistrationCreate(PreregistrationFields):
    """Schema para crear un pre-registro"""
    user_email: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    sender_name: str = Field(..., min_length=1, max_length=200)
    recipient_name: str = Field(..., min_length=1, max_length=200)
    weight: Optional[float] = Field(None, gt=0, description="Peso en kg")
    cost: Optional[float] = Field(None, ge=0, description="Si no se indica, se calcula con la tarifa")
    preregistration_tracking_number: Optional[str] = Field(None, max_length=50)

    class Config:
        json_schema_extra = {
            "example": {
                "user_email": "cliente@example.com",
                "description": "Ropa",
                "sender_name": "Ana Quispe",
                "sender_phone": "70000000",
                "recipient_name": "Luis Mamani",
                "recipient_phone": "71111111",
                "weight": 2.5,
                "origin_city": "La Paz",
                "destination_city": "Tarija"
            }
        }


class PreregistrationUpdate(PreregistrationFields):
    """Schema para editar un pre-registro (el costo se recalcula)"""
    sender_name: str = Field(..., min_length=1, max_length=200)
    recipient_name: str = Field(..., min_length=1, max_length=200)
    weight: float = Field(..., gt=0, description="Peso en kg")
    description: Optional[str] = None


class PreregistrationResponse(BaseModel):
    """Schema de respuesta de pre-registro"""
    id: int
    user_email: str
    preregistration_tracking_number: Optional[str] = None
    sender_name: str
    sender_phone: Optional[str] = None
    sender_address: Optional[str] = None
    sender_email: Optional[str] = None
    recipient_name: str
    recipient_phone: Optional[str] = None
    recipient_address: Optional[str] = None
    recipient_email: Optional[str] = None
    weight: Optional[float] = None
    cargo_type: Optional[str] = None
    origin_city: Optional[str] = None
    destination_city: Optional[str] = None
    description: str
    priority: Optional[str] = None
    shipping_type: Optional[str] = None
    cost: Optional[float] = None
    estimated_delivery_date: Optional[str] = None
    status: PreregistrationStatus
    approved_at: Optional[datetime] = None
    approved_tracking_number: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PreregistrationCreatedResponse(BaseModel):
    message: str
    preregistrationId: int
    preregistration_tracking_number: str


class ApprovalResponse(BaseModel):
    """Resultado de aprobar un pre-registro"""
    message: str
    trackingNumber: str
    packageId: int
    preregistrationId: int

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Pre-registro aprobado exitosamente",
                "trackingNumber": "BOA-2024-4821",
                "packageId": 12,
                "preregistrationId": 7
            }
        }
