"""
Schemas de Paquetes
Sistema BOA Tracking

Schemas de validación para:
- Crear paquetes y cambiar su estado
- Registrar y editar eventos de tracking
- Respuestas con historial y estadísticas de eventos
"""

import json
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List, Any

from boa_tracking.models.enums import PackageStatus


# =============================================================================
# SCHEMAS DE CREACIÓN
# =============================================================================

class PackageCreate(BaseModel):
    """Schema para crear un paquete"""
    tracking_number: str = Field(..., min_length=1, max_length=50, description="Número de tracking")
    description: Optional[str] = None
    status: PackageStatus = Field(default=PackageStatus.PENDIENTE)
    location: Optional[str] = Field(None, max_length=200)
    sender_name: Optional[str] = Field(None, max_length=200)
    sender_email: Optional[str] = Field(None, max_length=200)
    sender_phone: Optional[str] = Field(None, max_length=50)
    sender_address: Optional[str] = Field(None, max_length=300)
    recipient_name: Optional[str] = Field(None, max_length=200)
    recipient_email: Optional[str] = Field(None, max_length=200)
    recipient_phone: Optional[str] = Field(None, max_length=50)
    recipient_address: Optional[str] = Field(None, max_length=300)
    weight: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    priority: str = Field(default="normal", max_length=20)
    origin: Optional[str] = Field(None, max_length=200)
    destination: Optional[str] = Field(None, max_length=200)
    estimated_delivery_date: Optional[str] = Field(None, max_length=50)

    class Config:
        json_schema_extra = {
            "example": {
                "tracking_number": "BOA-2024-0001",
                "description": "Documentos",
                "location": "La Paz",
                "sender_name": "Ana Quispe",
                "sender_email": "ana@example.com",
                "recipient_name": "Luis Mamani",
                "recipient_email": "luis@example.com",
                "weight": 1.5,
                "cost": 25,
                "origin": "La Paz",
                "destination": "Santa Cruz"
            }
        }


class PackageStatusUpdate(BaseModel):
    """Schema para cambiar el estado de un paquete"""
    status: PackageStatus
    location: Optional[str] = Field(None, max_length=200)


class TrackingEventCreate(BaseModel):
    """Schema para registrar un evento de tracking"""
    package_tracking: str = Field(..., min_length=1, description="Número de tracking del paquete")
    event_type: PackageStatus = Field(..., description="Nuevo estado del paquete")
    location: str = Field(..., min_length=1, max_length=200)
    operator: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    coordinates: Optional[Any] = Field(None, description="Objeto JSON, p. ej. {\"lat\": -16.5, \"lng\": -68.15}")
    timestamp: Optional[datetime] = Field(None, description="Por defecto, la hora actual")

    class Config:
        json_schema_extra = {
            "example": {
                "package_tracking": "BOA-2024-0001",
                "event_type": "en_transito",
                "location": "Cochabamba",
                "operator": "Operador 1",
                "notes": "Salida del centro de distribución"
            }
        }


class TrackingEventUpdate(BaseModel):
    """Schema para editar un evento de tracking"""
    event_type: PackageStatus
    location: str = Field(..., min_length=1, max_length=200)
    operator: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    coordinates: Optional[Any] = None


# =============================================================================
# SCHEMAS DE RESPUESTA
# =============================================================================

class TrackingEventResponse(BaseModel):
    """Evento de tracking"""
    id: int
    package_id: int
    event_type: PackageStatus
    location: Optional[str] = None
    operator: Optional[str] = None
    notes: Optional[str] = None
    coordinates: Optional[Any] = None
    timestamp: datetime
    updated_at: datetime

    @field_validator("coordinates", mode="before")
    @classmethod
    def parse_coordinates(cls, value):
        # Se guardan como texto JSON
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value

    class Config:
        from_attributes = True


class PackageResponse(BaseModel):
    """Schema de respuesta de paquete"""
    id: int
    tracking_number: str
    description: Optional[str] = None
    status: PackageStatus
    location: Optional[str] = None
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    sender_phone: Optional[str] = None
    sender_address: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_phone: Optional[str] = None
    recipient_address: Optional[str] = None
    user_email: Optional[str] = None
    weight: Optional[float] = None
    cost: Optional[float] = None
    priority: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    estimated_delivery_date: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PackageSummaryResponse(PackageResponse):
    """Paquete con estadísticas de sus eventos"""
    events_count: int = 0
    last_event_time: Optional[datetime] = None


class PackageDetailResponse(PackageResponse):
    """Paquete con su historial de eventos (más reciente primero)"""
    events: List[TrackingEventResponse] = []


class PackageCreatedResponse(BaseModel):
    id: int
    tracking_number: str
    message: str


class ReturnEligibilityResponse(BaseModel):
    """Resultado de la verificación de devolución"""
    elegible: bool
    tracking_number: str
    status: PackageStatus
    cost: Optional[float] = None


class EventCreatedResponse(BaseModel):
    message: str
    eventId: int
