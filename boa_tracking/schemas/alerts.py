"""
Schemas de Alertas
Sistema BOA Tracking
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from boa_tracking.models.enums import AlertSeverity, AlertStatus


class AlertCreate(BaseModel):
    """Schema para suscribirse a alertas de un paquete"""
    user_email: str = Field(..., min_length=1, max_length=200)
    package_tracking: Optional[str] = Field(None, max_length=50)
    alert_type: str = Field(..., min_length=1, max_length=50)
    sms_enabled: bool = False
    email_enabled: bool = False
    push_enabled: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "user_email": "cliente@example.com",
                "package_tracking": "BOA-2024-0001",
                "alert_type": "status_change",
                "email_enabled": True
            }
        }


class AlertPreferencesUpdate(BaseModel):
    """Canales de notificación de la alerta"""
    sms_enabled: bool = False
    email_enabled: bool = False
    push_enabled: bool = False


class AlertResponse(BaseModel):
    """Schema de respuesta de alerta (con la descripción del paquete)"""
    id: int
    user_email: str
    package_tracking: Optional[str] = None
    alert_type: str
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[AlertSeverity] = None
    status: AlertStatus
    sms_enabled: bool
    email_enabled: bool
    push_enabled: bool
    created_at: datetime
    solved_at: Optional[datetime] = None
    package_description: Optional[str] = None

    class Config:
        from_attributes = True


class AlertCreatedResponse(BaseModel):
    id: int
    user_email: str
    alert_type: str
    message: str


class ReactivationCheckResponse(BaseModel):
    """
    Resultado de la consulta de reactivación

    lastSolvedAt y remainingHours solo se incluyen cuando aplican.
    """
    canReactivate: bool
    reason: str
    lastSolvedAt: Optional[datetime] = None
    remainingHours: Optional[int] = None


class ReactivationResponse(BaseModel):
    message: str
    alertId: int
    severity: AlertSeverity
