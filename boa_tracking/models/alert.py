"""Modelo de alertas (suscripciones de clientes y monitoreo interno)"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index, text
from boa_tracking.core.database import Base
from boa_tracking.models.enums import AlertStatus, AlertSeverity, enum_column


class Alert(Base):
    """Alertas de paquetes"""
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String(200), nullable=False, index=True, comment="'system' para alertas automáticas")
    package_tracking = Column(String(50), nullable=True, index=True, comment="tracking_number del paquete")
    alert_type = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    severity = Column(enum_column(AlertSeverity), nullable=True)
    status = Column(enum_column(AlertStatus), nullable=False, default=AlertStatus.ACTIVE)
    sms_enabled = Column(Boolean, nullable=False, default=False)
    email_enabled = Column(Boolean, nullable=False, default=False)
    push_enabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, index=True)
    solved_at = Column(DateTime, nullable=True)

    __table_args__ = (
        # Como máximo una alerta de monitoreo activa por paquete
        Index(
            "uq_alerts_active_monitoring",
            "package_tracking",
            unique=True,
            sqlite_where=text("alert_type = 'internal_monitoring' AND status = 'active'"),
            postgresql_where=text("alert_type = 'internal_monitoring' AND status = 'active'"),
        ),
    )

    def __repr__(self):
        return f"<Alert(id={self.id}, package_tracking='{self.package_tracking}', status='{self.status}')>"
