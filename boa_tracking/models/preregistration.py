"""Modelo de pre-registros de envío"""
from sqlalchemy import Column, Integer, String, Text, Float, DateTime
from boa_tracking.core.database import Base
from boa_tracking.models.enums import PreregistrationStatus, enum_column


class Preregistration(Base):
    """Solicitud de envío del cliente pendiente de aprobación"""
    __tablename__ = "preregistrations"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String(200), nullable=False, index=True)
    preregistration_tracking_number = Column(String(50), nullable=True, index=True, comment="Número provisional")

    sender_name = Column(String(200), nullable=False)
    sender_phone = Column(String(50), nullable=True)
    sender_address = Column(String(300), nullable=True)
    sender_email = Column(String(200), nullable=True)
    recipient_name = Column(String(200), nullable=False)
    recipient_phone = Column(String(50), nullable=True)
    recipient_address = Column(String(300), nullable=True)
    recipient_email = Column(String(200), nullable=True)

    weight = Column(Float, nullable=True)
    cargo_type = Column(String(100), nullable=True)
    origin_city = Column(String(200), nullable=True)
    destination_city = Column(String(200), nullable=True)
    description = Column(Text, nullable=False)
    priority = Column(String(20), nullable=True)
    shipping_type = Column(String(50), nullable=True)
    cost = Column(Float, nullable=True)
    estimated_delivery_date = Column(String(50), nullable=True)

    status = Column(enum_column(PreregistrationStatus), nullable=False, default=PreregistrationStatus.PENDIENTE)
    approved_at = Column(DateTime, nullable=True)
    approved_tracking_number = Column(String(50), nullable=True, comment="Tracking del paquete generado")
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Preregistration(id={self.id}, status='{self.status}')>"
