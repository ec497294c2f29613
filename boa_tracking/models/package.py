"""Modelos de paquetes y eventos de tracking"""
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from boa_tracking.core.database import Base
from boa_tracking.models.enums import PackageStatus, enum_column


class Package(Base):
    """Paquete en seguimiento activo"""
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    tracking_number = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(enum_column(PackageStatus), nullable=False, default=PackageStatus.PENDIENTE)
    location = Column(String(200), nullable=True, comment="Última ubicación conocida")

    sender_name = Column(String(200), nullable=True)
    sender_email = Column(String(200), nullable=True, index=True)
    sender_phone = Column(String(50), nullable=True)
    sender_address = Column(String(300), nullable=True)
    recipient_name = Column(String(200), nullable=True)
    recipient_email = Column(String(200), nullable=True, index=True)
    recipient_phone = Column(String(50), nullable=True)
    recipient_address = Column(String(300), nullable=True)
    user_email = Column(String(200), nullable=True, comment="Cliente dueño del pre-registro de origen")

    weight = Column(Float, nullable=True)
    cost = Column(Float, nullable=True)
    priority = Column(String(20), nullable=False, default="normal")
    origin = Column(String(200), nullable=True)
    destination = Column(String(200), nullable=True)
    estimated_delivery_date = Column(String(50), nullable=True)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False, comment="Reloj de inactividad para las alertas")

    events = relationship(
        "TrackingEvent",
        back_populates="package",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(TrackingEvent.timestamp)",
    )

    def __repr__(self):
        return f"<Package(id={self.id}, tracking_number='{self.tracking_number}', status='{self.status}')>"


class TrackingEvent(Base):
    """Historial de eventos del paquete (solo se agregan)"""
    __tablename__ = "tracking_events"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(enum_column(PackageStatus), nullable=False)
    location = Column(String(200), nullable=True)
    operator = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)
    coordinates = Column(Text, nullable=True, comment="JSON con lat/lng")
    timestamp = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    package = relationship("Package", back_populates="events")

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, package_id={self.package_id}, event_type='{self.event_type}')>"
