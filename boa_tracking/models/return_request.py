"""Modelos de devoluciones"""
from sqlalchemy import Column, Integer, String, Text, Float, DateTime
from boa_tracking.core.database import Base
from boa_tracking.models.enums import ReturnRequestStatus, enum_column


class ReturnRequest(Base):
    """Solicitud de devolución creada por un cliente"""
    __tablename__ = "return_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String(200), nullable=False, index=True)
    package_tracking_number = Column(String(50), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(enum_column(ReturnRequestStatus), nullable=False, default=ReturnRequestStatus.PENDING)
    rejection_comment = Column(Text, nullable=True)
    return_tracking_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ReturnRequest(id={self.id}, tracking='{self.package_tracking_number}', status='{self.status}')>"


class ReturnArchive(Base):
    """Copia del paquete retirado del seguimiento al aprobar su devolución"""
    __tablename__ = "returns"

    id = Column(Integer, primary_key=True, index=True)
    original_tracking_number = Column(String(50), nullable=False, index=True)
    return_tracking_number = Column(String(50), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    sender_name = Column(String(200), nullable=True)
    recipient_name = Column(String(200), nullable=True)
    origin = Column(String(200), nullable=True)
    destination = Column(String(200), nullable=True)
    weight = Column(Float, nullable=True)
    cost = Column(Float, nullable=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ReturnArchive(id={self.id}, original='{self.original_tracking_number}')>"
