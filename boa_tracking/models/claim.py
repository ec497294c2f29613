"""Modelo de reclamos"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from boa_tracking.core.database import Base
from boa_tracking.models.enums import ClaimStatus, enum_column


class Claim(Base):
    """Reclamos de clientes sobre un envío"""
    __tablename__ = "claims"

    id = Column(Integer, primary_key=True, index=True)
    tracking_number = Column(String(50), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, index=True)
    claim_type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    status = Column(enum_column(ClaimStatus), nullable=False, default=ClaimStatus.PENDIENTE)
    response = Column(Text, nullable=True)
    response_by = Column(String(200), nullable=True, comment="Administrador que respondió")
    responded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Claim(id={self.id}, claim_type='{self.claim_type}', status='{self.status}')>"
