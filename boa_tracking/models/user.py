"""Modelo de usuarios"""
from sqlalchemy import Column, Integer, String, DateTime
from boa_tracking.core.database import Base


class User(Base):
    """Usuarios del sistema (clientes y administradores)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False, comment="Hash bcrypt")
    role = Column(String(50), nullable=False, default="public")
    reset_token = Column(String(64), nullable=True, index=True)
    reset_token_expiry = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
