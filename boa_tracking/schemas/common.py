"""Schemas compartidos por varios routers"""
from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Respuesta genérica con un mensaje"""
    message: str
