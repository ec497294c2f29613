"""
Servicio de Email (Resend)
Sistema BOA Tracking

Envía el correo de recuperación de contraseña. Se ejecuta como tarea en
segundo plano: los fallos se registran en el log y no se reintentan.
"""

import logging
from typing import Optional

import httpx

from boa_tracking.core.config import settings

logger = logging.getLogger(__name__)


def build_reset_url(token: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.FRONTEND_BASE_URL).rstrip("/")
    return f"{base}/reset-password?token={token}"


def build_reset_html(name: str, reset_url: str) -> str:
    return (
        f"<h2>Hola {name},</h2>"
        "<p>Recibimos una solicitud para restablecer tu contraseña de BOA Tracking.</p>"
        f'<p><a href="{reset_url}">Restablecer contraseña</a></p>'
        "<p>El enlace expira en 1 hora. Si no solicitaste el cambio, ignora este mensaje.</p>"
    )


class EmailService:
    """Cliente mínimo de la API de Resend"""

    def __init__(
        self,
        api_key: Optional[str] = settings.RESEND_API_KEY,
        api_url: str = settings.RESEND_API_URL,
        sender: str = settings.EMAIL_FROM,
        timeout: float = 15.0
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def send_password_reset(self, to: str, name: str, token: str) -> bool:
        """
        Envía el enlace de recuperación

        Returns:
            True si Resend aceptó el mensaje
        """
        reset_url = build_reset_url(token)

        if not self.api_key:
            logger.warning(f"Resend no configurado, email de recuperación para {to} no enviado")
            return False

        payload = {
            "from": self.sender,
            "to": [to],
            "subject": "Recuperación de contraseña - BOA Tracking",
            "html": build_reset_html(name, reset_url),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.api_url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Error de red enviando email a {to}: {e}")
            return False

        if resp.status_code >= 400:
            logger.error(f"Resend rechazó el email a {to}: {resp.status_code} {resp.text}")
            return False

        logger.info(f"Email de recuperación enviado a {to}")
        return True


email_service = EmailService()


def get_email_service() -> EmailService:
    """Dependencia de FastAPI para obtener el servicio de email"""
    return email_service
