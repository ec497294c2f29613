"""
Configuración de la aplicación
Sistema BOA Tracking

Todas las opciones se leen de variables de entorno o de un archivo .env.
"""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """Opciones de configuración de BOA Tracking"""

    # App
    APP_NAME: str = "BOA Tracking API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Base de datos
    DATABASE_URL: str = f"sqlite+aiosqlite:///{PROJECT_ROOT / 'boa.db'}"
    DATABASE_ECHO: bool = False

    # Zona horaria de negocio (Bolivia)
    TIMEZONE: str = "America/La_Paz"

    # JWT
    SECRET_KEY: str = "changeme_minimum_32_chars_here_please"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120

    # Recuperación de contraseña
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    MIN_PASSWORD_LENGTH: int = 6

    # Monitoreo de paquetes retrasados
    ALERT_SWEEP_ENABLED: bool = True
    ALERT_SWEEP_INTERVAL_MINUTES: float = 30.0
    # None: una alerta solucionada nunca se vuelve a crear automáticamente
    ALERT_SWEEP_COOLDOWN_HOURS: Optional[float] = None
    ALERT_REACTIVATION_HOURS: float = 24.0

    # Números de tracking
    TRACKING_PREFIX: str = "BOA"
    PREREGISTRATION_PREFIX: str = "PRE"
    RETURN_PREFIX: str = "RTN"

    # Email (Resend)
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "BOA Tracking <onboarding@resend.dev>"
    FRONTEND_BASE_URL: str = "http://localhost:3000"

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
