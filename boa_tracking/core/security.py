"""
Módulo de seguridad - JWT, Hashing y tokens de recuperación
Sistema BOA Tracking

Proporciona funciones para:
- Hashing y verificación de contraseñas con bcrypt
- Generación y verificación de tokens JWT de acceso
- Generación de tokens de recuperación de contraseña
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from boa_tracking.core.config import settings


# =============================================================================
# CONFIGURACIÓN DE HASHING
# =============================================================================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# =============================================================================
# FUNCIONES DE HASHING DE CONTRASEÑAS
# =============================================================================

def hash_password(password: str) -> str:
    """Genera un hash seguro de una contraseña usando bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica si una contraseña coincide con su hash"""
    return pwd_context.verify(plain_password, hashed_password)


# =============================================================================
# FUNCIONES DE TOKENS JWT
# =============================================================================

def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """Crea un token JWT de acceso"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_token(
    token: str,
    token_type: str = "access"
) -> Optional[Dict[str, Any]]:
    """
    Verifica y decodifica un token JWT

    Returns:
        Dict con el payload si el token es válido, None si es inválido
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        if payload.get("type") != token_type:
            return None

        return payload

    except JWTError:
        return None


# =============================================================================
# RECUPERACIÓN DE CONTRASEÑA
# =============================================================================

def generate_reset_token() -> str:
    """Token aleatorio de 64 caracteres hexadecimales"""
    return secrets.token_hex(32)


def validate_password_strength(password: str) -> tuple[bool, Optional[str]]:
    """
    Valida la longitud mínima de una contraseña

    Returns:
        (es_válida, mensaje_de_error)
    """
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        return False, (
            f"La contraseña debe tener al menos "
            f"{settings.MIN_PASSWORD_LENGTH} caracteres"
        )

    return True, None
