"""
Dependencias reutilizables para FastAPI
Sistema BOA Tracking

Proporciona:
- get_current_user: Obtiene el usuario autenticado desde el JWT
- get_clock: Reloj de negocio (re-exportado desde core.clock)
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from boa_tracking.core.clock import get_clock
from boa_tracking.core.database import get_async_db
from boa_tracking.core.security import verify_token
from boa_tracking.models.user import User
from boa_tracking.repositories.user_repository import UserRepository

# Security scheme para JWT
security = HTTPBearer(auto_error=False)

__all__ = ["get_current_user", "get_clock"]


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_async_db)
) -> User:
    """
    Obtiene el usuario actual autenticado desde el token JWT

    Raises:
        HTTPException 401: Si el token es inválido o el usuario no existe

    Ejemplo:
        @router.get("/me")
        async def me(current_user: User = Depends(get_current_user)):
            return current_user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudo validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = verify_token(credentials.credentials, token_type="access")
    if payload is None:
        raise credentials_exception

    # "sub" se guarda como string en el JWT
    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise credentials_exception

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user
