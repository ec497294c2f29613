"""
Routers de la API
Sistema BOA Tracking

Este módulo centraliza todos los routers de la aplicación.
"""
from fastapi import APIRouter

# Importar routers individuales
from boa_tracking.routers import alerts, auth, claims, packages, preregistrations, returns, users

# Router principal que incluye todos los sub-routers
api_router = APIRouter()

# Incluir routers (auth antes que users para que /users/me no caiga en /users/{id})
api_router.include_router(packages.router)
api_router.include_router(alerts.router)
api_router.include_router(preregistrations.router)
api_router.include_router(returns.router)
api_router.include_router(claims.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)

# Lista de routers disponibles para importación
__all__ = ["api_router"]
