"""
Aplicación principal
Sistema BOA Tracking

Backend de seguimiento de paquetes: registro y eventos de tracking,
pre-registros, devoluciones, reclamos, usuarios y monitoreo de retrasos.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from boa_tracking.core.clock import clock
from boa_tracking.core.config import settings
from boa_tracking.core.database import AsyncSessionLocal, create_tables, dispose_engine
from boa_tracking.routers import api_router
from boa_tracking.services.alert_sweeper import AlertSweeper

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await create_tables()

    sweeper = AlertSweeper(AsyncSessionLocal, clock)
    app.state.sweeper = sweeper
    if settings.ALERT_SWEEP_ENABLED:
        sweeper.start()

    logger.info(f"{settings.APP_NAME} iniciada (zona horaria {settings.TIMEZONE})")
    yield

    # Shutdown
    await sweeper.stop()
    await dispose_engine()
    logger.info(f"{settings.APP_NAME} detenida")


app = FastAPI(
    title=settings.APP_NAME,
    description="Seguimiento de paquetes BOA: tracking, pre-registros, devoluciones y reclamos",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# MANEJO DE ERRORES
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Datos faltantes o inválidos: 400"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Error de base de datos en {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": f"{settings.APP_NAME} funcionando",
        "version": settings.APP_VERSION,
        "endpoints": {
            "packages": "/api/packages",
            "alerts": "/api/alerts",
            "preregistrations": "/api/preregistrations",
            "returns": "/api/returns",
            "claims": "/api/claims",
            "users": "/api/users",
            "docs": "/docs",
        },
    }


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "app": "boa-tracking", "version": settings.APP_VERSION}
