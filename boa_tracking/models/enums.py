"""
Estados del sistema y sus transiciones válidas
Sistema BOA Tracking
"""
import enum
from typing import Dict, FrozenSet

from sqlalchemy import Enum as SQLEnum


class PackageStatus(str, enum.Enum):
    """Estados de un paquete (también usados como tipo de evento de tracking)"""
    PENDIENTE = "pending"
    RECIBIDO = "received"
    EN_PROCESO = "En proceso"
    REGISTRADO = "registrado"
    EN_TRANSITO = "en_transito"
    RETRASADO = "retrasado"
    ENTREGADO = "entregado"


class PreregistrationStatus(str, enum.Enum):
    PENDIENTE = "Pendiente"
    APROBADO = "Aprobado"


class ReturnRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AlertStatus(str, enum.Enum):
    ACTIVE = "active"
    SOLVED = "solved"


class AlertSeverity(str, enum.Enum):
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ClaimStatus(str, enum.Enum):
    PENDIENTE = "Pendiente"
    EN_REVISION = "En revisión"
    RESPONDIDO = "Respondido"
    CERRADO = "Cerrado"


INTERNAL_MONITORING = "internal_monitoring"
SYSTEM_USER = "system"

# Estados desde los que se puede solicitar una devolución
RETURN_ELIGIBLE_STATUSES: FrozenSet[PackageStatus] = frozenset({
    PackageStatus.RECIBIDO,
    PackageStatus.PENDIENTE,
})


# ── Máquina de estados de paquetes ───────────────────────────────────────────
# Repetir el estado actual es válido (nuevo escaneo en otra ubicación).
PACKAGE_TRANSITIONS: Dict[PackageStatus, FrozenSet[PackageStatus]] = {
    PackageStatus.PENDIENTE: frozenset({
        PackageStatus.PENDIENTE,
        PackageStatus.RECIBIDO,
        PackageStatus.EN_PROCESO,
        PackageStatus.REGISTRADO,
        PackageStatus.EN_TRANSITO,
        PackageStatus.RETRASADO,
    }),
    PackageStatus.RECIBIDO: frozenset({
        PackageStatus.RECIBIDO,
        PackageStatus.EN_PROCESO,
        PackageStatus.REGISTRADO,
        PackageStatus.EN_TRANSITO,
        PackageStatus.RETRASADO,
    }),
    PackageStatus.EN_PROCESO: frozenset({
        PackageStatus.EN_PROCESO,
        PackageStatus.REGISTRADO,
        PackageStatus.EN_TRANSITO,
        PackageStatus.RETRASADO,
        PackageStatus.ENTREGADO,
    }),
    PackageStatus.REGISTRADO: frozenset({
        PackageStatus.REGISTRADO,
        PackageStatus.EN_TRANSITO,
        PackageStatus.RETRASADO,
        PackageStatus.ENTREGADO,
    }),
    PackageStatus.EN_TRANSITO: frozenset({
        PackageStatus.EN_TRANSITO,
        PackageStatus.RETRASADO,
        PackageStatus.ENTREGADO,
    }),
    PackageStatus.RETRASADO: frozenset({
        PackageStatus.RETRASADO,
        PackageStatus.EN_TRANSITO,
        PackageStatus.ENTREGADO,
    }),
    # Estado terminal
    PackageStatus.ENTREGADO: frozenset(),
}

PREREGISTRATION_TRANSITIONS: Dict[PreregistrationStatus, FrozenSet[PreregistrationStatus]] = {
    PreregistrationStatus.PENDIENTE: frozenset({PreregistrationStatus.APROBADO}),
    PreregistrationStatus.APROBADO: frozenset(),
}

RETURN_REQUEST_TRANSITIONS: Dict[ReturnRequestStatus, FrozenSet[ReturnRequestStatus]] = {
    ReturnRequestStatus.PENDING: frozenset({
        ReturnRequestStatus.APPROVED,
        ReturnRequestStatus.REJECTED,
    }),
    ReturnRequestStatus.APPROVED: frozenset(),
    ReturnRequestStatus.REJECTED: frozenset(),
}


def can_transition(transitions: Dict, current, target) -> bool:
    """Indica si el paso current -> target está permitido en la tabla dada"""
    return target in transitions.get(current, frozenset())


def enum_column(enum_cls):
    """Columna que guarda el valor (no el nombre) del enum"""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
        validate_strings=True,
    )
