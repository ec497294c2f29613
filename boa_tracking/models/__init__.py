"""Modelos ORM (importarlos aquí los registra en Base.metadata)"""
from boa_tracking.models.package import Package, TrackingEvent
from boa_tracking.models.alert import Alert
from boa_tracking.models.preregistration import Preregistration
from boa_tracking.models.return_request import ReturnRequest, ReturnArchive
from boa_tracking.models.claim import Claim
from boa_tracking.models.user import User

__all__ = [
    "Package",
    "TrackingEvent",
    "Alert",
    "Preregistration",
    "ReturnRequest",
    "ReturnArchive",
    "Claim",
    "User",
]
