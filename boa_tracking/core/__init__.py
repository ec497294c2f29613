"""Core module"""
from boa_tracking.core.config import settings
from boa_tracking.core.clock import Clock, get_clock, hours_between
from boa_tracking.core.database import Base, get_async_db
from boa_tracking.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    verify_token,
    generate_reset_token,
)

__all__ = [
    "settings",
    "Clock",
    "get_clock",
    "hours_between",
    "Base",
    "get_async_db",
    "hash_password",
    "verify_password",
    "create_access_token",
    "verify_token",
    "generate_reset_token",
]
