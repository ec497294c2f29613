"""
Reloj de negocio
Sistema BOA Tracking

Todas las fechas se guardan como hora local (naive) de la zona configurada.
Los servicios reciben el reloj como parámetro para que los tests puedan fijarlo.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from boa_tracking.core.config import settings

SECONDS_PER_HOUR = 3600.0


class Clock:
    """Reloj ligado a una zona horaria"""

    def __init__(self, timezone: str = "America/La_Paz"):
        self.timezone = ZoneInfo(timezone)

    def now(self) -> datetime:
        """Hora local actual, sin tzinfo"""
        return datetime.now(self.timezone).replace(tzinfo=None)

    def to_local(self, value: Optional[datetime]) -> Optional[datetime]:
        """Convierte una fecha con zona a hora local naive; las naive se dejan igual"""
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(self.timezone).replace(tzinfo=None)

    def timestamp_ms(self) -> int:
        """Milisegundos desde epoch para la hora actual del reloj"""
        return int(self.now().replace(tzinfo=self.timezone).timestamp() * 1000)


def hours_between(later: datetime, earlier: datetime) -> float:
    """Horas (fraccionarias) transcurridas entre dos fechas"""
    return (later - earlier).total_seconds() / SECONDS_PER_HOUR


clock = Clock(settings.TIMEZONE)


def get_clock() -> Clock:
    """Dependencia de FastAPI para obtener el reloj"""
    return clock
