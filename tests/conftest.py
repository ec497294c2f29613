"""
Fixtures compartidas: base SQLite temporal, reloj fijo y cliente HTTP.
"""

from datetime import datetime, timedelta
from typing import List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient

import boa_tracking.models  # noqa: F401
from boa_tracking.core.clock import Clock
from boa_tracking.core.database import Base, build_engine, build_session_factory, get_async_db
from boa_tracking.core.dependencies import get_clock
from boa_tracking.main import app
from boa_tracking.models.enums import PackageStatus
from boa_tracking.models.package import Package
from boa_tracking.services.email_service import EmailService, get_email_service
from tests.helpers import START


class FrozenClock(Clock):
    """Reloj controlado por el test"""

    def __init__(self, current: datetime = START):
        super().__init__("America/La_Paz")
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, hours: float = 0, minutes: float = 0) -> None:
        self.current += timedelta(hours=hours, minutes=minutes)


class RecordingEmailService(EmailService):
    """Guarda los emails en lugar de enviarlos"""

    def __init__(self):
        super().__init__(api_key=None)
        self.sent: List[Tuple[str, str, str]] = []

    async def send_password_reset(self, to: str, name: str, token: str) -> bool:
        self.sent.append((to, name, token))
        return True


# ---------------------------------------------------------------------------
# Base de datos
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'boa_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Cliente HTTP
# ---------------------------------------------------------------------------

@pytest.fixture
def email_outbox():
    return RecordingEmailService()


@pytest.fixture
async def client(session_factory, clock, email_outbox):
    async def override_get_async_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_db] = override_get_async_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_email_service] = lambda: email_outbox

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Datos de prueba
# ---------------------------------------------------------------------------

@pytest.fixture
def make_package(session_factory, clock):
    """Inserta un paquete directamente en la base"""

    async def _make_package(
        tracking_number: str = "BOA-2024-0001",
        status: PackageStatus = PackageStatus.PENDIENTE,
        updated_at: datetime = None,
        **kwargs
    ) -> Package:
        now = clock.now()
        package = Package(
            tracking_number=tracking_number,
            status=status,
            created_at=updated_at or now,
            updated_at=updated_at or now,
            **kwargs
        )
        async with session_factory() as session:
            session.add(package)
            await session.commit()
            await session.refresh(package)
        return package

    return _make_package
