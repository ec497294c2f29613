"""
Tests del flujo de devoluciones.
"""

from sqlalchemy import delete, select

from boa_tracking.models.enums import PackageStatus
from boa_tracking.models.package import Package, TrackingEvent
from boa_tracking.models.return_request import ReturnArchive

from tests.helpers import START


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _request_payload(tracking_number="BOA-2024-0001", **kwargs):
    payload = dict(
        user_email="ana@example.com",
        tracking_number=tracking_number,
        first_name="Ana",
        last_name="Quispe",
        reason="Dirección incorrecta",
    )
    payload.update(kwargs)
    return payload


async def _request_return(client, tracking_number="BOA-2024-0001"):
    resp = await client.post("/api/returns/request", json=_request_payload(tracking_number))
    assert resp.status_code == 201
    return resp.json()["requestId"]


# ---------------------------------------------------------------------------
# Solicitud
# ---------------------------------------------------------------------------

class TestReturnRequest:
    async def test_request_for_received_package(self, client, make_package):
        await make_package(status=PackageStatus.RECIBIDO)

        resp = await client.post("/api/returns/request", json=_request_payload())
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Solicitud de devolución enviada con éxito."
        assert isinstance(body["requestId"], int)

    async def test_all_fields_are_required(self, client, make_package):
        await make_package()
        payload = _request_payload()
        del payload["reason"]

        resp = await client.post("/api/returns/request", json=payload)
        assert resp.status_code == 400

    async def test_missing_package(self, client):
        resp = await client.post("/api/returns/request", json=_request_payload("NOPE"))
        assert resp.status_code == 404

    async def test_ineligible_status(self, client, make_package):
        await make_package(status=PackageStatus.EN_TRANSITO)

        resp = await client.post("/api/returns/request", json=_request_payload())
        assert resp.status_code == 400
        assert resp.json()["detail"] == (
            "No se puede solicitar la devolución. Estado actual: en_transito."
        )

    async def test_user_listing_uses_original_tracking_number(self, client, make_package):
        await make_package()
        await _request_return(client)

        items = (await client.get("/api/returns/user/ana@example.com")).json()
        assert len(items) == 1
        assert items[0]["original_tracking_number"] == "BOA-2024-0001"
        assert items[0]["status"] == "pending"
        assert "package_tracking_number" not in items[0]

    async def test_admin_listing_with_status_filter(self, client, make_package):
        await make_package("BOA-2024-0001")
        await make_package("BOA-2024-0002")
        first = await _request_return(client, "BOA-2024-0001")
        await _request_return(client, "BOA-2024-0002")
        await client.put(f"/api/returns/requests/{first}/reject", json={"comment": "No procede"})

        pending = (await client.get("/api/returns/requests?status=pending")).json()
        assert [r["package_tracking_number"] for r in pending] == ["BOA-2024-0002"]
        assert len((await client.get("/api/returns/requests")).json()) == 2


# ---------------------------------------------------------------------------
# Aprobación
# ---------------------------------------------------------------------------

class TestApproveReturn:
    async def test_approve_archives_and_removes_package(
        self, client, clock, make_package, session_factory
    ):
        package = await make_package(
            description="Libros",
            sender_name="Ana",
            recipient_name="Luis",
            origin="La Paz",
            destination="Sucre",
            weight=4.0,
            cost=35.0,
        )
        async with session_factory() as session:
            session.add(TrackingEvent(
                package_id=package.id,
                event_type=PackageStatus.PENDIENTE,
                location="La Paz",
                timestamp=START,
                updated_at=START,
            ))
            await session.commit()
        request_id = await _request_return(client)

        resp = await client.put(f"/api/returns/requests/{request_id}/approve")
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Devolución aprobada con éxito."
        expected_rtn = f"RTN-{clock.timestamp_ms()}"
        assert body["return_tracking_number"] == expected_rtn

        async with session_factory() as session:
            remaining = (await session.execute(select(Package))).scalars().all()
            events = (await session.execute(select(TrackingEvent))).scalars().all()
            archive = (await session.execute(select(ReturnArchive))).scalar_one()

        assert remaining == []
        assert events == []
        assert archive.original_tracking_number == "BOA-2024-0001"
        assert archive.return_tracking_number == expected_rtn
        assert archive.description == "Libros"
        assert archive.sender_name == "Ana"
        assert archive.recipient_name == "Luis"
        assert archive.origin == "La Paz"
        assert archive.destination == "Sucre"
        assert archive.weight == 4.0
        assert archive.cost == 35.0

        requests = (await client.get("/api/returns/requests")).json()
        assert requests[0]["status"] == "approved"
        assert requests[0]["return_tracking_number"] == expected_rtn

        archived = (await client.get("/api/returns")).json()
        assert [a["original_tracking_number"] for a in archived] == ["BOA-2024-0001"]

    async def test_approve_twice(self, client, make_package):
        await make_package()
        request_id = await _request_return(client)
        assert (await client.put(f"/api/returns/requests/{request_id}/approve")).status_code == 200

        resp = await client.put(f"/api/returns/requests/{request_id}/approve")
        assert resp.status_code == 400

    async def test_approve_missing_request(self, client):
        resp = await client.put("/api/returns/requests/999/approve")
        assert resp.status_code == 404

    async def test_approve_when_package_is_gone(self, client, make_package, session_factory):
        await make_package()
        request_id = await _request_return(client)
        async with session_factory() as session:
            await session.execute(delete(Package))
            await session.commit()

        resp = await client.put(f"/api/returns/requests/{request_id}/approve")
        assert resp.status_code == 404
        requests = (await client.get("/api/returns/requests")).json()
        assert requests[0]["status"] == "pending"


# ---------------------------------------------------------------------------
# Rechazo
# ---------------------------------------------------------------------------

class TestRejectReturn:
    async def test_reject_with_comment(self, client, make_package):
        await make_package()
        request_id = await _request_return(client)

        resp = await client.put(
            f"/api/returns/requests/{request_id}/reject",
            json={"comment": "Fuera de plazo"}
        )
        assert resp.status_code == 200

        request = (await client.get("/api/returns/requests")).json()[0]
        assert request["status"] == "rejected"
        assert request["rejection_comment"] == "Fuera de plazo"
        # El paquete sigue en seguimiento
        assert (await client.get("/api/packages/BOA-2024-0001")).status_code == 200

    async def test_reject_requires_comment(self, client, make_package):
        await make_package()
        request_id = await _request_return(client)

        for payload in ({}, {"comment": ""}, {"comment": "   "}):
            resp = await client.put(f"/api/returns/requests/{request_id}/reject", json=payload)
            assert resp.status_code == 400
            assert resp.json()["detail"] == "El motivo del rechazo es requerido."

        request = (await client.get("/api/returns/requests")).json()[0]
        assert request["status"] == "pending"
        assert request["rejection_comment"] is None

    async def test_reject_missing_request(self, client):
        resp = await client.put("/api/returns/requests/999/reject", json={"comment": "x"})
        assert resp.status_code == 404

    async def test_rejected_request_cannot_be_approved(self, client, make_package):
        await make_package()
        request_id = await _request_return(client)
        await client.put(f"/api/returns/requests/{request_id}/reject", json={"comment": "No"})

        resp = await client.put(f"/api/returns/requests/{request_id}/approve")
        assert resp.status_code == 400
        assert (await client.get("/api/packages/BOA-2024-0001")).status_code == 200
