"""
Tests del registro de paquetes y eventos de tracking.
"""

from sqlalchemy import select

from boa_tracking.models.enums import PackageStatus, PACKAGE_TRANSITIONS, can_transition
from boa_tracking.models.package import Package, TrackingEvent

from tests.helpers import START


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_package(client, tracking_number="BOA-2024-0001", **kwargs):
    payload = {"tracking_number": tracking_number, "description": "Documentos"}
    payload.update(kwargs)
    resp = await client.post("/api/packages", json=payload)
    assert resp.status_code == 201
    return resp.json()


async def _add_event(client, event_type, location="La Paz", tracking_number="BOA-2024-0001", **kwargs):
    payload = {
        "package_tracking": tracking_number,
        "event_type": event_type,
        "location": location,
    }
    payload.update(kwargs)
    return await client.post("/api/packages/events", json=payload)


# ---------------------------------------------------------------------------
# Máquina de estados
# ---------------------------------------------------------------------------

class TestPackageTransitions:
    def test_delivered_is_terminal(self):
        for target in PackageStatus:
            assert not can_transition(PACKAGE_TRANSITIONS, PackageStatus.ENTREGADO, target)

    def test_every_status_has_an_entry(self):
        assert set(PACKAGE_TRANSITIONS) == set(PackageStatus)

    def test_repeating_status_is_allowed_until_delivery(self):
        for current in PackageStatus:
            if current != PackageStatus.ENTREGADO:
                assert can_transition(PACKAGE_TRANSITIONS, current, current)


# ---------------------------------------------------------------------------
# Paquetes
# ---------------------------------------------------------------------------

class TestPackages:
    async def test_create_with_defaults(self, client):
        body = await _create_package(client)
        assert body["tracking_number"] == "BOA-2024-0001"
        assert body["message"] == "Paquete creado exitosamente"

        detail = (await client.get("/api/packages/BOA-2024-0001")).json()
        assert detail["priority"] == "normal"
        assert detail["status"] == "pending"
        assert detail["events"] == []
        assert detail["created_at"] == START.isoformat()

    async def test_duplicate_tracking_number(self, client):
        await _create_package(client)

        resp = await client.post("/api/packages", json={"tracking_number": "BOA-2024-0001"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "El número de tracking ya existe"

    async def test_tracking_number_is_required(self, client):
        resp = await client.post("/api/packages", json={"description": "Sin tracking"})
        assert resp.status_code == 400

    async def test_list_includes_event_stats(self, client, clock):
        await _create_package(client, "BOA-2024-0001")
        clock.advance(hours=1)
        await _create_package(client, "BOA-2024-0002")
        await _add_event(client, "received", tracking_number="BOA-2024-0001")
        clock.advance(hours=1)
        await _add_event(client, "en_transito", tracking_number="BOA-2024-0001")

        packages = (await client.get("/api/packages")).json()

        # Más recientes primero
        assert [p["tracking_number"] for p in packages] == ["BOA-2024-0002", "BOA-2024-0001"]
        by_tn = {p["tracking_number"]: p for p in packages}
        assert by_tn["BOA-2024-0001"]["events_count"] == 2
        assert by_tn["BOA-2024-0001"]["last_event_time"] == "2024-05-10T11:00:00"
        assert by_tn["BOA-2024-0002"]["events_count"] == 0
        assert by_tn["BOA-2024-0002"]["last_event_time"] is None

    async def test_list_by_user_email(self, client):
        await _create_package(client, "BOA-2024-0001", sender_email="ana@example.com")
        await _create_package(client, "BOA-2024-0002", recipient_email="ana@example.com")
        await _create_package(client, "BOA-2024-0003", sender_email="otro@example.com")

        packages = (await client.get("/api/packages/user/ana@example.com")).json()
        assert sorted(p["tracking_number"] for p in packages) == ["BOA-2024-0001", "BOA-2024-0002"]

    async def test_unknown_package_returns_404(self, client):
        assert (await client.get("/api/packages/tracking/NOPE")).status_code == 404
        assert (await client.get("/api/packages/NOPE")).status_code == 404
        assert (await client.get("/api/packages/check-return/NOPE")).status_code == 404

    async def test_update_status(self, client, clock):
        created = await _create_package(client)
        clock.advance(hours=2)

        resp = await client.put(
            f"/api/packages/{created['id']}/status",
            json={"status": "received", "location": "Oficina central"}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "received"
        assert body["location"] == "Oficina central"
        assert body["updated_at"] == "2024-05-10T11:00:00"

    async def test_update_status_of_missing_package(self, client):
        resp = await client.put("/api/packages/999/status", json={"status": "received"})
        assert resp.status_code == 404

    async def test_unknown_status_is_rejected(self, client):
        created = await _create_package(client)
        resp = await client.put(f"/api/packages/{created['id']}/status", json={"status": "perdido"})
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Eventos de tracking
# ---------------------------------------------------------------------------

class TestTrackingEvents:
    async def test_event_updates_package(self, client, clock, session_factory):
        await _create_package(client)
        clock.advance(hours=3)

        resp = await _add_event(client, "en_transito", location="Cochabamba", operator="Op 1")
        assert resp.status_code == 201
        assert resp.json()["message"]
        event_id = resp.json()["eventId"]

        async with session_factory() as session:
            package = (await session.execute(
                select(Package).where(Package.tracking_number == "BOA-2024-0001")
            )).scalar_one()
            tracking_event = await session.get(TrackingEvent, event_id)

        assert package.status == PackageStatus.EN_TRANSITO
        assert package.location == "Cochabamba"
        assert package.updated_at == clock.now()
        assert tracking_event.timestamp == clock.now()
        assert tracking_event.operator == "Op 1"

    async def test_events_are_listed_newest_first(self, client, clock):
        await _create_package(client)
        await _add_event(client, "received", location="La Paz")
        clock.advance(hours=1)
        await _add_event(client, "en_transito", location="Oruro")

        detail = (await client.get("/api/packages/tracking/BOA-2024-0001")).json()
        assert [e["location"] for e in detail["events"]] == ["Oruro", "La Paz"]
        assert detail["status"] == "en_transito"

    async def test_event_requires_fields(self, client):
        await _create_package(client)
        resp = await client.post("/api/packages/events", json={
            "package_tracking": "BOA-2024-0001",
            "event_type": "received",
        })
        assert resp.status_code == 400

    async def test_event_for_missing_package(self, client):
        resp = await _add_event(client, "received", tracking_number="NOPE")
        assert resp.status_code == 404

    async def test_delivered_package_rejects_new_events(self, client):
        await _create_package(client)
        assert (await _add_event(client, "en_transito")).status_code == 201
        assert (await _add_event(client, "entregado", location="Santa Cruz")).status_code == 201

        resp = await _add_event(client, "en_transito")
        assert resp.status_code == 400

        detail = (await client.get("/api/packages/BOA-2024-0001")).json()
        assert detail["status"] == "entregado"
        assert len(detail["events"]) == 2

    async def test_update_event_stores_coordinates(self, client, clock):
        await _create_package(client)
        event_id = (await _add_event(client, "received")).json()["eventId"]
        clock.advance(minutes=30)

        resp = await client.put(f"/api/packages/events/{event_id}", json={
            "event_type": "received",
            "location": "Aeropuerto El Alto",
            "notes": "Reubicado",
            "coordinates": {"lat": -16.51, "lng": -68.19},
        })
        assert resp.status_code == 200

        event = (await client.get("/api/packages/BOA-2024-0001")).json()["events"][0]
        assert event["location"] == "Aeropuerto El Alto"
        assert event["coordinates"] == {"lat": -16.51, "lng": -68.19}
        assert event["updated_at"] == "2024-05-10T09:30:00"

    async def test_update_and_delete_missing_event(self, client):
        resp = await client.put("/api/packages/events/999", json={
            "event_type": "received",
            "location": "La Paz",
        })
        assert resp.status_code == 404
        assert (await client.delete("/api/packages/events/999")).status_code == 404

    async def test_delete_event(self, client):
        await _create_package(client)
        event_id = (await _add_event(client, "received")).json()["eventId"]

        assert (await client.delete(f"/api/packages/events/{event_id}")).status_code == 200
        detail = (await client.get("/api/packages/BOA-2024-0001")).json()
        assert detail["events"] == []


# ---------------------------------------------------------------------------
# Elegibilidad de devolución
# ---------------------------------------------------------------------------

class TestCheckReturn:
    async def test_pending_package_is_eligible(self, client):
        await _create_package(client, cost=25)

        body = (await client.get("/api/packages/check-return/BOA-2024-0001")).json()
        assert body == {
            "elegible": True,
            "tracking_number": "BOA-2024-0001",
            "status": "pending",
            "cost": 25.0,
        }

    async def test_in_transit_package_is_not_eligible(self, client):
        await _create_package(client)
        await _add_event(client, "en_transito")

        body = (await client.get("/api/packages/check-return/BOA-2024-0001")).json()
        assert body["elegible"] is False
        assert body["status"] == "en_transito"
