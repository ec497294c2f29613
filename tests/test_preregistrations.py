"""
Tests de pre-registros y su aprobación.
"""

import re

import pytest
from sqlalchemy import select

from boa_tracking.models.package import Package
from boa_tracking.services.preregistration_service import calculate_cost


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _payload(**kwargs):
    payload = dict(
        user_email="ana@example.com",
        description="Ropa de invierno",
        sender_name="Ana Quispe",
        sender_phone="70000000",
        sender_address="Av. Arce 123",
        sender_email="ana@example.com",
        recipient_name="Luis Mamani",
        recipient_phone="71111111",
        recipient_address="Calle Sucre 45",
        recipient_email="luis@example.com",
        weight=2.5,
        origin_city="La Paz",
        destination_city="Tarija",
        estimated_delivery_date="2024-05-15",
    )
    payload.update(kwargs)
    return payload


async def _create(client, **kwargs):
    resp = await client.post("/api/preregistrations", json=_payload(**kwargs))
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Tarifa
# ---------------------------------------------------------------------------

class TestCalculateCost:
    @pytest.mark.parametrize("weight, expected", [
        (0.5, 15),
        (1, 15),
        (1.1, 25),
        (3, 25),
        (5, 35),
        (10, 50),
        (10.2, 55),
        (11, 55),
        (12.5, 65),
    ])
    def test_tariff(self, weight, expected):
        assert calculate_cost(weight) == expected


# ---------------------------------------------------------------------------
# Creación y edición
# ---------------------------------------------------------------------------

class TestPreregistrations:
    async def test_create_assigns_provisional_number_and_cost(self, client):
        body = await _create(client)
        assert body["message"] == "Pre-registro creado exitosamente"
        assert re.fullmatch(r"PRE-20240510-\d{4}", body["preregistration_tracking_number"])

        items = (await client.get("/api/preregistrations/ana@example.com")).json()
        assert len(items) == 1
        assert items[0]["status"] == "Pendiente"
        assert items[0]["cost"] == 25.0

    async def test_create_requires_fields(self, client):
        resp = await client.post("/api/preregistrations", json={"user_email": "ana@example.com"})
        assert resp.status_code == 400

    async def test_admin_listing_filters(self, client):
        first = await _create(client, preregistration_tracking_number="PRE-AAA-1")
        await _create(client, preregistration_tracking_number="PRE-BBB-2")
        await client.post(f"/api/preregistrations/{first['preregistrationId']}/approve")

        found = (await client.get("/api/preregistrations/all?search=BBB")).json()
        assert [p["preregistration_tracking_number"] for p in found] == ["PRE-BBB-2"]

        approved = (await client.get("/api/preregistrations/all?status=Aprobado")).json()
        assert [p["id"] for p in approved] == [first["preregistrationId"]]

        pending = (await client.get("/api/preregistrations/all?status=Pendiente")).json()
        assert [p["preregistration_tracking_number"] for p in pending] == ["PRE-BBB-2"]

        assert len((await client.get("/api/preregistrations/all")).json()) == 2

    async def test_update_recomputes_cost(self, client):
        created = await _create(client)

        resp = await client.put(f"/api/preregistrations/{created['preregistrationId']}", json={
            "sender_name": "Ana Q.",
            "recipient_name": "Luis M.",
            "weight": 12.5,
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["cost"] == 65.0
        assert body["sender_name"] == "Ana Q."
        # Campos no enviados se conservan
        assert body["destination_city"] == "Tarija"

    async def test_update_requires_weight(self, client):
        created = await _create(client)
        resp = await client.put(f"/api/preregistrations/{created['preregistrationId']}", json={
            "sender_name": "Ana",
            "recipient_name": "Luis",
        })
        assert resp.status_code == 400

    async def test_update_and_delete_missing(self, client):
        resp = await client.put("/api/preregistrations/999", json={
            "sender_name": "Ana",
            "recipient_name": "Luis",
            "weight": 1,
        })
        assert resp.status_code == 404
        assert (await client.delete("/api/preregistrations/999")).status_code == 404

    async def test_delete(self, client):
        created = await _create(client)
        resp = await client.delete(f"/api/preregistrations/{created['preregistrationId']}")
        assert resp.status_code == 200
        assert (await client.get("/api/preregistrations/ana@example.com")).json() == []


# ---------------------------------------------------------------------------
# Aprobación
# ---------------------------------------------------------------------------

class TestApproval:
    async def test_approve_creates_package(self, client, session_factory, clock):
        created = await _create(client, cargo_type="Textil")
        prereg_id = created["preregistrationId"]

        resp = await client.post(f"/api/preregistrations/{prereg_id}/approve")
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Pre-registro aprobado exitosamente"
        assert body["preregistrationId"] == prereg_id
        assert re.fullmatch(r"BOA-2024-\d{4}", body["trackingNumber"])

        async with session_factory() as session:
            package = (await session.execute(
                select(Package).where(Package.tracking_number == body["trackingNumber"])
            )).scalar_one()

        assert package.id == body["packageId"]
        assert package.status.value == "En proceso"
        assert package.description == "Ropa de invierno"
        assert package.sender_name == "Ana Quispe"
        assert package.sender_phone == "70000000"
        assert package.sender_address == "Av. Arce 123"
        assert package.sender_email == "ana@example.com"
        assert package.recipient_name == "Luis Mamani"
        assert package.recipient_phone == "71111111"
        assert package.recipient_address == "Calle Sucre 45"
        assert package.recipient_email == "luis@example.com"
        assert package.weight == 2.5
        assert package.cost == 25.0
        assert package.user_email == "ana@example.com"
        assert package.origin == "La Paz"
        assert package.destination == "Tarija"
        assert package.estimated_delivery_date == "2024-05-15"
        assert package.updated_at == clock.now()

        prereg = (await client.get("/api/preregistrations/ana@example.com")).json()[0]
        assert prereg["status"] == "Aprobado"
        assert prereg["approved_tracking_number"] == body["trackingNumber"]
        assert prereg["approved_at"] == clock.now().isoformat()

    async def test_second_approval_is_rejected(self, client):
        created = await _create(client)
        prereg_id = created["preregistrationId"]
        first = await client.post(f"/api/preregistrations/{prereg_id}/approve")
        assert first.status_code == 200

        second = await client.post(f"/api/preregistrations/{prereg_id}/approve")
        assert second.status_code == 400

        packages = (await client.get("/api/packages")).json()
        assert len(packages) == 1

    async def test_approve_missing(self, client):
        resp = await client.post("/api/preregistrations/999/approve")
        assert resp.status_code == 404

    async def test_tracking_number_collisions_are_regenerated(
        self, client, make_package, monkeypatch
    ):
        await make_package("BOA-2024-1111")
        values = iter([1111, 1111, 2222])
        monkeypatch.setattr(
            "boa_tracking.services.preregistration_service.random.randint",
            lambda a, b: next(values)
        )
        created = await _create(client, preregistration_tracking_number="PRE-X")

        resp = await client.post(f"/api/preregistrations/{created['preregistrationId']}/approve")
        assert resp.json()["trackingNumber"] == "BOA-2024-2222"

    async def test_approved_preregistration_cannot_be_edited(self, client):
        created = await _create(client)
        prereg_id = created["preregistrationId"]
        await client.post(f"/api/preregistrations/{prereg_id}/approve")

        resp = await client.put(f"/api/preregistrations/{prereg_id}", json={
            "sender_name": "Ana",
            "recipient_name": "Luis",
            "weight": 1,
        })
        assert resp.status_code == 400
