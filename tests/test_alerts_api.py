"""
Tests de los endpoints de alertas y de la reactivación del monitoreo.
"""

from boa_tracking.models.alert import Alert
from boa_tracking.models.enums import AlertStatus, INTERNAL_MONITORING

from tests.helpers import START


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _monitoring_alert(client, tracking_number="BOA-2024-0001"):
    resp = await client.post("/api/alerts", json={
        "user_email": "system",
        "package_tracking": tracking_number,
        "alert_type": "internal_monitoring",
    })
    assert resp.status_code == 201
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

class TestAlertsCrud:
    async def test_create_and_list_with_package_description(self, client, make_package):
        await make_package("BOA-2024-0001", description="Documentos")

        resp = await client.post("/api/alerts", json={
            "user_email": "ana@example.com",
            "package_tracking": "BOA-2024-0001",
            "alert_type": "status_change",
            "email_enabled": True,
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["user_email"] == "ana@example.com"
        assert body["alert_type"] == "status_change"
        assert body["message"]

        resp = await client.get("/api/alerts/user/ana@example.com")
        alerts = resp.json()
        assert len(alerts) == 1
        assert alerts[0]["package_description"] == "Documentos"
        assert alerts[0]["email_enabled"] is True
        assert alerts[0]["status"] == "active"

    async def test_create_requires_user_email_and_type(self, client):
        resp = await client.post("/api/alerts", json={"package_tracking": "BOA-2024-0001"})
        assert resp.status_code == 400

    async def test_duplicate_active_monitoring_alert_is_rejected(self, client):
        await _monitoring_alert(client)

        resp = await client.post("/api/alerts", json={
            "user_email": "system",
            "package_tracking": "BOA-2024-0001",
            "alert_type": "internal_monitoring",
        })
        assert resp.status_code == 400

    async def test_monitoring_alert_waits_after_solution(self, client, clock):
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")
        clock.advance(hours=1)
        payload = {
            "user_email": "system",
            "package_tracking": "BOA-2024-0001",
            "alert_type": "internal_monitoring",
        }

        resp = await client.post("/api/alerts", json=payload)
        assert resp.status_code == 400
        assert "23 horas restantes" in resp.json()["detail"]
        assert len((await client.get("/api/alerts")).json()) == 1

        clock.advance(hours=23)
        resp = await client.post("/api/alerts", json=payload)
        assert resp.status_code == 201

    async def test_other_alert_types_ignore_waiting_period(self, client):
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")

        resp = await client.post("/api/alerts", json={
            "user_email": "ana@example.com",
            "package_tracking": "BOA-2024-0001",
            "alert_type": "status_change",
        })
        assert resp.status_code == 201

    async def test_update_preferences(self, client):
        alert_id = await _monitoring_alert(client)

        resp = await client.put(f"/api/alerts/{alert_id}", json={
            "sms_enabled": True,
            "email_enabled": False,
            "push_enabled": True,
        })
        assert resp.status_code == 200

        alerts = (await client.get("/api/alerts")).json()
        assert alerts[0]["sms_enabled"] is True
        assert alerts[0]["push_enabled"] is True

    async def test_missing_alert_returns_404(self, client):
        assert (await client.put("/api/alerts/999/solve")).status_code == 404
        assert (await client.put("/api/alerts/999", json={})).status_code == 404
        assert (await client.delete("/api/alerts/999")).status_code == 404

    async def test_solve_and_filter_by_status(self, client, clock):
        alert_id = await _monitoring_alert(client, "BOA-2024-0001")
        await _monitoring_alert(client, "BOA-2024-0002")
        clock.advance(hours=1)

        resp = await client.put(f"/api/alerts/{alert_id}/solve")
        assert resp.status_code == 200

        solved = (await client.get("/api/alerts/type/internal_monitoring?status=solved")).json()
        assert [a["id"] for a in solved] == [alert_id]
        assert solved[0]["solved_at"] == "2024-05-10T10:00:00"

        active = (await client.get("/api/alerts/type/internal_monitoring?status=active")).json()
        assert [a["package_tracking"] for a in active] == ["BOA-2024-0002"]

        # Estados desconocidos se ignoran
        everything = (await client.get("/api/alerts/type/internal_monitoring?status=bogus")).json()
        assert len(everything) == 2

    async def test_delete(self, client):
        alert_id = await _monitoring_alert(client)
        assert (await client.delete(f"/api/alerts/{alert_id}")).status_code == 200
        assert (await client.get("/api/alerts")).json() == []


# ---------------------------------------------------------------------------
# Reactivación
# ---------------------------------------------------------------------------

class TestCanReactivate:
    async def test_no_previous_alerts(self, client):
        body = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert body == {"canReactivate": True, "reason": "No hay alertas previas"}

    async def test_active_alert_blocks_reactivation(self, client):
        await _monitoring_alert(client)

        body = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert body["canReactivate"] is False
        assert body["reason"] == "Ya existe una alerta activa"

    async def test_solved_less_than_24_hours_ago(self, client, clock):
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")
        clock.advance(hours=10)

        body = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert body["canReactivate"] is False
        assert body["remainingHours"] == 14
        assert "14 horas restantes" in body["reason"]
        assert body["lastSolvedAt"] == START.isoformat()

    async def test_last_half_hour_still_reports_remaining_time(self, client, clock):
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")
        clock.advance(hours=23, minutes=30)

        body = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert body["canReactivate"] is False
        assert body["remainingHours"] == 1
        assert "(1 horas restantes)" in body["reason"]

    async def test_solved_alert_without_solution_date(self, client, session_factory):
        async with session_factory() as session:
            session.add(Alert(
                user_email="system",
                package_tracking="BOA-2024-0001",
                alert_type=INTERNAL_MONITORING,
                status=AlertStatus.SOLVED,
                created_at=START,
            ))
            await session.commit()

        body = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert body["canReactivate"] is False
        assert body["reason"] == "La última alerta no tiene fecha de solución"

    async def test_exactly_24_hours_after_solution(self, client, clock):
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")
        clock.advance(hours=24)

        body = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert body["canReactivate"] is True
        assert body["reason"] == "Han pasado 24 horas desde la última solución"
        assert "remainingHours" not in body


class TestReactivate:
    async def test_reactivate_after_waiting_period(self, client, clock, make_package):
        await make_package("BOA-2024-0001", updated_at=START)
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")
        clock.advance(hours=25)

        resp = await client.post("/api/alerts/reactivate/BOA-2024-0001")
        assert resp.status_code == 201
        assert resp.json()["severity"] == "critical"

        check = (await client.get("/api/alerts/can-reactivate/BOA-2024-0001")).json()
        assert check["canReactivate"] is False

    async def test_reactivate_fresh_package_uses_medium(self, client, clock, make_package):
        await make_package("BOA-2024-0001")

        resp = await client.post("/api/alerts/reactivate/BOA-2024-0001")
        assert resp.status_code == 201
        assert resp.json()["severity"] == "medium"

    async def test_reactivate_too_soon(self, client, clock, make_package):
        await make_package("BOA-2024-0001")
        alert_id = await _monitoring_alert(client)
        await client.put(f"/api/alerts/{alert_id}/solve")
        clock.advance(hours=5)

        resp = await client.post("/api/alerts/reactivate/BOA-2024-0001")
        assert resp.status_code == 400

    async def test_reactivate_unknown_package(self, client):
        resp = await client.post("/api/alerts/reactivate/BOA-0000-0000")
        assert resp.status_code == 404
