"""
Tests de los endpoints generales de la aplicación.
"""


class TestApp:
    async def test_root_lists_endpoints(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.json()["endpoints"]["packages"] == "/api/packages"

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_validation_errors_are_400(self, client):
        resp = await client.post("/api/claims", json={})
        assert resp.status_code == 400
        assert isinstance(resp.json()["detail"], list)
