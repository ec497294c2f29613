"""
Tests del envío del email de recuperación.
"""

import json

import httpx

from boa_tracking.services.email_service import EmailService, build_reset_url


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _mock_client(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", factory)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestEmailService:
    def test_reset_url(self):
        url = build_reset_url("abc123", base_url="https://boa.bo/")
        assert url == "https://boa.bo/reset-password?token=abc123"

    async def test_without_api_key_nothing_is_sent(self, monkeypatch):
        def handler(request):
            raise AssertionError("no debería llamarse a Resend")

        _mock_client(monkeypatch, handler)
        sent = await EmailService(api_key=None).send_password_reset("ana@example.com", "Ana", "tok")
        assert sent is False

    async def test_sends_through_resend(self, monkeypatch):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"id": "email_1"})

        _mock_client(monkeypatch, handler)
        service = EmailService(api_key="re_test", api_url="https://resend.test/emails")

        sent = await service.send_password_reset("ana@example.com", "Ana", "tok")

        assert sent is True
        assert len(requests) == 1
        assert requests[0].headers["Authorization"] == "Bearer re_test"
        body = json.loads(requests[0].content)
        assert body["to"] == ["ana@example.com"]
        assert "reset-password?token=tok" in body["html"]

    async def test_rejected_by_resend(self, monkeypatch):
        _mock_client(monkeypatch, lambda request: httpx.Response(422, json={"error": "bad"}))
        service = EmailService(api_key="re_test", api_url="https://resend.test/emails")

        assert await service.send_password_reset("ana@example.com", "Ana", "tok") is False

    async def test_network_error_is_logged_not_raised(self, monkeypatch):
        def handler(request):
            raise httpx.ConnectError("sin red", request=request)

        _mock_client(monkeypatch, handler)
        service = EmailService(api_key="re_test", api_url="https://resend.test/emails")

        assert await service.send_password_reset("ana@example.com", "Ana", "tok") is False
