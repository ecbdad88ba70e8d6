"""Unit tests for Bark notifications."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import httpx
import pytest
from seatwatch.services import notification_service
from seatwatch.services.notification_service import send_notifications


def use_transport(monkeypatch, handler):
    monkeypatch.setattr(
        notification_service, "_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestSendNotifications:
    @pytest.mark.asyncio
    async def test_no_tokens_skips(self, monkeypatch):
        def handler(request):
            raise AssertionError("no request expected")
        use_transport(monkeypatch, handler)
        assert await send_notifications([], "hello", "Shop") == 0

    @pytest.mark.asyncio
    async def test_posts_json_to_each_token(self, monkeypatch):
        seen = []

        def handler(request):
            seen.append((str(request.url), json.loads(request.content)))
            return httpx.Response(200, json={"code": 200})
        use_transport(monkeypatch, handler)

        sent = await send_notifications(["abcd1234", "https://bark.example/key9/"], "body text", "Test Shop")
        assert sent == 2
        assert seen[0][0] == "https://api.day.app/abcd1234"
        assert seen[1][0] == "https://bark.example/key9"
        assert seen[0][1] == {"title": "Test Shop", "body": "body text", "group": "Test Shop"}

    @pytest.mark.asyncio
    async def test_failures_are_not_fatal(self, monkeypatch):
        def handler(request):
            if "bad" in str(request.url):
                return httpx.Response(400, text="invalid key")
            if "down" in str(request.url):
                raise httpx.ConnectError("unreachable", request=request)
            return httpx.Response(200)
        use_transport(monkeypatch, handler)

        sent = await send_notifications(["bad-token", "down-token", "good-token"], "x", "Shop")
        assert sent == 1
