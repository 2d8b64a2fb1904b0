"""Integration tests for the chat webhook endpoint."""

from __future__ import annotations

import logging

from fastapi import status

from menubot.auth.token_cache import TokenCache
from menubot.config import get_settings
from menubot.errors import AuthFailure, DeliveryFailure
from menubot.messaging.sender import ActivitySender
from menubot.server import deps
from tests.helpers import StaticFetcher, read_page

WEBHOOK = "/api/messages"


def _activity(text: str) -> dict[str, object]:
    return {
        "type": "message",
        "id": "activity-1",
        "timestamp": "2024-01-01T12:00:00Z",
        "text": text,
        "from": {"id": "29:user", "name": "Alex"},
        "to": {"id": "28:bot", "name": "Menubot"},
        "conversation": {"id": "19:conv"},
    }


class RecordingSender:
    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[tuple[object, str]] = []
        self._error = error

    async def send(self, activity, conversation_id: str) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append((activity, conversation_id))


def _wire(app, fixture_fetcher, fake_clock, sender) -> None:
    app.dependency_overrides[deps.get_fetcher] = lambda: fixture_fetcher
    app.dependency_overrides[deps.get_clock] = lambda: fake_clock
    app.dependency_overrides[deps.get_sender] = lambda: sender


def test_menu_query_sends_rendered_answer(client, app, fixture_fetcher, fake_clock):
    sender = RecordingSender()
    _wire(app, fixture_fetcher, fake_clock, sender)

    response = client.post(WEBHOOK, json=_activity("menu"))

    assert response.status_code == status.HTTP_201_CREATED
    assert len(sender.sent) == 1
    reply, conversation_id = sender.sent[0]
    assert conversation_id == "19:conv"
    assert reply.recipient.id == "29:user"
    assert reply.sender.id == "28:bot"
    assert reply.text.splitlines()[:3] == ["#= **Canteen** =", " ### 1 Soup", " ### 2 Salad"]


def test_menu_tomorrow_uses_next_weekday(client, app, fixture_fetcher, fake_clock):
    sender = RecordingSender()
    _wire(app, fixture_fetcher, fake_clock, sender)

    response = client.post(WEBHOOK, json=_activity("Menu tomorrow"))

    assert response.status_code == status.HTTP_201_CREATED
    reply, _ = sender.sent[0]
    assert "Canteen" not in reply.text
    assert " ### 1 Fish and chips" in reply.text


def test_non_menu_message_is_acknowledged_without_reply(client, app, fixture_fetcher, fake_clock):
    sender = RecordingSender()
    _wire(app, fixture_fetcher, fake_clock, sender)

    response = client.post(WEBHOOK, json=_activity("hello bot"))

    assert response.status_code == status.HTTP_201_CREATED
    assert sender.sent == []
    assert fixture_fetcher.requested == []


def test_broken_site_still_produces_partial_answer(client, app, fake_clock):
    fetcher = StaticFetcher({"http://bistro.test/lunch": read_page("bistro.html")})
    sender = RecordingSender()
    _wire(app, fetcher, fake_clock, sender)

    response = client.post(WEBHOOK, json=_activity("menu"))

    assert response.status_code == status.HTTP_201_CREATED
    reply, _ = sender.sent[0]
    assert reply.text.splitlines() == ["#= **Bistro** =", " ### Goulash with dumplings"]


def test_missing_token_fails_request_without_sending(client, app, fixture_fetcher, fake_clock, caplog):
    async def failing_refresher():
        raise AuthFailure("auth endpoint unreachable")

    posted = []

    class NeverCalledClient:
        async def post(self, *args, **kwargs):  # pragma: no cover - must not be reached
            posted.append(args)

    sender = ActivitySender(
        api_url="http://connector.test",
        activity_endpoint="/v3/conversations/<conversationId>/activities",
        token_cache=TokenCache(failing_refresher, clock=fake_clock),
        client=NeverCalledClient(),
    )
    _wire(app, fixture_fetcher, fake_clock, sender)

    with caplog.at_level(logging.ERROR, logger="menubot.server.app"):
        response = client.post(WEBHOOK, json=_activity("menu"))

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.json()["detail"] == "Messaging credential unavailable"
    assert posted == []
    assert "reply not sent" in caplog.text


def test_delivery_failure_is_reported(client, app, fixture_fetcher, fake_clock):
    sender = RecordingSender(error=DeliveryFailure("Connector returned HTTP 500"))
    _wire(app, fixture_fetcher, fake_clock, sender)

    response = client.post(WEBHOOK, json=_activity("menu"))

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.json()["detail"] == "Reply delivery failed"


def test_invalid_activity_payload_is_rejected(client):
    response = client.post(WEBHOOK, json={"text": "menu"})

    assert response.status_code == 422


def test_missing_sites_file_is_reported(client, app, fixture_fetcher, fake_clock, monkeypatch, tmp_path):
    monkeypatch.setenv("MENUBOT_SITES_PATH", str(tmp_path / "missing.json"))
    get_settings.cache_clear()
    app.state.sites = None
    _wire(app, fixture_fetcher, fake_clock, RecordingSender())

    response = client.post(WEBHOOK, json=_activity("menu"))

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "Sites file not found" in response.json()["detail"]
