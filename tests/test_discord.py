# tests/test_discord.py
import requests

from disasterwatch.fetchers.base import Update
from disasterwatch.notifiers.discord import DiscordNotifier
from disasterwatch.notifiers.templates import FALLBACK_COLOR


class FakeResponse:
    def __init__(self, status=204):
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("%d error" % self.status_code)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


UPDATE = Update(title="Flood Warning Issued", timestamp="Last Updated 5 minutes ago", content="Move to higher ground")


def test_not_configured_returns_false():
    session = FakeSession()
    notifier = DiscordNotifier(webhook_url="", session=session)

    assert notifier.enabled is False
    assert notifier.notify(UPDATE) is False
    assert session.posts == []


def test_posts_payload_once():
    session = FakeSession()
    notifier = DiscordNotifier(webhook_url="https://discord.test/hook", timeout=15, session=session)

    assert notifier.notify(UPDATE) is True

    assert len(session.posts) == 1
    post = session.posts[0]
    assert post["url"] == "https://discord.test/hook"
    assert post["timeout"] == 15
    assert post["json"]["embeds"][0]["title"] == "Flood Warning Issued"


def test_http_error_returns_false():
    session = FakeSession(response=FakeResponse(status=429))
    notifier = DiscordNotifier(webhook_url="https://discord.test/hook", session=session)

    assert notifier.notify(UPDATE) is False


def test_network_error_returns_false():
    session = FakeSession(error=requests.ConnectionError("down"))
    notifier = DiscordNotifier(webhook_url="https://discord.test/hook", session=session)

    assert notifier.notify(UPDATE) is False


def test_dry_run_does_not_post():
    session = FakeSession()
    notifier = DiscordNotifier(webhook_url="https://discord.test/hook", dry_run=True, session=session)

    assert notifier.notify(UPDATE) is True
    assert session.posts == []


def test_fallback_update_delivers_warning_payload():
    session = FakeSession()
    notifier = DiscordNotifier(webhook_url="https://discord.test/hook", session=session)
    update = Update(title="Emergency alert", timestamp="[FALLBACK DATA]", is_fallback_data=True)

    assert notifier.notify(update) is True

    body = session.posts[0]["json"]
    assert "TEST DATA" in body["content"]
    assert body["embeds"][0]["color"] == FALLBACK_COLOR
    assert "TEST DATA" in body["embeds"][0]["footer"]["text"]


def test_uses_requests_when_no_session(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append(url)
        return FakeResponse()

    monkeypatch.setattr(requests, "post", fake_post)
    notifier = DiscordNotifier(webhook_url="https://discord.test/hook")

    assert notifier.notify(UPDATE) is True
    assert calls == ["https://discord.test/hook"]
