# tests/test_templates.py
from datetime import datetime, timezone

import pytest

from disasterwatch.fetchers.base import Update
from disasterwatch.fetchers.fallback import FALLBACK_UPDATES, fallback_updates
from disasterwatch.notifiers.templates import (
    FALLBACK_COLOR,
    FALLBACK_FOOTER,
    FALLBACK_HEADER,
    FOOTER,
    HEADER,
    NO_CONTENT,
    Severity,
    classify_severity,
    format_description,
    render_payload,
)

NOW = datetime(2025, 3, 7, 6, 0, tzinfo=timezone.utc)


def _render(update):
    return render_payload(update, "Disaster Watch", "https://img.test/a.png", "https://dash.test/", now=NOW)


@pytest.mark.parametrize(
    "title, expected",
    [
        ("EMERGENCY: leave now", Severity.URGENT),
        ("Flood Warning Issued", Severity.URGENT),
        ("Evacuate Goodna", Severity.URGENT),
        ("Storm WATCH and act", Severity.ADVISORY),
        ("Prepare your household", Severity.ADVISORY),
        ("Recovery hub opens", Severity.RESOLVED),
        ("All Clear for Ipswich", Severity.RESOLVED),
        ("Community meeting tonight", Severity.NEUTRAL),
        ("Warning lifted, recovery begins", Severity.URGENT),
        ("Watch: roads safe again", Severity.ADVISORY),
    ],
)
def test_classify_severity(title, expected):
    assert classify_severity(title) is expected


def test_severity_colors():
    assert Severity.URGENT.color == 0xFF0000
    assert Severity.ADVISORY.color == 0xFFCC00
    assert Severity.RESOLVED.color == 0x00FF00
    assert Severity.NEUTRAL.color == 0x2F3136


def test_format_description_strips_markup_and_whitespace():
    assert format_description("<p>Roads   closed\n\n<b>now</b></p>") == "Roads closed now"


def test_format_description_truncates():
    text = format_description("<p>" + "a" * 2000 + "</p>")
    assert text == "a" * 1500 + "..."


def test_format_description_placeholder():
    assert format_description(None) == NO_CONTENT
    assert format_description("") == NO_CONTENT
    assert format_description("<br/>") == NO_CONTENT


def test_render_payload_regular_update():
    payload = _render(Update(title="Flood Warning Issued", timestamp="Last Updated 1 hour ago", content="<p>Hi</p>"))

    assert payload["username"] == "Disaster Watch"
    assert payload["avatar_url"] == "https://img.test/a.png"
    assert payload["content"] == HEADER
    embed = payload["embeds"][0]
    assert embed["title"] == "Flood Warning Issued"
    assert embed["description"] == "Hi"
    assert embed["color"] == 0xFF0000
    assert embed["fields"] == [{"name": "Last Updated", "value": "Last Updated 1 hour ago", "inline": True}]
    assert embed["footer"] == {"text": FOOTER}
    assert embed["timestamp"] == NOW.isoformat()


def test_render_payload_unknown_timestamp_and_detail_link():
    payload = _render(Update(title="Community update", full_content="<p>More</p>"))

    fields = payload["embeds"][0]["fields"]
    assert fields[0]["value"] == "Unknown"
    assert fields[1]["name"] == "Detailed Information"
    assert "(https://dash.test/)" in fields[1]["value"]


def test_render_payload_fallback_overrides_severity():
    update = Update(
        title="[FALLBACK DATA] EMERGENCY evacuate now",
        timestamp="Last Updated 4 hours ago [FALLBACK DATA]",
        is_fallback_data=True,
    )

    payload = _render(update)

    assert payload["content"] == FALLBACK_HEADER
    assert "NOT ACTUAL EMERGENCY INFORMATION" in payload["content"]
    embed = payload["embeds"][0]
    assert embed["color"] == FALLBACK_COLOR
    assert embed["footer"] == {"text": FALLBACK_FOOTER}


def test_fallback_updates_are_marked():
    updates = fallback_updates()

    assert len(updates) == len(FALLBACK_UPDATES) >= 1
    for u in updates:
        assert u.is_fallback_data
        assert u.title.startswith("[FALLBACK DATA]")
        assert "[FALLBACK DATA]" in u.timestamp

    updates[0].title = "mutated"
    assert FALLBACK_UPDATES[0].title.startswith("[FALLBACK DATA]")
