"""
Discord message rendering for disasterwatch.


Public API:
- classify_severity(title: str) -> Severity
- format_description(content: str | None) -> str
- render_payload(update: Update, ...) -> dict


The payload is the JSON body of a Discord "execute webhook" call: one
message with a single embed.
"""
from __future__ import annotations
import enum
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from ..fetchers.base import Update
from ..utils.text import collapse_ws, strip_tags, truncate


EMBED_TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 1500
NO_CONTENT = "No content available"
HEADER = "**New Disaster Update**"
FOOTER = "Disaster Watch - Ipswich City Council Dashboard"
FALLBACK_HEADER = "⚠️ **TEST DATA - NOT ACTUAL EMERGENCY INFORMATION** ⚠️"
FALLBACK_FOOTER = "TEST DATA - The actual dashboard is currently unavailable"
FALLBACK_COLOR = 0x808080


class Severity(enum.Enum):
    URGENT = 0xFF0000
    ADVISORY = 0xFFCC00
    RESOLVED = 0x00FF00
    NEUTRAL = 0x2F3136

    @property
    def color(self) -> int:
        return self.value


# checked in order; first tier with a matching keyword wins
SEVERITY_RULES: List[Tuple[Severity, Tuple[str, ...]]] = [
    (Severity.URGENT, ("emergency", "warning", "alert", "evacuate", "danger")),
    (Severity.ADVISORY, ("watch", "advisory", "prepare")),
    (Severity.RESOLVED, ("recovery", "all clear", "safe")),
]


def classify_severity(title: str) -> Severity:
    t = (title or "").lower()
    for severity, keywords in SEVERITY_RULES:
        if any(k in t for k in keywords):
            return severity
    return Severity.NEUTRAL


def format_description(content: Optional[str]) -> str:
    """Plain-text embed description: tags stripped, whitespace collapsed, capped."""
    if not content:
        return NO_CONTENT
    text = collapse_ws(strip_tags(content))
    return truncate(text, DESCRIPTION_LIMIT) if text else NO_CONTENT


def render_payload(
    update: Update,
    username: str,
    avatar_url: str,
    dashboard_url: str,
    now: Optional[datetime] = None,
) -> Dict[str, object]:
    now = now or datetime.now(timezone.utc)
    fields: List[Dict[str, object]] = [
        {"name": "Last Updated", "value": update.timestamp or "Unknown", "inline": True},
    ]
    if update.full_content:
        fields.append({
            "name": "Detailed Information",
            "value": f"Full update details available in the [dashboard]({dashboard_url})",
            "inline": True,
        })

    embed: Dict[str, object] = {
        "title": truncate(update.title, EMBED_TITLE_LIMIT, ""),
        "description": format_description(update.content),
        "color": classify_severity(update.title).color,
        "fields": fields,
        "footer": {"text": FOOTER},
        "timestamp": now.isoformat(),
    }
    payload: Dict[str, object] = {
        "username": username,
        "avatar_url": avatar_url,
        "content": HEADER,
        "embeds": [embed],
    }

    if update.is_fallback_data:
        payload["content"] = FALLBACK_HEADER
        embed["color"] = FALLBACK_COLOR
        embed["footer"] = {"text": FALLBACK_FOOTER}

    return payload
