# disasterwatch/fetchers/fallback.py
# Placeholder updates substituted after persistent fetch failure.
# Every title and timestamp carries FALLBACK_MARK so nobody mistakes them
# for live information.

from __future__ import annotations
from typing import List

from .base import Update

FALLBACK_MARK = "[FALLBACK DATA]"

FALLBACK_UPDATES: List[Update] = [
    Update(
        title=f"{FALLBACK_MARK} Update on community preparedness - Tropical Cyclone Alfred - 7 March 2025",
        timestamp=f"Last Updated 4 hours ago {FALLBACK_MARK}",
        content=f"{FALLBACK_MARK} Tropical Cyclone Alfred is continuing to move slowly towards the coast this morning (Friday 7 March).",
        is_fallback_data=True,
    ),
    Update(
        title=f"{FALLBACK_MARK} WATCH & ACT – MONITOR CONDITIONS AS THEY ARE CHANGING Tropical Cyclone Alfred",
        timestamp=f"Last Updated 17 hours ago {FALLBACK_MARK}",
        content=(
            f"{FALLBACK_MARK} Ipswich City Council advises people in the Ipswich City Council Local Government Area "
            "to MONITOR CONDITIONS AS THEY ARE CHANGING for Tropical Cyclone Alfred..."
        ),
        is_fallback_data=True,
    ),
]


def fallback_updates() -> List[Update]:
    """Fresh copies, so callers can't mutate the shared sequence."""
    return [Update(**vars(u)) for u in FALLBACK_UPDATES]
