# disasterwatch/poller.py
# One poll cycle: fetch (primary → secondary → fallback) → diff against the last
# notified update → notify on change, otherwise count and summarise.
#
# Public API:
#   PollLoop(fetcher, notifier).run_cycle() -> CycleResult
#   PollLoop.mode -> Mode      (NOMINAL / DEGRADED / FALLBACK)
#
# All mutable state lives in the PollState the loop owns; nothing module-level.

from __future__ import annotations
import enum
import logging
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence, TextIO

from .config import (
    COMPACT_LOGGING,
    MAX_CONSECUTIVE_FAILURES,
    MAX_FAILURES_BEFORE_ALTERNATIVE,
    POLL_SECONDS,
    SUMMARY_INTERVAL_HOURS,
)
from .fetchers.base import Fetcher, Update
from .fetchers.fallback import fallback_updates
from .notifiers.base import Notifier
from .utils.text import html_to_text, truncate

LOG = logging.getLogger("disasterwatch")
BANNER = "=" * 57
DOTS_PER_LINE = 50
DETAIL_EVERY = 10

DIAGNOSTIC_LINES = (
    "Multiple failures detected. Possible reasons:",
    "1. The website might be using JavaScript to load content dynamically",
    "2. The website might be blocking scraping requests",
    "3. There might be network connectivity issues",
    "Possible solutions:",
    "1. Check that the headless browser can reach the dashboard from this host",
    "2. Check if the site has a public API and point API_URL at it",
    "3. Verify the site structure manually and update the selectors",
)


class Mode(enum.Enum):
    NOMINAL = "nominal"
    DEGRADED = "degraded"
    FALLBACK = "fallback"


@dataclass
class PollState:
    last_successful_fetch_at: Optional[datetime] = None
    consecutive_failures: int = 0
    last_seen_title: Optional[str] = None
    last_seen_timestamp: Optional[str] = None
    no_change_count: int = 0
    last_summary_at: Optional[datetime] = None
    cycles: int = 0


@dataclass
class CycleResult:
    """Outcome of one cycle: changed, unchanged, empty, error or skipped."""

    status: str
    updates: List[Update] = field(default_factory=list)
    notified: Optional[bool] = None
    used_secondary: bool = False
    used_fallback: bool = False


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PollLoop:
    def __init__(
        self,
        fetcher: Fetcher,
        notifier: Notifier,
        state: Optional[PollState] = None,
        failures_before_alternative: int = MAX_FAILURES_BEFORE_ALTERNATIVE,
        max_consecutive_failures: int = MAX_CONSECUTIVE_FAILURES,
        summary_interval: timedelta = timedelta(hours=SUMMARY_INTERVAL_HOURS),
        compact_logging: bool = COMPACT_LOGGING,
        interval_seconds: int = POLL_SECONDS,
        fallback: Callable[[], Sequence[Update]] = fallback_updates,
        clock: Callable[[], datetime] = utcnow,
        progress_stream: Optional[TextIO] = None,
    ):
        self.fetcher = fetcher
        self.notifier = notifier
        self.state = state or PollState()
        self.failures_before_alternative = failures_before_alternative
        self.max_consecutive_failures = max_consecutive_failures
        self.summary_interval = summary_interval
        self.compact_logging = compact_logging
        self.interval_seconds = interval_seconds
        self.fallback = fallback
        self.clock = clock
        self._progress_stream = progress_stream
        self._busy = threading.Lock()
        self._dots = 0

    @property
    def mode(self) -> Mode:
        failures = self.state.consecutive_failures
        if failures >= self.max_consecutive_failures:
            return Mode.FALLBACK
        if failures >= self.failures_before_alternative:
            return Mode.DEGRADED
        return Mode.NOMINAL

    # ----------------------- cycle -----------------------

    def run_cycle(self) -> CycleResult:
        """Run one cycle unless another is still in flight (skip-if-busy)."""
        if not self._busy.acquire(blocking=False):
            LOG.warning("Previous update check still running; skipping this tick")
            return CycleResult("skipped")
        try:
            result = self._guarded_cycle()
        finally:
            self._busy.release()

        n = self.state.no_change_count
        if n <= 1 or n % DETAIL_EVERY == 0:
            LOG.info("Next check scheduled in %d seconds", self.interval_seconds)
        return result

    def _guarded_cycle(self) -> CycleResult:
        now = self.clock()
        failures_before = self.state.consecutive_failures
        self.state.cycles += 1
        LOG.debug("[%s] Running update check #%d (%s)", now.isoformat(), self.state.cycles, self.mode.value)
        try:
            return self._check(now)
        except Exception:
            # a cycle error counts once, even if the cycle already touched the counter
            self.state.consecutive_failures = failures_before + 1
            LOG.exception("Error in update check. Consecutive failures: %d", self.state.consecutive_failures)
            return CycleResult("error")

    def _check(self, now: datetime) -> CycleResult:
        s = self.state
        updates = list(self.fetcher.fetch_primary())

        used_secondary = False
        if not updates and s.consecutive_failures >= self.failures_before_alternative:
            LOG.info("Regular scraping failed %d times, trying alternative approach...", s.consecutive_failures)
            updates = list(self.fetcher.fetch_secondary())
            used_secondary = True

        used_fallback = False
        if updates:
            if s.consecutive_failures:
                LOG.info("Fetch recovered after %d consecutive failures", s.consecutive_failures)
            s.consecutive_failures = 0
            s.last_successful_fetch_at = now
        else:
            s.consecutive_failures += 1
            LOG.warning("No data returned. Consecutive failures: %d", s.consecutive_failures)
            if s.consecutive_failures == self.failures_before_alternative:
                for line in DIAGNOSTIC_LINES:
                    LOG.info(line)
            if s.consecutive_failures >= self.max_consecutive_failures:
                self._log_fallback_banner()
                updates = list(self.fallback())
                used_fallback = True

        if not updates:
            return CycleResult("empty", used_secondary=used_secondary, used_fallback=used_fallback)

        latest = updates[0]
        notified: Optional[bool] = None
        if self._is_change(latest):
            notified = self._on_change(latest, now)
            status = "changed"
        else:
            self._on_no_change(now)
            status = "unchanged"

        if latest.is_fallback_data:
            LOG.warning("SHOWING FALLBACK DATA - NOT CURRENT INFORMATION")
            LOG.warning("FALLBACK DATA: This information is not current and should not be relied upon.")

        return CycleResult(
            status,
            updates=updates,
            notified=notified,
            used_secondary=used_secondary,
            used_fallback=used_fallback,
        )

    # ----------------------- diff -----------------------

    def _is_change(self, latest: Update) -> bool:
        s = self.state
        if s.last_seen_title is None:
            return True
        return latest.title != s.last_seen_title or (latest.timestamp or None) != s.last_seen_timestamp

    def _on_change(self, latest: Update, now: datetime) -> bool:
        s = self.state
        LOG.info("[%s] New or updated information detected!", now.isoformat())
        LOG.info(
            "Latest update: title=%r timestamp=%r preview=%r full_content=%s",
            latest.title,
            latest.timestamp,
            truncate(latest.content, 100) if latest.content else "No content available",
            bool(latest.full_content),
        )
        if latest.full_content:
            LOG.info("Modal content sample: %s", truncate(html_to_text(latest.full_content), 200))

        notified = self.notifier.notify(latest)
        if not notified:
            LOG.warning("Notification for %r was not delivered", latest.title)

        s.no_change_count = 0
        s.last_seen_title = latest.title
        s.last_seen_timestamp = latest.timestamp or None
        s.last_summary_at = now
        return notified

    def _on_no_change(self, now: datetime) -> None:
        s = self.state
        s.no_change_count += 1
        if s.no_change_count == 1 or s.no_change_count % DETAIL_EVERY == 0:
            LOG.info("No new updates found. Same content has been seen %d times.", s.no_change_count)
            LOG.info("Last update was: %r (%s)", s.last_seen_title, s.last_seen_timestamp)
        else:
            self._progress_marker()

        if s.last_summary_at is not None and now - s.last_summary_at >= self.summary_interval:
            hours = (now - s.last_summary_at).total_seconds() / 3600
            LOG.info(
                "Hourly summary (no changes in %.1f hours): latest update remains %r (%s)",
                hours,
                s.last_seen_title,
                s.last_seen_timestamp,
            )
            s.last_summary_at = now

    # ----------------------- output -----------------------

    def _progress_marker(self) -> None:
        if not self.compact_logging:
            LOG.debug("No change (%d)", self.state.no_change_count)
            return
        stream = self._progress_stream or sys.stdout
        stream.write(".")
        self._dots += 1
        if self._dots % DOTS_PER_LINE == 0:
            stream.write("\n")
        stream.flush()

    def _log_fallback_banner(self) -> None:
        LOG.warning(BANNER)
        LOG.warning("Using fallback data after %d consecutive failures", self.max_consecutive_failures)
        LOG.warning("This is NOT current disaster information")
        LOG.warning("This is sample data for testing purposes only")
        LOG.warning("DO NOT use this data for emergency decisions")
        LOG.warning(BANNER)
