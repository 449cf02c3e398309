# disasterwatch/main.py
# Orchestrator: build fetcher + notifier → poll loop → run it now and every POLL_SECONDS

from __future__ import annotations
import argparse
from datetime import datetime, timezone
from typing import List, Optional

from apscheduler.schedulers.blocking import BlockingScheduler

from .config import DISCORD_WEBHOOK_URL, DRY_RUN, POLL_SECONDS, SCRAPE_URL
from .fetchers.dashboard import DashboardFetcher
from .notifiers.discord import DiscordNotifier
from .poller import PollLoop
from .utils.log import get_logger, setup_logging

logger = get_logger("disasterwatch")
JOB_ID = "poll_dashboard"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch the disaster dashboard and relay updates to Discord")
    parser.add_argument("--once", action="store_true", help="Run a single update check and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_loop() -> PollLoop:
    fetcher = DashboardFetcher(url=SCRAPE_URL)
    notifier = DiscordNotifier(webhook_url=DISCORD_WEBHOOK_URL, dry_run=DRY_RUN)
    return PollLoop(fetcher, notifier, interval_seconds=POLL_SECONDS)


def build_scheduler(loop: PollLoop, interval_seconds: int = POLL_SECONDS) -> BlockingScheduler:
    """One interval job, first run immediately; an overrunning check makes later ticks skip."""
    scheduler = BlockingScheduler(timezone="UTC")
    scheduler.add_job(
        loop.run_cycle,
        "interval",
        seconds=interval_seconds,
        id=JOB_ID,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=interval_seconds,
        next_run_time=datetime.now(timezone.utc),
        replace_existing=True,
    )
    return scheduler


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        setup_logging(verbose=True)

    loop = build_loop()
    notifier = loop.notifier
    logger.info("Disaster Watch scraper starting...")
    logger.info("Watching %s", SCRAPE_URL)
    logger.info("Check interval set to %d seconds (%.1f minutes)", POLL_SECONDS, POLL_SECONDS / 60)
    logger.info(
        "Discord notifications: %s%s",
        "Enabled" if getattr(notifier, "enabled", False) else "Disabled",
        " (dry run)" if DRY_RUN else "",
    )

    if args.once:
        result = loop.run_cycle()
        logger.info("Single check finished: %s", result.status)
        return 0 if result.status in ("changed", "unchanged") else 1

    scheduler = build_scheduler(loop, POLL_SECONDS)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Disaster Watch stopping")
        if scheduler.running:
            scheduler.shutdown(wait=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
