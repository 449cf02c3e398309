# tests/conftest.py
from datetime import datetime, timedelta, timezone

import pytest

from disasterwatch.fetchers.base import Fetcher, Update
from disasterwatch.notifiers.base import Notifier


class ScriptedFetcher(Fetcher):
    """Returns scripted results in order; an Exception entry is raised instead."""

    name = "scripted"

    def __init__(self, primary=None, secondary=None):
        self.primary = list(primary or [])
        self.secondary = list(secondary or [])
        self.primary_calls = 0
        self.secondary_calls = 0

    @staticmethod
    def _next(script):
        if not script:
            return []
        item = script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def fetch_primary(self):
        self.primary_calls += 1
        return self._next(self.primary)

    def fetch_secondary(self):
        self.secondary_calls += 1
        return self._next(self.secondary)


class RecordingNotifier(Notifier):
    name = "recording"

    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.sent = []

    def notify(self, update):
        self.sent.append(update)
        if self.error is not None:
            raise self.error
        return self.result


class Clock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 3, 7, 6, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kw):
        self.now += timedelta(**kw)


def upd(title, timestamp="T1", **kw):
    return Update(title=title, timestamp=timestamp, **kw)


@pytest.fixture()
def clock():
    return Clock()


@pytest.fixture()
def notifier():
    return RecordingNotifier()
