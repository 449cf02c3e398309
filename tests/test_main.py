# tests/test_main.py
from datetime import timedelta

import disasterwatch.main as main_mod
from conftest import RecordingNotifier, ScriptedFetcher, upd
from disasterwatch.poller import PollLoop


def test_build_scheduler_single_interval_job():
    loop = PollLoop(ScriptedFetcher(), RecordingNotifier())

    scheduler = main_mod.build_scheduler(loop, interval_seconds=60)
    job = scheduler.get_job(main_mod.JOB_ID)

    assert job is not None
    assert job.func == loop.run_cycle
    assert job.trigger.interval == timedelta(seconds=60)
    assert job.max_instances == 1
    assert job.coalesce is True
    assert job.next_run_time is not None


def test_parse_args_flags():
    args = main_mod.parse_args(["--once", "--verbose"])
    assert args.once and args.verbose
    assert not main_mod.parse_args([]).once


def test_main_once_runs_single_cycle(monkeypatch):
    fetcher = ScriptedFetcher(primary=[[upd("Flood Warning Issued")]])
    notifier = RecordingNotifier()
    loop = PollLoop(fetcher, notifier)
    monkeypatch.setattr(main_mod, "build_loop", lambda: loop)

    assert main_mod.main(["--once"]) == 0
    assert fetcher.primary_calls == 1
    assert [u.title for u in notifier.sent] == ["Flood Warning Issued"]


def test_main_once_reports_empty_fetch(monkeypatch):
    loop = PollLoop(ScriptedFetcher(), RecordingNotifier())
    monkeypatch.setattr(main_mod, "build_loop", lambda: loop)

    assert main_mod.main(["--once"]) == 1
    assert loop.state.consecutive_failures == 1
