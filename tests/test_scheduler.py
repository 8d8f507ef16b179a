from unittest import mock
from datetime import datetime
import threading

import pytest

import scheduler


@pytest.fixture(autouse=True)
def _clean_scheduler():
    yield
    scheduler.clear()


def _wait_for(event, timeout=2.0):
    assert event.wait(timeout), "job did not run in time"


def test_interval_job_runs_immediately_on_start():
    ran = threading.Event()
    scheduler.add_job("svc", ran.set, 60)
    scheduler.start_job("svc")

    _wait_for(ran)
    assert scheduler.any_running()


def test_interval_job_repeats():
    count = []
    done = threading.Event()

    def job():
        count.append(1)
        if len(count) >= 3:
            done.set()

    scheduler.add_job("svc", job, 0.01)
    scheduler.start_job("svc")

    _wait_for(done)


def test_slow_run_does_not_block_next_tick():
    """Invocations may overlap; a long run never holds up the schedule."""

    release = threading.Event()
    second_started = threading.Event()
    starts = []

    def job():
        starts.append(1)
        if len(starts) >= 2:
            second_started.set()
        release.wait(2)

    scheduler.add_job("svc", job, 0.01)
    scheduler.start_job("svc")
    try:
        _wait_for(second_started)
    finally:
        release.set()


def test_job_exceptions_are_logged_not_fatal():
    calls = []
    done = threading.Event()

    def job():
        calls.append(1)
        if len(calls) >= 2:
            done.set()
        raise RuntimeError("boom")

    scheduler.add_job("svc", job, 0.01)
    scheduler.start_job("svc")

    _wait_for(done)
    assert scheduler.any_running()


def test_stop_all_stops_promptly():
    scheduler.add_job("svc", lambda: None, 3600)
    scheduler.start_all()
    thread = scheduler._jobs["svc"].thread

    scheduler.stop_all()
    thread.join(1)

    assert not thread.is_alive()
    assert not scheduler.any_running()


def test_replacing_a_job_stops_the_old_one():
    scheduler.add_job("svc", lambda: None, 3600)
    scheduler.start_job("svc")
    old = scheduler._jobs["svc"]

    scheduler.add_job("svc", lambda: None, 60)

    assert not old.running
    assert not old.thread.is_alive()
    assert scheduler._jobs["svc"].interval == 60


def test_cron_job_waits_for_fire_time():
    trigger = scheduler.parse_cron("0 9 * * 1")
    fn = mock.Mock()
    scheduler.add_cron_job("alive", fn, trigger)
    scheduler.start_job("alive")

    assert scheduler.next_run_time("alive") is not None
    scheduler.stop_job("alive")
    scheduler._jobs["alive"].thread.join(1)
    fn.assert_not_called()


def test_parse_cron_uses_crontab_weekdays():
    trigger = scheduler.parse_cron("0 9 * * 1")
    now = datetime.now(trigger.timezone)

    next_fire = trigger.get_next_fire_time(None, now)

    # crontab 1 is Monday
    assert next_fire.weekday() == 0
    assert (next_fire.hour, next_fire.minute) == (9, 0)


@pytest.mark.parametrize(
    "field, expected",
    [
        ("1", "mon"),
        ("0", "sun"),
        ("7", "sun"),
        ("1-5", "mon,tue,wed,thu,fri"),
        ("0-5", "sun,mon,tue,wed,thu,fri"),
        ("5-7", "sun,fri,sat"),
        ("mon,3", "mon,wed"),
        ("MON-wed", "mon,tue,wed"),
        ("*/2", "sun,tue,thu,sat"),
        ("1-5/2", "mon,wed,fri"),
        ("3/2", "wed,fri"),
        ("*", "*"),
    ],
)
def test_cron_weekday_translation(field, expected):
    assert scheduler._cron_weekdays(field) == expected


@pytest.mark.parametrize(
    "expression",
    [
        "",
        "not a cron",
        "* * * *",
        "61 * * * *",
        "0 9 * * 9",
        "0 25 * * *",
        "0 9 * * 5-1",
        "0 9 * * */0",
        "0 9 * * funday",
        "1 2 3 4 5 6 7",
    ],
)
def test_parse_cron_rejects_invalid_expressions(expression):
    with pytest.raises(ValueError):
        scheduler.parse_cron(expression)


def test_next_run_time_unknown_job():
    assert scheduler.next_run_time("missing") is None


def _fire_weekdays(trigger, count=4):
    days = []
    previous = None
    now = datetime.now(trigger.timezone)
    for _ in range(count):
        previous = trigger.get_next_fire_time(previous, now)
        now = previous
        days.append(previous.strftime("%a"))
    return days


def test_stepped_weekdays_fire_on_crontab_days():
    assert set(_fire_weekdays(scheduler.parse_cron("0 9 * * */2"))) == {
        "Sun", "Tue", "Thu", "Sat"
    }
    assert set(_fire_weekdays(scheduler.parse_cron("0 9 * * 1-5/2"), 6)) == {
        "Mon", "Wed", "Fri"
    }


def test_parse_cron_accepts_seconds_field():
    trigger = scheduler.parse_cron("30 0 9 * * 1")
    next_fire = trigger.get_next_fire_time(None, datetime.now(trigger.timezone))

    assert (next_fire.hour, next_fire.minute, next_fire.second) == (9, 0, 30)
    assert next_fire.weekday() == 0


def test_parse_cron_five_fields_fire_on_the_minute():
    trigger = scheduler.parse_cron("15 * * * *")
    next_fire = trigger.get_next_fire_time(None, datetime.now(trigger.timezone))

    assert (next_fire.minute, next_fire.second) == (15, 0)
