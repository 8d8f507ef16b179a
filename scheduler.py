"""Simple scheduling manager for running monitor jobs on intervals and crontabs."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
import threading
import time
from typing import Callable, Dict, Optional
import logging

from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

# crontab weekday numbers; APScheduler counts from Monday instead
_CRON_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


@dataclass
class ScheduledJob:
    """Represents a single recurring job.

    Interval jobs run as soon as they start and then every ``interval``
    seconds. Cron jobs wait for the next fire time of ``trigger``.
    """

    fn: Callable[[], object]
    interval: Optional[float] = None
    trigger: Optional[CronTrigger] = None
    running: bool = False
    thread: Optional[threading.Thread] = None
    next_run: Optional[datetime] = None
    wakeup: threading.Event = field(default_factory=threading.Event)


_jobs: Dict[str, ScheduledJob] = {}


def _weekday_number(token: str) -> int:
    token = token.lower()
    if token in _CRON_WEEKDAYS:
        return _CRON_WEEKDAYS.index(token)
    if token.isdigit() and int(token) <= 7:
        return int(token)
    raise ValueError(f"Invalid weekday: {token!r}")


def _cron_weekdays(day_of_week: str) -> str:
    """Expand a crontab weekday field into an explicit list of day names.

    Numbers follow crontab (0 and 7 are Sunday). Ranges and steps are
    expanded here, since APScheduler would count them from Monday.
    """
    if day_of_week == "*":
        return day_of_week
    days = set()
    for part in day_of_week.split(","):
        base, slash, step = part.partition("/")
        if base == "*":
            first, last = 0, 6
        elif "-" in base:
            low, _, high = base.partition("-")
            first, last = _weekday_number(low), _weekday_number(high)
        else:
            first = _weekday_number(base)
            last = 6 if slash else first
        if first > last:
            raise ValueError(f"Invalid weekday range: {part!r}")
        if slash and not (step.isdigit() and int(step) > 0):
            raise ValueError(f"Invalid weekday step: {part!r}")
        days.update(d % 7 for d in range(first, last + 1, int(step) if slash else 1))
    return ",".join(_CRON_WEEKDAYS[d] for d in sorted(days))


def parse_cron(expression: str) -> CronTrigger:
    """Parse a crontab expression into a trigger.

    Accepts the usual five fields (minute hour day month weekday) or six
    with a leading seconds field. Raises ``ValueError`` if the expression
    is not valid.
    """
    fields = expression.split()
    if len(fields) == 5:
        fields = ["0"] + fields
    if len(fields) != 6:
        raise ValueError(f"Invalid cron expression: {expression!r}")
    second, minute, hour, day, month, day_of_week = fields
    return CronTrigger(
        second=second,
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=_cron_weekdays(day_of_week),
    )


def _register(name: str, job: ScheduledJob) -> None:
    existing = _jobs.get(name)
    if existing:
        # Stop any running thread before replacing the job
        stop_job(name)
        if existing.thread and existing.thread.is_alive():
            existing.thread.join()
    _jobs[name] = job


def add_job(name: str, fn: Callable[[], object], interval: float) -> None:
    """Register or replace a job to run every ``interval`` seconds."""
    _register(name, ScheduledJob(fn=fn, interval=interval))


def add_cron_job(name: str, fn: Callable[[], object], trigger: CronTrigger) -> None:
    """Register or replace a job that runs on a crontab schedule."""
    _register(name, ScheduledJob(fn=fn, trigger=trigger))


def _fire(name: str, job: ScheduledJob) -> None:
    """Run one invocation on its own thread so ticks never wait for it."""

    def invoke() -> None:
        try:
            job.fn()
        except Exception:  # safety net
            logger.exception("Scheduled job %s failed", name)

    threading.Thread(target=invoke, name=f"{name}-run", daemon=True).start()


def _run_interval(name: str, job: ScheduledJob) -> None:
    next_at = time.monotonic()
    while job.running:
        _fire(name, job)
        next_at += job.interval
        wait_time = max(0, next_at - time.monotonic())
        job.next_run = datetime.now().astimezone() + timedelta(seconds=wait_time)
        if job.wakeup.wait(wait_time):
            return


def _run_cron(name: str, job: ScheduledJob) -> None:
    previous: Optional[datetime] = None
    while job.running:
        now = datetime.now(job.trigger.timezone)
        next_fire = job.trigger.get_next_fire_time(previous, now)
        job.next_run = next_fire
        if next_fire is None:
            logger.warning("Job %s has no further fire times", name)
            job.running = False
            return
        if job.wakeup.wait(max(0, (next_fire - now).total_seconds())):
            return
        previous = next_fire
        _fire(name, job)


def _run(name: str) -> None:
    job = _jobs[name]
    if job.trigger is not None:
        _run_cron(name, job)
    else:
        _run_interval(name, job)


def start_job(name: str) -> None:
    """Start running the named job in its own thread."""
    job = _jobs.get(name)
    if not job or job.running:
        return
    job.running = True
    job.wakeup.clear()
    t = threading.Thread(target=_run, args=(name,), name=name, daemon=True)
    job.thread = t
    t.start()


def stop_job(name: str) -> None:
    """Stop the named job. Invocations already in flight are left to finish."""
    job = _jobs.get(name)
    if not job:
        return
    job.running = False
    job.wakeup.set()


def start_all() -> None:
    """Start all registered jobs."""
    for name in list(_jobs.keys()):
        start_job(name)


def stop_all() -> None:
    """Stop all running jobs."""
    for name in list(_jobs.keys()):
        stop_job(name)


def any_running() -> bool:
    """Return True if any scheduled job is currently running."""
    return any(j.running for j in _jobs.values())


def next_run_time(name: str) -> Optional[datetime]:
    """Return when the named job is next due, if known.

    Before a job has started, interval jobs are due immediately and cron
    jobs are due at the trigger's next fire time.
    """
    job = _jobs.get(name)
    if not job:
        return None
    if job.next_run is not None:
        return job.next_run
    if job.trigger is not None:
        now = datetime.now(job.trigger.timezone)
        return job.trigger.get_next_fire_time(None, now)
    return datetime.now().astimezone()


def clear() -> None:
    """Stop and forget every registered job."""
    stop_all()
    for job in _jobs.values():
        if job.thread and job.thread.is_alive():
            job.thread.join()
    _jobs.clear()
