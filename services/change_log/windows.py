# services/change_log/windows.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .models import TimeWindow, localize


@dataclass(frozen=True)
class ReportWindows:
    event: TimeWindow
    prep: TimeWindow


def _wall_clock(now: datetime, tz=None) -> datetime:
    """Naive wall-clock time of `now` in the reporting zone."""
    if now.tzinfo is None:
        return now
    local = now.astimezone(tz) if tz is not None else now.astimezone()
    return local.replace(tzinfo=None)


def start_of_day(now: datetime, tz=None) -> datetime:
    wall = _wall_clock(now, tz)
    return localize(wall.replace(hour=0, minute=0, second=0, microsecond=0), tz)


def end_of_day(now: datetime, tz=None) -> datetime:
    wall = _wall_clock(now, tz)
    return localize(wall.replace(hour=23, minute=59, second=59, microsecond=999000), tz)


def days_from(moment: datetime, days: int, tz=None) -> datetime:
    """Shift by whole calendar days, keeping the wall-clock time across DST changes."""
    return localize(_wall_clock(moment, tz) + timedelta(days=days), tz)


def compute_windows(
    event_days_back: int,
    prep_days_past: int,
    prep_days_future: int,
    now: Optional[datetime] = None,
    tz=None,
) -> ReportWindows:
    """
    Event window: midnight `event_days_back` days ago through the end of today.
    Prep window: midnight `prep_days_past` days ago to midnight `prep_days_future` days ahead.
    """
    if now is None:
        now = datetime.now(tz) if tz is not None else datetime.now()
    today = start_of_day(now, tz)

    event = TimeWindow(days_from(today, -event_days_back, tz), end_of_day(now, tz))
    prep = TimeWindow(days_from(today, -prep_days_past, tz), days_from(today, prep_days_future, tz))
    return ReportWindows(event=event, prep=prep)


def windows_for(settings, now: Optional[datetime] = None) -> ReportWindows:
    return compute_windows(
        settings.event_days_back,
        settings.prep_days_past,
        settings.prep_days_future,
        now=now,
        tz=settings.tz,
    )
