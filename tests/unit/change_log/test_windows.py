# tests/unit/change_log/test_windows.py
from datetime import datetime

import pytz

from services.change_log.windows import compute_windows, end_of_day, start_of_day, windows_for

DENVER = pytz.timezone("America/Denver")


def test_default_offsets_from_mid_afternoon():
    now = DENVER.localize(datetime(2024, 6, 10, 15, 42, 7))
    w = compute_windows(45, 30, 60, now=now, tz=DENVER)

    assert w.event.start == DENVER.localize(datetime(2024, 4, 26))
    assert w.event.end == DENVER.localize(datetime(2024, 6, 10, 23, 59, 59, 999000))
    assert w.prep.start == DENVER.localize(datetime(2024, 5, 11))
    assert w.prep.end == DENVER.localize(datetime(2024, 8, 9))


def test_naive_now_is_read_as_report_zone_wall_clock():
    w = compute_windows(45, 30, 60, now=datetime(2024, 6, 10), tz=DENVER)
    assert w.event.start.replace(tzinfo=None) == datetime(2024, 4, 26)
    assert w.prep.end.replace(tzinfo=None) == datetime(2024, 8, 9)


def test_utc_instant_is_converted_before_truncating():
    # 03:00 UTC on the 11th is still the evening of the 10th in Denver
    now = pytz.utc.localize(datetime(2024, 6, 11, 3, 0))
    assert start_of_day(now, DENVER) == DENVER.localize(datetime(2024, 6, 10))
    assert end_of_day(now, DENVER).day == 10


def test_day_offsets_keep_midnight_across_dst():
    # DST started 10 March 2024 in Denver
    w = compute_windows(10, 0, 0, now=DENVER.localize(datetime(2024, 3, 15, 9)), tz=DENVER)
    assert w.event.start.hour == 0
    assert w.event.start.date() == datetime(2024, 3, 5).date()
    assert w.event.start.utcoffset() != w.event.end.utcoffset()


def test_windows_for_uses_settings(settings):
    w = windows_for(settings, now=DENVER.localize(datetime(2024, 6, 10, 12)))
    assert w.event.start == DENVER.localize(datetime(2024, 4, 26))
    assert w.prep.start == DENVER.localize(datetime(2024, 5, 11))
