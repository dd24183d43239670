# services/change_log/runner.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .aggregate import group_by_show
from .classify import classify_record
from .models import GroupedReport, localize
from .report_client import ReportClient
from .visibility import VisibilityFilter
from .windows import windows_for


logger = logging.getLogger(__name__)


def build_change_report(settings, now: Optional[datetime] = None, http_client=None) -> GroupedReport:
    """
    Fetch, filter, classify and group the change log in one pass.

    Nothing is cached between calls. Any UpstreamError from the report API
    propagates and no partial report is returned.
    """
    tz = settings.tz
    if now is None:
        now = datetime.now(tz) if tz is not None else datetime.now().astimezone()
    elif now.tzinfo is None:
        now = localize(now, tz)

    windows = windows_for(settings, now=now)
    logger.info(
        f"Building change report: events {windows.event.start.isoformat()} to {windows.event.end.isoformat()}, "
        f"prep {windows.prep.start.isoformat()} to {windows.prep.end.isoformat()}"
    )

    records = ReportClient(settings, http_client=http_client).fetch_all(windows.event, windows.prep)
    visible = VisibilityFilter.from_settings(settings).apply(records, today=now)
    changes = [classify_record(record) for record in visible]

    if changes:
        logger.debug(f"Sample row: {changes[0]}")

    return GroupedReport(
        as_of=now,
        grouped=group_by_show(changes),
        event_days_back=settings.event_days_back,
        event_window=windows.event,
        prep_window=windows.prep,
        count=len(changes),
    )
