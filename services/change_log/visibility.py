# services/change_log/visibility.py
from __future__ import annotations

import re
import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from services.exceptions import MalformedRecordError
from .models import RawChangeRecord, TimeWindow, localize, parse_timestamp
from .windows import days_from, start_of_day


logger = logging.getLogger(__name__)

# A bare "labor"/"price" anywhere drops the row, including "Labor speaker stand".
_LABOR_RE = re.compile(r"(^labor\b|labor\b|labor\s*[-:])", re.I)
_PRICE_RE = re.compile(r"(^price\b|price\b|price\s*[-:])", re.I)

NOISE_PATTERNS = (_LABOR_RE, _PRICE_RE)

PREP_LEAD_DAYS = 3


def is_noise(note: Optional[str]) -> bool:
    text = (note or "").lower()
    return any(p.search(text) for p in NOISE_PATTERNS)


def _required(record: RawChangeRecord, attr: str, tz) -> datetime:
    value = parse_timestamp(getattr(record, attr), tz, field_name=attr)
    if value is None:
        raise MalformedRecordError(f"Order {record.order_id} has no {attr}", field=attr)
    return value


def in_recency_window(record: RawChangeRecord, today: datetime, tz=None) -> bool:
    """
    Keep a job from three days before prep through its return day, and only changes made in that span.

    Days are compared in the reporting zone, so a job stays visible for the whole of its return day.

    Raises:
        MalformedRecordError: if prep, return or event timestamps are missing or unreadable.
    """
    prep = _required(record, "prep_date", tz)
    returned = _required(record, "return_date", tz)
    event = _required(record, "event_date", tz)

    prep_minus_3 = days_from(start_of_day(prep, tz), -PREP_LEAD_DAYS, tz)
    relevant = TimeWindow(prep_minus_3, start_of_day(returned, tz))
    return relevant.contains(start_of_day(today, tz)) and event >= prep_minus_3


class VisibilityFilter:
    """Decides which report rows make it onto the board."""

    def __init__(self, policy: str = "query", tz=None):
        if policy not in ("query", "recency"):
            raise ValueError(f"Unknown visibility policy: {policy}")
        self.policy = policy
        self.tz = tz

    @classmethod
    def from_settings(cls, settings) -> "VisibilityFilter":
        return cls(policy=settings.visibility_policy, tz=settings.tz)

    def reason_to_drop(self, record: RawChangeRecord, today: datetime) -> Optional[str]:
        if is_noise(record.note):
            return "noise"
        if self.policy == "query":
            # the report query already limited event and prep dates
            return None
        try:
            if not in_recency_window(record, today, self.tz):
                return "out_of_window"
        except MalformedRecordError as e:
            logger.debug(f"Dropping malformed row: {e.message}")
            return "malformed"
        return None

    def apply(self, records: Iterable[RawChangeRecord], today: Optional[datetime] = None) -> List[RawChangeRecord]:
        today = today or (datetime.now(self.tz) if self.tz is not None else datetime.now().astimezone())
        kept, dropped = self.partition(records, today)
        if dropped:
            logger.info(f"Visibility filter ({self.policy}) dropped rows: {dict(dropped)}")
        return kept

    def partition(self, records: Iterable[RawChangeRecord], today: datetime) -> Tuple[List[RawChangeRecord], Counter]:
        if today.tzinfo is None:
            today = localize(today, self.tz)
        kept: List[RawChangeRecord] = []
        dropped: Counter = Counter()
        for record in records:
            reason = self.reason_to_drop(record, today)
            if reason:
                dropped[reason] += 1
            else:
                kept.append(record)
        return kept, dropped
