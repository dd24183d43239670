# services/change_log/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from services.exceptions import MalformedRecordError


def localize(naive: datetime, tz=None) -> datetime:
    """Attach the reporting zone to a wall-clock datetime (host local time when tz is None)."""
    if tz is None:
        return naive.astimezone()
    return tz.localize(naive)


def iso(value: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a trailing Z, the format the report API expects."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any, tz=None, field_name: str = "timestamp") -> Optional[datetime]:
    """
    Parse an upstream timestamp into an aware datetime.

    Naive values are read as wall-clock time in the reporting zone.
    Returns None for empty values; raises MalformedRecordError for anything unreadable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedRecordError(f"Unreadable {field_name}: {value!r}", field=field_name)
    if parsed.tzinfo is None:
        parsed = localize(parsed, tz)
    return parsed


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class RawChangeRecord:
    """One row of the global change log report, as the API returned it."""
    order_id: Optional[int]
    org_name: Optional[str] = None
    client_name: Optional[str] = None
    job_type: Optional[str] = None
    note: str = ""
    change_by: Optional[str] = None
    event_date: Optional[str] = None
    prep_date: Optional[str] = None
    return_date: Optional[str] = None
    job_total: Any = None
    balance_due: Any = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "RawChangeRecord":
        return cls(
            order_id=item.get("orderId"),
            org_name=item.get("orgName"),
            client_name=item.get("clientName"),
            job_type=item.get("jobType"),
            note=item.get("note") or "",
            change_by=item.get("changeBy"),
            event_date=item.get("eventDate"),
            prep_date=item.get("beginDate1"),
            return_date=item.get("beginDate3_5"),
            job_total=item.get("jobTotal"),
            balance_due=item.get("balanceDue"),
        )

    @property
    def show(self) -> str:
        return self.org_name or self.client_name or f"Job {self.order_id}"


@dataclass(frozen=True)
class ClassifiedChange:
    show: str
    order_id: Optional[int]
    item: str
    verb: Optional[str]
    change_by: Optional[str]
    event_date: Optional[str]
    note: str
    prep_date: Optional[str]
    return_date: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "show": self.show,
            "orderId": self.order_id,
            "item": self.item,
            "verb": self.verb,
            "changeBy": self.change_by,
            "eventDate": self.event_date,
            "note": self.note,
            "prepDate": self.prep_date,
            "returnDate": self.return_date,
        }


@dataclass(frozen=True)
class GroupedReport:
    as_of: datetime
    grouped: Dict[str, List[ClassifiedChange]]
    event_days_back: int
    event_window: TimeWindow
    prep_window: TimeWindow
    count: int = field(default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asOf": iso(self.as_of),
            "count": self.count,
            "grouped": {
                show: [change.to_dict() for change in self.grouped[show]]
                for show in sorted(self.grouped)
            },
            "filters": {
                "eventDaysBack": self.event_days_back,
                "prepFrom": iso(self.prep_window.start),
                "prepTo": iso(self.prep_window.end),
            },
        }
