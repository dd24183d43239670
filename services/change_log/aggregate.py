# services/change_log/aggregate.py
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .models import ClassifiedChange


def group_by_show(changes: Iterable[ClassifiedChange]) -> Dict[str, List[ClassifiedChange]]:
    """Bucket changes by exact show name, keeping arrival order inside each bucket."""
    grouped: Dict[str, List[ClassifiedChange]] = {}
    for change in changes:
        grouped.setdefault(change.show, []).append(change)
    return grouped


def display_sort_key(change: ClassifiedChange) -> str:
    # Missing event dates sort first
    return change.event_date or ""


def for_display(grouped: Dict[str, List[ClassifiedChange]]) -> List[Tuple[str, List[ClassifiedChange]]]:
    """Shows in name order, each show's changes oldest first."""
    return [(show, sorted(grouped[show], key=display_sort_key)) for show in sorted(grouped)]
