# services/change_log/classify.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .models import ClassifiedChange, RawChangeRecord


# (token pattern, canonical verb). Add a synonym by adding a row.
VERB_TOKENS: List[Tuple[str, str]] = [
    (r"add(?:ed|s)?", "added"),
    (r"delete[ds]?", "deleted"),
    (r"update[ds]?", "updated"),
    (r"change[ds]?", "changed"),
]

_VERB_ALTERNATION = "|".join(token for token, _ in VERB_TOKENS)

# "Product Update:" / "Product Copy:" are added by the upstream copy tools, not typed by people
_LEADING_VERB_RE = re.compile(
    r"^(?:product\s+(?:update|copy)\s*:\s*)?\s*"
    rf"(?P<verb>{_VERB_ALTERNATION})\b\s*:?\s*(?P<item>.+)$",
    re.I,
)

_ANY_VERB_RE = re.compile(rf"\b(?P<verb>{_VERB_ALTERNATION})\b", re.I)


@dataclass(frozen=True)
class NoteClassification:
    verb: Optional[str]
    item: str


def normalize_verb(token: str) -> Optional[str]:
    for pattern, canonical in VERB_TOKENS:
        if re.fullmatch(pattern, token, re.I):
            return canonical
    return None


@dataclass(frozen=True)
class ClassifierRule:
    name: str
    pattern: re.Pattern
    item_for: Callable[[re.Match, str], str]


CLASSIFIER_RULES: List[ClassifierRule] = [
    # Verb leads the note: the rest of the note is the item
    ClassifierRule("leading_verb", _LEADING_VERB_RE, lambda m, text: m.group("item").strip()),
    # Verb somewhere inside: too weak to cut the item out, keep the whole note
    ClassifierRule("verb_anywhere", _ANY_VERB_RE, lambda m, text: text),
]


def classify(note: Optional[str]) -> NoteClassification:
    """
    Work out what happened to which item from a free-text change note.

    >>> classify("Product Update: Add: 12ft truss section")
    NoteClassification(verb='added', item='12ft truss section')
    """
    text = str(note or "").strip()
    if not text:
        return NoteClassification(verb=None, item="")

    for rule in CLASSIFIER_RULES:
        m = rule.pattern.search(text)
        if m:
            return NoteClassification(verb=normalize_verb(m.group("verb")), item=rule.item_for(m, text))

    return NoteClassification(verb=None, item=text)


def classify_record(record: RawChangeRecord) -> ClassifiedChange:
    """Classify one report row; the show name is fixed here, not at grouping time."""
    result = classify(record.note)
    return ClassifiedChange(
        show=record.show,
        order_id=record.order_id,
        item=result.item,
        verb=result.verb,
        change_by=record.change_by,
        event_date=record.event_date,
        note=record.note,
        prep_date=record.prep_date,
        return_date=record.return_date,
    )
