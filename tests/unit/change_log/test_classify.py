# tests/unit/change_log/test_classify.py
import pytest

from services.change_log.classify import classify, classify_record, normalize_verb
from services.change_log.models import RawChangeRecord


@pytest.mark.parametrize("note, verb, item", [
    ("Added: 12ft truss section", "added", "12ft truss section"),
    ("UPDATED:   LED par can x4  ", "updated", "LED par can x4"),
    ("changed: cable run to 50ft", "changed", "cable run to 50ft"),
    ("Deleted:Black drape", "deleted", "Black drape"),
])
def test_leading_verb_with_colon(note, verb, item):
    result = classify(note)
    assert result.verb == verb
    assert result.item == item


def test_product_update_prefix_is_stripped():
    result = classify("Product Update: Add: 12ft truss section")
    assert result.verb == "added"
    assert result.item == "12ft truss section"


def test_product_copy_prefix_without_colon_after_verb():
    result = classify("product copy: Delete 2 round tables")
    assert result.verb == "deleted"
    assert result.item == "2 round tables"


@pytest.mark.parametrize("token, canonical", [
    ("Add", "added"), ("Adds", "added"), ("added", "added"),
    ("Delete", "deleted"), ("Deletes", "deleted"),
    ("Update", "updated"), ("updates", "updated"),
    ("Change", "changed"), ("CHANGED", "changed"),
])
def test_inflections_collapse_to_past_tense(token, canonical):
    assert normalize_verb(token) == canonical


def test_verb_inside_note_keeps_whole_note():
    note = "Client asked, quantity changed on stage deck"
    result = classify(note)
    assert result.verb == "changed"
    assert result.item == note


def test_first_verb_wins():
    note = "Mic stand was added then deleted"
    assert classify(note).verb == "added"


def test_no_verb():
    result = classify("Swapped 2 x wireless mics")
    assert result.verb is None
    assert result.item == "Swapped 2 x wireless mics"


def test_product_copy_prefix_alone_has_no_verb():
    note = "Product Copy: 3 cocktail tables"
    assert classify(note).verb is None
    assert classify(note).item == note


@pytest.mark.parametrize("note", ["", None, "   "])
def test_empty_note(note):
    result = classify(note)
    assert result.verb is None
    assert result.item == ""


def test_verb_must_be_a_whole_word():
    # "Addendum" is not "Add"
    result = classify("Addendum to rider")
    assert result.verb is None


def test_verb_alone_falls_back_to_whole_note():
    result = classify("Added")
    assert result.verb == "added"
    assert result.item == "Added"


def test_classify_record_show_fallbacks():
    by_org = RawChangeRecord(order_id=7, org_name="Acme", client_name="Other", note="Add: chair")
    by_client = RawChangeRecord(order_id=7, client_name="Acme", note="Add: chair")
    by_job = RawChangeRecord(order_id=7, note="Add: chair")

    assert classify_record(by_org).show == "Acme"
    assert classify_record(by_client).show == "Acme"
    assert classify_record(by_job).show == "Job 7"

    change = classify_record(by_org)
    assert change.verb == "added"
    assert change.item == "chair"
    assert change.note == "Add: chair"
