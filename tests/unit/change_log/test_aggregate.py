# tests/unit/change_log/test_aggregate.py
from services.change_log.aggregate import display_sort_key, for_display, group_by_show
from services.change_log.classify import classify_record
from services.change_log.models import RawChangeRecord


def _change(order_id, note="Add: chair", org=None, client=None, event=None):
    return classify_record(RawChangeRecord(order_id=order_id, org_name=org, client_name=client,
                                           note=note, event_date=event))


def test_org_and_client_names_are_separate_keys_unless_identical():
    grouped = group_by_show([
        _change(1, org="Acme"),
        _change(2, client="Acme"),
        _change(3, client="ACME"),
    ])
    # org "Acme" and client "Acme" resolve to the same literal string
    assert list(grouped) == ["Acme", "ACME"]
    assert [c.order_id for c in grouped["Acme"]] == [1, 2]


def test_insertion_order_is_kept():
    grouped = group_by_show([
        _change(1, org="Acme", event="2024-06-09T10:00:00"),
        _change(1, org="Acme", event="2024-06-01T10:00:00"),
    ])
    assert [c.event_date for c in grouped["Acme"]] == ["2024-06-09T10:00:00", "2024-06-01T10:00:00"]


def test_display_order():
    grouped = group_by_show([
        _change(2, org="Zeta", event="2024-06-09T10:00:00"),
        _change(1, org="Acme", event="2024-06-09T10:00:00"),
        _change(1, org="Acme", event=None),
        _change(1, org="Acme", event="2024-06-01T10:00:00"),
    ])
    shows = for_display(grouped)
    assert [show for show, _ in shows] == ["Acme", "Zeta"]
    assert [c.event_date for c in shows[0][1]] == [None, "2024-06-01T10:00:00", "2024-06-09T10:00:00"]


def test_sort_key_for_missing_date():
    assert display_sort_key(_change(1, org="Acme")) == ""


def test_job_fallback_groups():
    grouped = group_by_show([_change(42), _change(42), _change(43)])
    assert list(grouped) == ["Job 42", "Job 43"]
