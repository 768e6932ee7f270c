import datetime as _dt

import pytest

from scicalc.history import HISTORY_LIMIT, TIMESTAMP_FORMAT, HistoryLedger


def test_newest_first(ledger):
    ledger.add("1+1", "2")
    ledger.add("2+2", "4")
    assert [(r.expression, r.result) for r in ledger.list()] == [("2+2", "4"), ("1+1", "2")]


def test_capped_at_twenty(ledger):
    for i in range(25):
        ledger.add(f"{i}+0", str(i))
    records = ledger.list()
    assert len(records) == HISTORY_LIMIT == 20
    assert records[0].expression == "24+0"
    assert records[-1].expression == "5+0"
    assert not {f"{i}+0" for i in range(5)} & {r.expression for r in records}


def test_ids_unique_with_a_stopped_clock():
    now = _dt.datetime(2026, 10, 19, 15, 4, 5)
    ledger = HistoryLedger(clock=lambda: now)
    ids = {ledger.add("1", "1").id for _ in range(50)}
    assert len(ids) == 50


def test_record_fields(ledger, clock):
    record = ledger.add("sqrt(16)", "4")
    assert record.timestamp == _dt.datetime(2026, 10, 19, 15, 4, 5).strftime(TIMESTAMP_FORMAT)
    assert str(record) == "sqrt(16) = 4"
    with pytest.raises(AttributeError):
        record.result = "5"


def test_clear(ledger):
    ledger.add("1", "1")
    ledger.clear()
    assert ledger.list() == ()
    assert len(ledger) == 0
    ledger.clear()


def test_list_is_a_snapshot(ledger):
    ledger.add("1", "1")
    snapshot = ledger.list()
    ledger.add("2", "2")
    assert len(snapshot) == 1
    assert len(ledger) == 2


def test_get_and_iter(ledger):
    first = ledger.add("1", "1")
    second = ledger.add("2", "2")
    assert ledger.get(first.id) is first
    assert ledger.get("missing") is None
    assert list(ledger) == [second, first]


def test_custom_capacity(clock):
    ledger = HistoryLedger(capacity=2, clock=clock)
    for i in range(3):
        ledger.add(str(i), str(i))
    assert [r.expression for r in ledger] == ["2", "1"]
    with pytest.raises(ValueError):
        HistoryLedger(capacity=0)
