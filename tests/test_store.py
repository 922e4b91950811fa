"""Tests for habitday/store.py — load, snapshot_for, commit."""

import json
import logging

import pytest

from habitday.errors import CorruptHistoryError, PersistenceError
from habitday.models import DaySnapshot, HabitRecord, HistoryStore
from habitday.store import commit, load_history, open_history, save_history, snapshot_for
from habitday.template import default_snapshot


def test_load_history(workspace):
    history = load_history(workspace)
    assert len(history) == 4
    assert history.days["2024-01-01"].notes == "new year"
    assert history.days["2024-01-03"].find("Evening", 3).title == "Read"


def test_load_history_missing_file(empty_workspace):
    assert load_history(empty_workspace).days == {}


def test_load_history_blank_file(empty_workspace):
    (empty_workspace / "habit_history.json").write_text("  \n", encoding="utf-8")
    assert load_history(empty_workspace).days == {}


@pytest.mark.parametrize("blob", [
    "{not json",
    "[1, 2, 3]",
    '{"2024-01-01": "oops"}',
    '{"2024-01-01": {"sections": [1, 2]}}',
    '{"2024-01-01": {"sections": {"A": [{"id": "x"}]}}}',
    '{"2024-01-01": {"sections": {"A": [1, "junk", {"id": 2, "title": "t", "done": false}]}}}',
    '{"2024-01-01": {"sections": {"A": [{"id": 1, "title": "t", "done": "false"}]}}}',
    '{"2024-01-01": {"sections": {"A": [{"id": 1.9, "title": "t", "done": false}]}}}',
    '{"2024-01-01": {"sections": {"A": [{"id": true, "title": "t", "done": false}]}}}',
    '{"2024-01-01": {"sections": {"A": [{"id": 1, "title": 7, "done": false}]}}}',
    '{"2024-01-01": {"sections": {}, "notes": ["x"]}}',
])
def test_load_history_corrupt(empty_workspace, blob):
    (empty_workspace / "habit_history.json").write_text(blob, encoding="utf-8")
    with pytest.raises(CorruptHistoryError) as exc:
        load_history(empty_workspace)
    assert exc.value.path == empty_workspace / "habit_history.json"


def test_open_history_recovers_from_corruption(empty_workspace, caplog):
    path = empty_workspace / "habit_history.json"
    path.write_text("{broken", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="habitday"):
        history, error = open_history(empty_workspace)

    assert history.days == {}
    assert isinstance(error, CorruptHistoryError)
    assert not path.exists()
    aside = empty_workspace / "habit_history.json.corrupt"
    assert aside.read_text(encoding="utf-8") == "{broken"
    assert any("Corrupt history" in r.getMessage() for r in caplog.records)


def test_open_history_clean(workspace):
    history, error = open_history(workspace)
    assert error is None
    assert len(history) == 4


def test_snapshot_for_missing_date_is_default_template():
    snap = snapshot_for(HistoryStore(), "2024-06-01")
    assert snap == default_snapshot()
    assert len(snap.sections) == 4
    assert len(snap.habits()) == 6
    assert all(not h.done for h in snap.habits())
    assert snap.notes == ""


def test_snapshot_for_existing_date(workspace):
    history = load_history(workspace)
    assert snapshot_for(history, "2024-01-01") is history.days["2024-01-01"]


def test_snapshot_for_does_not_add_date():
    history = HistoryStore()
    snapshot_for(history, "2024-06-01")
    assert history.days == {}


def test_commit_round_trip(empty_workspace):
    sections = {"Тренировка": [HabitRecord(id=5, title="Тренировка", done=True)]}
    updated = commit(HistoryStore(), "2024-06-01", sections, "x", empty_workspace)

    assert updated.days["2024-06-01"] == DaySnapshot(sections=sections, notes="x")
    reloaded = load_history(empty_workspace)
    assert reloaded == updated
    raw = json.loads((empty_workspace / "habit_history.json").read_text(encoding="utf-8"))
    assert raw == {
        "2024-06-01": {
            "sections": {"Тренировка": [{"id": 5, "title": "Тренировка", "done": True}]},
            "notes": "x",
        }
    }


def test_commit_keeps_other_days_and_input(workspace):
    history = load_history(workspace)
    updated = commit(history, "2024-01-01", {}, "cleared", workspace)
    assert updated is not history
    assert history.days["2024-01-01"].notes == "new year"
    assert updated.days["2024-01-01"].notes == "cleared"
    assert updated.days["2024-01-02"] == history.days["2024-01-02"]
    assert len(load_history(workspace)) == 4


def test_commit_copies_sections(empty_workspace):
    sections = {"A": [HabitRecord(id=1, title="a")]}
    updated = commit(HistoryStore(), "d", sections, "", empty_workspace)
    sections["A"].append(HabitRecord(id=2, title="b"))
    assert len(updated.days["d"].sections["A"]) == 1


def test_commit_write_failure_raises_persistence_error(empty_workspace, monkeypatch):
    def boom(path, data):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("habitday.store.write_json_atomic", boom)
    with pytest.raises(PersistenceError) as exc:
        commit(HistoryStore(), "2024-06-01", {}, "x", empty_workspace)
    assert exc.value.history is not None
    assert exc.value.history.days["2024-06-01"].notes == "x"
    assert isinstance(exc.value.__cause__, OSError)


def test_save_history_into_directory_fails(empty_workspace):
    (empty_workspace / "habit_history.json").mkdir()
    with pytest.raises(PersistenceError):
        save_history(HistoryStore(days={"d": DaySnapshot()}), empty_workspace)
