"""Tests for ui/app.py — HTTP surface over the tracker."""

import base64

import pytest
from fastapi.testclient import TestClient

from habitday.store import load_history
from ui.app import app


@pytest.fixture
def client(workspace):
    return TestClient(app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_get_unvisited_day_returns_template(client, workspace):
    data = client.get("/api/days/2024-06-01").json()
    assert data["day"] == "2024-06-01"
    assert data["progress"] == 0
    assert len(data["sections"]) == 4
    assert data["notes"] == ""
    assert "2024-06-01" in load_history(workspace)


def test_toggle_and_add_habit(client, workspace):
    data = client.post("/api/days/2024-01-01/toggle", json={"section": "Morning", "id": 2}).json()
    assert data["progress"] == 100

    data = client.post("/api/days/2024-01-01/habits", json={"section": "Morning", "title": "Plank"}).json()
    assert data["sections"]["Morning"][-1] == {"id": 3, "title": "Plank", "done": False}
    assert data["progress"] == 67


def test_blank_habit_is_noop(client):
    before = client.get("/api/days/2024-01-01").json()
    after = client.post("/api/days/2024-01-01/habits", json={"section": "Morning", "title": "  "}).json()
    assert after == before


def test_missing_fields_are_rejected(client):
    assert client.post("/api/days/2024-01-01/toggle", json={"section": "Morning"}).status_code == 400
    assert client.post("/api/days/2024-01-01/habits", json={"title": "x"}).status_code == 400


def test_rename_and_delete_habit(client):
    data = client.put("/api/days/2024-01-03/habits/3", json={"section": "Evening", "title": "Read 20p"}).json()
    assert data["sections"]["Evening"][0]["title"] == "Read 20p"
    data = client.delete("/api/days/2024-01-03/habits/3", params={"section": "Evening"}).json()
    assert data["sections"]["Evening"] == []


def test_sections(client):
    data = client.post("/api/days/2024-01-01/sections", json={"name": "Evening"}).json()
    assert data["sections"]["Evening"] == []
    data = client.put("/api/days/2024-01-01/sections/Evening", json={"name": "Night"}).json()
    assert list(data["sections"]) == ["Morning", "Night"]


def test_delete_section_requires_confirmation(client, workspace):
    resp = client.delete("/api/days/2024-01-03/sections/Evening")
    assert resp.status_code == 409
    assert "Evening" in load_history(workspace).days["2024-01-03"].sections

    resp = client.delete("/api/days/2024-01-03/sections/Evening", params={"confirm": "true"})
    assert resp.status_code == 200
    assert "Evening" not in resp.json()["sections"]


def test_delete_section_with_slash_in_name(client):
    client.get("/api/days/2024-06-01")
    resp = client.delete("/api/days/2024-06-01/sections/Без сериалов/фильмов", params={"confirm": "true"})
    assert resp.status_code == 200
    assert "Без сериалов/фильмов" not in resp.json()["sections"]


def test_notes_and_reset(client):
    data = client.put("/api/days/2024-01-02/notes", json={"notes": "earlier bedtime"}).json()
    assert data["notes"] == "earlier bedtime"
    data = client.post("/api/days/2024-01-02/reset").json()
    assert data["notes"] == ""
    assert data["progress"] == 0


def test_history(client):
    data = client.get("/api/history", params={"start": "2024-01-02", "end": "2024-01-05"}).json()
    assert data["labels"] == ["2024-01-02", "2024-01-03"]
    assert data["values"] == [100, 67]
    assert data["lines"] == ["2024-01-02: 100% done", "2024-01-03: 67% done"]
    assert data["chart"] is True


def test_history_single_entry_is_not_chartable(client):
    data = client.get("/api/history", params={"start": "2024-01-07", "end": "2024-01-07"}).json()
    assert data["values"] == [0]
    assert data["chart"] is False


def test_corrupt_history_surfaces_warning(client, workspace):
    (workspace / "habit_history.json").write_text("{nope", encoding="utf-8")
    data = client.get("/api/days/2024-06-01").json()
    assert "Corrupt history" in data["warning"]
    assert list(load_history(workspace).days) == ["2024-06-01"]


def test_persistence_failure_is_503(client, monkeypatch):
    def boom(path, data):
        raise OSError("read-only file system")

    monkeypatch.setattr("habitday.store.write_json_atomic", boom)
    assert client.post("/api/days/2024-01-01/reset").status_code == 503


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Day progress" in resp.text


def test_basic_auth(client, monkeypatch):
    monkeypatch.setenv("HABITDAY_USERNAME", "me")
    monkeypatch.setenv("HABITDAY_PASSWORD", "secret")
    assert client.get("/api/history").status_code == 401
    token = base64.b64encode(b"me:secret").decode()
    resp = client.get("/api/history", headers={"Authorization": f"Basic {token}"})
    assert resp.status_code == 200
