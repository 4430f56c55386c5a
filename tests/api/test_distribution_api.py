"""Tests for the distribution preview endpoint."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from worklog_engine.api.distribution import get_complexity_scorer, get_settings
from worklog_engine.config.settings import Settings
from worklog_engine.main import app


async def _fake_scorer(items):
    return [{"id": item.id, "score": 7 if item.id == "a" else 3} for item in items]


async def _broken_scorer(items):
    raise TimeoutError("AI request timeout")


@pytest.fixture
def client() -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: Settings(default_target_hours=8.0, max_batch_size=50)
    app.dependency_overrides[get_complexity_scorer] = lambda: _fake_scorer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _entry(entry_id: str, seconds: int = 3600, comment: str = "") -> dict:
    return {
        "id": entry_id,
        "group_key": f"PROJ-{entry_id}",
        "label": f"Task {entry_id}",
        "comment_text": comment,
        "current_seconds": seconds,
    }


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_equal_preview(client: TestClient):
    response = client.post(
        "/distribution/preview",
        json={"entries": [_entry("a"), _entry("b"), _entry("c")], "target_hours": 8.07, "mode": "equal"},
    )

    assert response.status_code == 200
    body = response.json()
    assert [r["new_minutes"] for r in body["results"]] == [162, 161, 161]
    assert body["target_minutes"] == 484
    assert body["total_minutes"] == 484
    assert body["used_fallback"] is False


def test_smart_preview_uses_scorer(client: TestClient):
    response = client.post(
        "/distribution/preview",
        json={"entries": [_entry("a"), _entry("b")], "target_hours": 8, "mode": "smart"},
    )

    assert response.status_code == 200
    body = response.json()
    assert [r["new_minutes"] for r in body["results"]] == [336, 144]
    assert [r["new_seconds"] for r in body["results"]] == [20160, 8640]
    assert [r["delta_minutes"] for r in body["results"]] == [276, 84]
    assert [w["source"] for w in body["weights"]] == ["scored", "scored"]


def test_smart_preview_reports_fallback(client: TestClient):
    app.dependency_overrides[get_complexity_scorer] = lambda: _broken_scorer

    response = client.post(
        "/distribution/preview",
        json={"entries": [_entry("a", comment="x" * 60), _entry("b")], "target_hours": 8, "mode": "ai"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["used_fallback"] is True
    assert body["warnings"]
    assert [r["new_minutes"] for r in body["results"]] == [360, 120]


def test_target_defaults_to_daily_target(client: TestClient):
    response = client.post("/distribution/preview", json={"entries": [_entry("a"), _entry("b")]})

    assert response.status_code == 200
    assert response.json()["total_minutes"] == 480


def test_empty_entries_is_bad_request(client: TestClient):
    response = client.post("/distribution/preview", json={"entries": [], "target_hours": 8})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "EMPTY_ENTRIES"


def test_target_out_of_range_is_bad_request(client: TestClient):
    response = client.post("/distribution/preview", json={"entries": [_entry("a")], "target_hours": 25})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "TARGET_OUT_OF_RANGE"


def test_negative_duration_is_rejected(client: TestClient):
    response = client.post("/distribution/preview", json={"entries": [_entry("a", seconds=-1)], "target_hours": 8})

    assert response.status_code == 422


def test_unknown_mode_is_rejected(client: TestClient):
    response = client.post(
        "/distribution/preview",
        json={"entries": [_entry("a")], "target_hours": 8, "mode": "random"},
    )

    assert response.status_code == 422


def test_duplicate_worklog_ids_are_bad_request(client: TestClient):
    response = client.post("/distribution/preview", json={"entries": [_entry("a"), _entry("a")], "target_hours": 8})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "DUPLICATE_ENTRY_ID"
