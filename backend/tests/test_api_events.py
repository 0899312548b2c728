"""HTTP-level tests for the events API."""

from __future__ import annotations

import pytest

from agenda.core.errors import StoreError
from agenda.db import crud

API = "/api/v1"


def _create(client, **overrides) -> dict:
    payload = {
        "title": "Checkup",
        "start": "2024-01-10T09:00:00Z",
        "end": "2024-01-10T09:30:00Z",
    }
    payload.update(overrides)
    r = client.post(f"{API}/events", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def _list(client, **params) -> list[dict]:
    r = client.get(f"{API}/events", params=params)
    assert r.status_code == 200, r.text
    return r.json()


def test_health(client):
    r = client.get(f"{API}/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


def test_create_returns_201_with_camel_case_body(client):
    body = _create(client, allDay=True, color="#3174ad")

    assert body["id"]
    assert body["title"] == "Checkup"
    assert body["start"] == "2024-01-10T09:00:00Z"
    assert body["end"] == "2024-01-10T09:30:00Z"
    assert body["allDay"] is True
    assert body["color"] == "#3174ad"
    assert body["description"] is None
    assert "createdAt" in body and "updatedAt" in body


def test_create_invalid_returns_400_with_every_field(client):
    r = client.post(
        f"{API}/events",
        json={"title": "", "start": "2024-01-10T09:00:00Z", "end": "2024-01-10T08:00:00Z"},
    )

    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    assert sorted(body["details"]["fieldErrors"]) == ["end", "title"]
    assert _list(client) == []


def test_create_with_malformed_json_returns_400(client):
    r = client.post(
        f"{API}/events",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_create_without_body_returns_400(client):
    r = client.post(f"{API}/events")
    assert r.status_code == 400
    assert "body" in r.json()["details"]["fieldErrors"]


def test_create_then_get_round_trips(client):
    created = _create(client)

    r = client.get(f"{API}/events/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_get_missing_returns_404(client):
    r = client.get(f"{API}/events/missing")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}


# ---------------------------------------------------------------------------
# Range queries
# ---------------------------------------------------------------------------


def test_checkup_scenario(client):
    checkup = _create(client)

    hits = _list(client, start="2024-01-10T09:15:00Z", end="2024-01-10T09:45:00Z")
    assert [e["id"] for e in hits] == [checkup["id"]]

    assert _list(client, start="2024-01-10T09:30:00Z", end="2024-01-10T10:00:00Z") == []


def test_adjacent_events_are_not_double_counted(client):
    a = _create(client, title="A", start="2024-01-10T09:00:00Z", end="2024-01-10T10:00:00Z")
    b = _create(client, title="B", start="2024-01-10T10:00:00Z", end="2024-01-10T11:00:00Z")

    first = _list(client, start="2024-01-10T09:00:00Z", end="2024-01-10T10:00:00Z")
    second = _list(client, start="2024-01-10T10:00:00Z", end="2024-01-10T11:00:00Z")

    assert [e["id"] for e in first] == [a["id"]]
    assert [e["id"] for e in second] == [b["id"]]


def test_list_without_range_is_ordered_by_start(client):
    late = _create(client, title="Late", start="2024-01-12T09:00:00Z", end="2024-01-12T10:00:00Z")
    early = _create(client, title="Early", start="2024-01-08T09:00:00Z", end="2024-01-08T10:00:00Z")

    assert [e["id"] for e in _list(client)] == [early["id"], late["id"]]
    assert len(_list(client, start="2024-01-11T00:00:00Z")) == 2


def test_list_with_bad_bound_returns_400(client):
    r = client.get(f"{API}/events", params={"start": "yesterday", "end": "2024-01-10T10:00:00Z"})
    assert r.status_code == 400
    assert "start" in r.json()["details"]["fieldErrors"]


def test_store_failure_returns_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreError("Failed to fetch events")

    monkeypatch.setattr(crud, "list_events", broken)

    r = client.get(f"{API}/events")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch events"}


# ---------------------------------------------------------------------------
# Update / replace / delete
# ---------------------------------------------------------------------------


def test_patch_updates_only_supplied_fields(client):
    created = _create(client, title="X", color="#fff")

    r = client.patch(f"{API}/events/{created['id']}", json={"title": "Y"})

    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Y"
    assert body["color"] == "#fff"
    assert body["start"] == created["start"]


def test_patch_that_would_invert_interval_is_rejected(client):
    created = _create(client)

    r = client.patch(f"{API}/events/{created['id']}", json={"end": "2024-01-10T08:00:00Z"})

    assert r.status_code == 400
    assert list(r.json()["details"]["fieldErrors"]) == ["end"]
    assert client.get(f"{API}/events/{created['id']}").json()["end"] == created["end"]


def test_patch_missing_event_returns_404(client):
    r = client.patch(f"{API}/events/missing", json={"title": "Y"})
    assert r.status_code == 404


def test_put_replaces_all_fields(client):
    created = _create(client, color="#fff", location="Clinic")

    r = client.put(
        f"{API}/events/{created['id']}",
        json={"title": "Follow-up", "start": "2024-01-11T09:00:00Z", "end": "2024-01-11T10:00:00Z"},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["id"] == created["id"]
    assert body["title"] == "Follow-up"
    assert body["color"] is None
    assert body["location"] is None


def test_put_requires_full_payload(client):
    created = _create(client)

    r = client.put(f"{API}/events/{created['id']}", json={"title": "Only title"})

    assert r.status_code == 400
    assert sorted(r.json()["details"]["fieldErrors"]) == ["end", "start"]


def test_delete_then_get_returns_404(client):
    created = _create(client)

    r = client.delete(f"{API}/events/{created['id']}")
    assert r.status_code == 204
    assert r.content == b""

    assert client.get(f"{API}/events/{created['id']}").status_code == 404
    assert client.delete(f"{API}/events/{created['id']}").status_code == 404


# ---------------------------------------------------------------------------
# Collection routes addressed by ?id=
# ---------------------------------------------------------------------------


def test_collection_patch_and_delete_by_query_id(client):
    created = _create(client)

    r = client.patch(f"{API}/events", params={"id": created["id"]}, json={"location": "Room 4"})
    assert r.status_code == 200
    assert r.json()["location"] == "Room 4"

    r = client.delete(f"{API}/events", params={"id": created["id"]})
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert _list(client) == []


@pytest.mark.parametrize("method", ["patch", "delete"])
def test_collection_routes_require_id(client, method):
    kwargs = {"json": {"title": "Y"}} if method == "patch" else {}
    r = getattr(client, method)(f"{API}/events", **kwargs)

    assert r.status_code == 400
    assert "id" in r.json()["details"]["fieldErrors"]


def test_collection_patch_reports_missing_id_with_body_errors(client):
    r = client.patch(f"{API}/events", json={"title": ""})

    assert r.status_code == 400
    assert sorted(r.json()["details"]["fieldErrors"]) == ["id", "title"]


# ---------------------------------------------------------------------------
# Timestamps at the edge of the representable range
# ---------------------------------------------------------------------------


def test_create_with_out_of_range_offset_returns_400(client):
    r = client.post(
        f"{API}/events",
        json={"title": "Far", "start": "9999-12-31T20:00:00-05:00", "end": "9999-12-31T21:00:00-05:00"},
    )

    assert r.status_code == 400
    assert sorted(r.json()["details"]["fieldErrors"]) == ["end", "start"]
    assert _list(client) == []


def test_patch_with_out_of_range_offset_returns_400(client):
    created = _create(client)

    r = client.patch(f"{API}/events/{created['id']}", json={"start": "0001-01-01T00:00:00+01:00"})

    assert r.status_code == 400
    assert list(r.json()["details"]["fieldErrors"]) == ["start"]


def test_put_with_out_of_range_offset_returns_400(client):
    created = _create(client)

    r = client.put(
        f"{API}/events/{created['id']}",
        json={"title": "Far", "start": "2024-01-10T09:00:00Z", "end": "9999-12-31T21:00:00-05:00"},
    )

    assert r.status_code == 400
    assert list(r.json()["details"]["fieldErrors"]) == ["end"]


def test_list_with_out_of_range_bound_returns_400(client):
    r = client.get(
        f"{API}/events",
        params={"start": "9999-12-31T20:00:00-05:00", "end": "9999-12-31T21:00:00-05:00"},
    )

    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"
    assert sorted(r.json()["details"]["fieldErrors"]) == ["end", "start"]
