"""Thin requests-based client for the events API.

Maps the API's status codes back onto the package's error types so callers
can tell bad input, missing events and store outages apart.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import requests

from .core.errors import EventNotFound, StoreError, ValidationError
from .schemas.events import EventOut

API = "http://localhost:8000/api/v1"  # adjust if running on docker-compose


def _jsonable(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in payload.items()}


class EventsClient:
    def __init__(self, base_url: str = API, session=None, timeout: Optional[float] = 10.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, event_id: Optional[str] = None, **kwargs):
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        r = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        if r.status_code == 400:
            raise ValidationError.from_details(r.json().get("details", {}))
        if r.status_code == 404:
            raise EventNotFound(event_id or path)
        if r.status_code >= 500:
            raise StoreError(r.json().get("error", f"HTTP {r.status_code}"))
        r.raise_for_status()
        return r

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health").json()

    def create(self, payload: Mapping[str, Any]) -> EventOut:
        r = self._request("POST", "/events", json=_jsonable(payload))
        return EventOut.model_validate(r.json())

    def list(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[EventOut]:
        params = {}
        if start is not None and end is not None:
            params = {"start": start.isoformat(), "end": end.isoformat()}
        r = self._request("GET", "/events", params=params)
        return [EventOut.model_validate(e) for e in r.json()]

    def get(self, event_id: str) -> Optional[EventOut]:
        try:
            r = self._request("GET", f"/events/{event_id}", event_id=event_id)
        except EventNotFound:
            return None
        return EventOut.model_validate(r.json())

    def replace(self, event_id: str, payload: Mapping[str, Any]) -> EventOut:
        r = self._request("PUT", f"/events/{event_id}", event_id=event_id, json=_jsonable(payload))
        return EventOut.model_validate(r.json())

    def update(self, event_id: str, changes: Mapping[str, Any]) -> EventOut:
        r = self._request("PATCH", f"/events/{event_id}", event_id=event_id, json=_jsonable(changes))
        return EventOut.model_validate(r.json())

    def delete(self, event_id: str) -> None:
        self._request("DELETE", f"/events/{event_id}", event_id=event_id)


if __name__ == "__main__":
    print("--- Testing events API ---")
    client = EventsClient()
    print("Health:", client.health())
    created = client.create({
        "title": "Checkup",
        "start": "2024-01-10T09:00:00Z",
        "end": "2024-01-10T09:30:00Z",
        "location": "Clinic",
    })
    print("Create event:", created)
    print("List events:", client.list())
    print("Update event:", client.update(created.id, {"color": "#3174ad"}))
    client.delete(created.id)
    print("Deleted:", created.id, "->", client.get(created.id))
