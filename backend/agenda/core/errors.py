"""Error taxonomy shared by the validator, the store gateway and the API.

Callers need to tell three situations apart: the input must be fixed
(``ValidationError``), the referenced event does not exist (``EventNotFound``),
or the store itself failed (``StoreError``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

FORM_FIELD = "__form__"


@dataclass(frozen=True)
class Violation:
    field: str
    message: str


class AgendaError(Exception):
    """Base class for every error raised by the agenda package."""


class ValidationError(AgendaError):
    """Input violated one or more field or cross-field rules."""

    def __init__(self, violations: Iterable[Violation]):
        self.violations: List[Violation] = list(violations)
        fields = ", ".join(sorted({v.field for v in self.violations}))
        super().__init__(f"Validation failed: {fields}")

    @property
    def fields(self) -> List[str]:
        return sorted({v.field for v in self.violations})

    def details(self) -> Dict[str, object]:
        form_errors: List[str] = []
        field_errors: Dict[str, List[str]] = {}
        for v in self.violations:
            if v.field == FORM_FIELD:
                form_errors.append(v.message)
            else:
                field_errors.setdefault(v.field, []).append(v.message)
        return {"formErrors": form_errors, "fieldErrors": field_errors}

    @classmethod
    def from_details(cls, details: Dict[str, object]) -> "ValidationError":
        violations = [Violation(FORM_FIELD, m) for m in details.get("formErrors") or []]
        for field, messages in (details.get("fieldErrors") or {}).items():
            violations.extend(Violation(field, m) for m in messages)
        return cls(violations)


class EventNotFound(AgendaError):
    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event not found: {event_id}")


class StoreError(AgendaError):
    """The durable store failed; the request can be retried later."""
