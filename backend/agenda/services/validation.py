"""Turns untrusted request payloads into typed write requests.

Every rule is checked in a single pass so callers get the complete list of
violations instead of fixing them one round-trip at a time.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import FORM_FIELD, ValidationError, Violation
from ..core.timeutil import as_utc
from ..schemas.events import EventCreate, EventPatch

ModelT = TypeVar("ModelT", bound=BaseModel)

ORDERING_MESSAGE = "end must be greater than start"


def check_ordering(start: datetime, end: datetime) -> List[Violation]:
    if end <= start:
        return [Violation("end", ORDERING_MESSAGE)]
    return []


def _parse(model: Type[ModelT], payload: Any) -> Tuple[Optional[ModelT], List[Violation]]:
    if not isinstance(payload, Mapping):
        return None, [Violation("body", "expected a JSON object")]
    try:
        return model.model_validate(dict(payload)), []
    except PydanticValidationError as exc:
        violations = []
        for error in exc.errors():
            loc = error.get("loc") or ()
            field = str(loc[0]) if loc else FORM_FIELD
            violations.append(Violation(field, error["msg"]))
        return None, violations


def _bounds(payload: Any, failed: set) -> Tuple[Optional[datetime], Optional[datetime]]:
    # start/end may be individually valid while another field is not
    if failed & {"start", "end", "body"} or "start" not in payload or "end" not in payload:
        return None, None
    bounds = EventPatch.model_validate({"start": payload["start"], "end": payload["end"]})
    return bounds.start, bounds.end


def _validate(model: Type[ModelT], payload: Any) -> ModelT:
    value, violations = _parse(model, payload)
    if value is not None:
        start, end = value.start, value.end
    else:
        start, end = _bounds(payload, {v.field for v in violations})
    if start is not None and end is not None:
        violations.extend(check_ordering(start, end))
    if violations:
        raise ValidationError(violations)
    return value


def validate_create(payload: Any) -> EventCreate:
    """Validate a create payload; raises ValidationError listing every problem."""
    return _validate(EventCreate, payload)


def validate_patch(payload: Any) -> EventPatch:
    """Validate a sparse update.

    Ordering is only checked when both bounds are in the same patch; the
    comparison against stored values happens in the store gateway.
    """
    return _validate(EventPatch, payload)


def validate_range(
    start: Optional[datetime], end: Optional[datetime]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Normalize list query bounds to UTC, reporting bounds that cannot be."""
    violations = []
    bounds = []
    for field, value in (("start", start), ("end", end)):
        try:
            bounds.append(as_utc(value) if value is not None else None)
        except ValueError as exc:
            violations.append(Violation(field, str(exc)))
    if violations:
        raise ValidationError(violations)
    return bounds[0], bounds[1]
