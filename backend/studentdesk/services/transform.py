# studentdesk/services/transform.py
"""
Mapping between the record store's wire shape and the in-memory Student.

Inbound:  {"id"|"uuid": 7, "class": 5, "siblings": 1, "gpa": 8.5, ...}
          -> Student(id="7", grade_level=5, sibling_count=1, gpa="8.5", ...)
Outbound: StudentDraft -> {"name", "class", "sex", "age", "siblings", "gpa": <float>}

Outbound drafts are re-checked by ensure_valid_draft(), which raises ValidationFailed, so a
draft that skipped field validation never reaches the store. Inbound decode errors (KeyError,
TypeError, ValueError, pydantic ValidationError) are turned into RequestFailed by the store client.
"""

import logging
from typing import Any, Dict, Mapping

from studentdesk.core.exceptions import ValidationFailed
from studentdesk.models.student import GPA_MESSAGE, Student, StudentDraft, parse_gpa

logger = logging.getLogger(__name__)

# Wire keys that may carry the store identifier, in order of preference
WIRE_ID_KEYS = ("id", "uuid", "_id")

# wire name -> canonical name
WIRE_FIELD_RENAMES = {
    "class": "grade_level",
    "siblings": "sibling_count",
}


def _stringify_id(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Invalid student identifier: {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise TypeError(f"Invalid student identifier: {value!r}")


def _pop_identifier(data: Dict[str, Any]) -> str:
    found = [key for key in WIRE_ID_KEYS if key in data]
    if not found:
        raise KeyError("Student payload has no identifier field")
    raw_id = data[found[0]]
    for key in found:
        data.pop(key)
    return _stringify_id(raw_id)


def student_from_wire(payload: Mapping[str, Any]) -> Student:
    """Builds a Student from one wire record."""
    if not isinstance(payload, Mapping):
        raise TypeError(f"Expected a student object, got {type(payload).__name__}")

    data = dict(payload)
    student_id = _pop_identifier(data)
    for wire_name, canonical_name in WIRE_FIELD_RENAMES.items():
        if wire_name in data:
            data[canonical_name] = data.pop(wire_name)
    if "gpa" in data and data["gpa"] is not None:
        data["gpa"] = str(data["gpa"])

    return Student(id=student_id, **data)


def ensure_valid_draft(draft: StudentDraft) -> float:
    """Returns the draft's GPA as a number, or raises ValidationFailed."""
    gpa = parse_gpa(draft.gpa) if isinstance(draft.gpa, str) else None
    if gpa is None:
        # Drafts built with model_construct skip field validation
        raise ValidationFailed({"gpa": GPA_MESSAGE})
    return gpa


def student_to_wire(draft: StudentDraft) -> Dict[str, Any]:
    """Builds the create/update request body for a validated draft."""
    gpa = ensure_valid_draft(draft)
    return {
        "name": draft.name,
        "class": draft.grade_level,
        "sex": draft.sex.value,
        "age": draft.age,
        "siblings": draft.sibling_count,
        "gpa": gpa,
    }


def created_id_from_wire(payload: Mapping[str, Any]) -> str:
    """Extracts the new identifier from a create response ({"id": n})."""
    if not isinstance(payload, Mapping):
        raise TypeError(f"Expected an object from create, got {type(payload).__name__}")
    return _pop_identifier(dict(payload))
