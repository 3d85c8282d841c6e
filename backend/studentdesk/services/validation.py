# studentdesk/services/validation.py

import logging
from typing import Any, Dict, Mapping, Optional

from studentdesk.core.exceptions import ValidationFailed
from studentdesk.models.enums import Sex
from studentdesk.models.student import GPA_MESSAGE, StudentDraft, parse_gpa

logger = logging.getLogger(__name__)

# Values a blank "add student" form starts with
DEFAULT_FORM: Dict[str, Any] = {
    "name": "",
    "grade_level": 1,
    "sex": Sex.MALE.value,
    "age": 18,
    "sibling_count": 0,
    "gpa": "",
}

# field -> (min, max, message)
INT_FIELD_RULES = {
    "grade_level": (1, 12, "Class must be between 1 and 12"),
    "age": (1, 100, "Age must be between 1 and 100"),
    "sibling_count": (0, 20, "Siblings must be between 0 and 20"),
}


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def validate_student_form(form: Mapping[str, Any]) -> StudentDraft:
    """
    Validates raw form values and returns a StudentDraft.

    Every failing field is reported in one ValidationFailed. Nothing here touches the
    record store or the view state.
    """
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    name = form.get("name")
    if not isinstance(name, str) or not name.strip():
        errors["name"] = "Name is required"
    else:
        cleaned["name"] = name

    for field, (low, high, message) in INT_FIELD_RULES.items():
        number = _parse_int(form.get(field))
        if number is None or number < low or number > high:
            errors[field] = message
        else:
            cleaned[field] = number

    sex = form.get("sex")
    try:
        cleaned["sex"] = Sex(sex)
    except ValueError:
        errors["sex"] = "Sex must be male or female"

    gpa = form.get("gpa")
    if gpa is None or (isinstance(gpa, str) and not gpa.strip()):
        errors["gpa"] = "GPA is required"
    else:
        gpa_text = str(gpa).strip()
        if parse_gpa(gpa_text) is None:
            errors["gpa"] = GPA_MESSAGE
        else:
            cleaned["gpa"] = gpa_text

    if errors:
        logger.info(f"Student form rejected: {sorted(errors)}")
        raise ValidationFailed(errors)

    return StudentDraft(**cleaned)
