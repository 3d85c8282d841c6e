# studentdesk/state/view_pipeline.py
"""
Filtering and sorting of the in-memory student list.

filter_and_sort_students() is pure: it never mutates its input and returns a new list, so it
can be re-run on every render. Display order is derived here and never stored back.
"""

import locale
import logging
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from studentdesk.core.config import GPA_SORT_NUMERIC
from studentdesk.models.enums import SortDirection, SortKey
from studentdesk.models.student import Student
from studentdesk.models.view import FilterConfig, SortConfig

logger = logging.getLogger(__name__)

TEXT_SORT_KEYS = {SortKey.ID, SortKey.NAME, SortKey.SEX, SortKey.GPA}


def matches_filters(student: Student, filters: FilterConfig) -> bool:
    """True when the student satisfies every filter that is set."""
    if filters.name and filters.name.lower() not in student.name.lower():
        return False
    if filters.grade_level is not None and student.grade_level != filters.grade_level:
        return False
    if filters.sex is not None and student.sex != filters.sex:
        return False
    if filters.min_age is not None and student.age < filters.min_age:
        return False
    if filters.max_age is not None and student.age > filters.max_age:
        return False
    return True


def _as_text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _text_sort_key(value: str) -> Tuple[str, str]:
    # Case-insensitive collation first, raw value breaks ties between case variants
    return (locale.strxfrm(value.casefold()), value)


def _gpa_numeric_key(value: str) -> Tuple[int, Union[Decimal, Tuple[str, str]]]:
    try:
        number = Decimal(value)
    except InvalidOperation:
        number = None
    if number is None or not number.is_finite():
        # Unparseable GPAs sort after all numeric ones
        return (1, _text_sort_key(value))
    return (0, number)


def _sort_key_for(key: SortKey, numeric_gpa: bool) -> Callable[[Student], Any]:
    if key == SortKey.GPA and numeric_gpa:
        return lambda student: _gpa_numeric_key(student.gpa)
    if key in TEXT_SORT_KEYS:
        field = key.value
        return lambda student: _text_sort_key(_as_text(getattr(student, field)))
    field = key.value
    return lambda student: getattr(student, field)


def sort_students(
    students: Sequence[Student],
    sort_config: SortConfig,
    numeric_gpa: Optional[bool] = None,
) -> List[Student]:
    """Returns a sorted copy of ``students`` by the single active key."""
    if numeric_gpa is None:
        numeric_gpa = GPA_SORT_NUMERIC
    return sorted(
        students,
        key=_sort_key_for(sort_config.key, numeric_gpa),
        reverse=sort_config.direction == SortDirection.DESC,
    )


def filter_and_sort_students(
    students: Sequence[Student],
    filters: Optional[FilterConfig] = None,
    sort_config: Optional[SortConfig] = None,
    numeric_gpa: Optional[bool] = None,
) -> List[Student]:
    filters = filters or FilterConfig()
    sort_config = sort_config or SortConfig()
    filtered = [student for student in students if matches_filters(student, filters)]
    return sort_students(filtered, sort_config, numeric_gpa=numeric_gpa)


def next_sort_config(current: SortConfig, key: Union[SortKey, str]) -> SortConfig:
    """Sort toggle: same key flips the direction, a new key starts ascending."""
    key = SortKey(key)
    if current.key == key:
        direction = SortDirection.DESC if current.direction == SortDirection.ASC else SortDirection.ASC
        return SortConfig(key=key, direction=direction)
    return SortConfig(key=key, direction=SortDirection.ASC)
