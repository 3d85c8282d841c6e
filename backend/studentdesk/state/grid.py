# studentdesk/state/grid.py

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from studentdesk.core.exceptions import RequestFailed, ValidationFailed
from studentdesk.models.enums import SortDirection, SortKey
from studentdesk.models.student import Student
from studentdesk.models.view import FilterConfig, SortConfig
from studentdesk.services.validation import DEFAULT_FORM, validate_student_form
from studentdesk.state.student_state import StudentViewState
from studentdesk.state.view_pipeline import filter_and_sort_students, next_sort_config

logger = logging.getLogger(__name__)


class StudentGridController:
    """UI state for the students grid page: filters, sort, add/edit form, delete confirmation."""

    def __init__(self, state: StudentViewState, numeric_gpa: Optional[bool] = None):
        self.state = state
        self.numeric_gpa = numeric_gpa
        self.filters = FilterConfig()
        self.sort_config = SortConfig(key=SortKey.NAME, direction=SortDirection.ASC)
        self.form_open = False
        self.editing: Optional[Student] = None
        self.delete_confirm: Optional[Student] = None
        self.form_errors: Dict[str, str] = {}

    async def load(self) -> None:
        try:
            await self.state.fetch_students()
        except RequestFailed as e:
            # state.error already holds the message for display
            logger.info(f"Student list not loaded: {e.message}")

    def visible_students(self) -> List[Student]:
        return filter_and_sort_students(
            self.state.students, self.filters, self.sort_config, numeric_gpa=self.numeric_gpa
        )

    # --- Sorting ---

    def request_sort(self, key: Union[SortKey, str]) -> SortConfig:
        self.sort_config = next_sort_config(self.sort_config, key)
        return self.sort_config

    def sort_indicator(self, key: Union[SortKey, str]) -> str:
        if self.sort_config.key != SortKey(key):
            return "↕"
        return "↑" if self.sort_config.direction == SortDirection.ASC else "↓"

    # --- Filters ---

    def set_filter(self, field: str, value: Any) -> FilterConfig:
        if field not in FilterConfig.model_fields:
            raise KeyError(f"Unknown filter: {field}")
        values = self.filters.model_dump()
        values[field] = value
        self.filters = FilterConfig(**values)
        return self.filters

    def clear_filters(self) -> None:
        self.filters = FilterConfig()

    # --- Add/edit form ---

    def open_create(self) -> Dict[str, Any]:
        self.editing = None
        self.form_errors = {}
        self.form_open = True
        return dict(DEFAULT_FORM)

    def open_edit(self, student: Student) -> Dict[str, Any]:
        self.editing = student
        self.form_errors = {}
        self.form_open = True
        return {
            "name": student.name,
            "grade_level": student.grade_level,
            "sex": student.sex.value,
            "age": student.age,
            "sibling_count": student.sibling_count,
            "gpa": student.gpa,
        }

    def close_form(self) -> None:
        self.form_open = False
        self.editing = None
        self.form_errors = {}

    def clear_field_error(self, field: str) -> None:
        if field in self.form_errors:
            self.form_errors = {k: v for k, v in self.form_errors.items() if k != field}

    async def submit_form(self, form: Mapping[str, Any]) -> bool:
        """Validates and saves the form. Returns True when the form was saved and closed."""
        try:
            draft = validate_student_form(form)
        except ValidationFailed as e:
            self.form_errors = e.errors
            return False
        self.form_errors = {}

        try:
            if self.editing is not None:
                await self.state.update_student(self.editing.id, draft)
            else:
                await self.state.create_student(draft)
        except RequestFailed as e:
            logger.warning(f"Form submission failed: {e.message}")
            return False

        self.close_form()
        return True

    # --- Delete confirmation ---

    def request_delete(self, student: Student) -> None:
        self.delete_confirm = student

    def cancel_delete(self) -> None:
        self.delete_confirm = None

    async def confirm_delete(self) -> bool:
        student = self.delete_confirm
        if student is None:
            return False
        self.delete_confirm = None
        try:
            await self.state.delete_student(student.id)
        except RequestFailed:
            return False
        return True

    def dismiss_error(self) -> None:
        self.state.clear_error()
