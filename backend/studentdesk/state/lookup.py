# studentdesk/state/lookup.py

import logging
from typing import Optional

from studentdesk.core.exceptions import RequestFailed
from studentdesk.models.student import Student
from studentdesk.state.student_state import StudentViewState

logger = logging.getLogger(__name__)

EMPTY_ID_MESSAGE = "Please enter a student ID"
NOT_FOUND_MESSAGE = "Student not found. Please check the ID and try again."


class StudentLookupController:
    """UI state for the lookup page.

    Only the search box lives here. The found student is read from the shared view
    state, so it is still shown after the page is left and rebuilt.
    """

    def __init__(self, state: StudentViewState):
        self.state = state
        self.search_id = ""
        self.search_error: Optional[str] = None

    @property
    def result(self) -> Optional[Student]:
        return self.state.recent_lookup

    @property
    def can_search(self) -> bool:
        return bool(self.search_id.strip()) and not self.state.loading

    def set_search_id(self, value: str) -> None:
        self.search_id = value
        self.search_error = None

    async def search(self, raw_id: Optional[str] = None) -> Optional[Student]:
        if raw_id is not None:
            self.search_id = raw_id
        student_id = self.search_id.strip()
        if not student_id:
            self.search_error = EMPTY_ID_MESSAGE
            return None

        self.search_error = None
        try:
            return await self.state.fetch_student_by_id(student_id)
        except RequestFailed as e:
            self.search_error = NOT_FOUND_MESSAGE if e.is_not_found else e.message
            logger.info(f"Lookup of student {student_id} failed: {e.message}")
            return None
