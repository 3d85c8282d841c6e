# studentdesk/state/student_state.py
"""
View state for the student pages.

StudentViewState owns the in-memory student list, the most recent lookup, and the
loading/error flags. Its async methods are the only code that writes those fields, and
every write is a whole-value replacement (new list, new Student, new status), so a reader
never observes a half-updated record.

Construct one per process and hand it to whatever owns the UI:

    async with StudentStoreClient() as client:
        state = StudentViewState(client)
        await state.fetch_students()

Two flag sets are kept:

- ``loading`` / ``error``: shared by all operations. The last operation to complete decides
  their final value, even if an earlier-started one is still running.
- ``operations``: one OperationStatus per OperationKind, each written only by its own
  kind of operation.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from studentdesk.core.exceptions import RequestFailed
from studentdesk.models.enums import OperationKind
from studentdesk.models.student import Student, StudentDraft
from studentdesk.models.view import OperationStatus
from studentdesk.services.student_service import StudentStoreClient
from studentdesk.services.transform import ensure_valid_draft

logger = logging.getLogger(__name__)


class StudentViewState:

    def __init__(self, client: StudentStoreClient):
        self._client = client
        self.students: List[Student] = []
        self.recent_lookup: Optional[Student] = None
        self.loading: bool = False
        self.error: Optional[str] = None
        self.operations: Dict[OperationKind, OperationStatus] = {
            kind: OperationStatus() for kind in OperationKind
        }
        self.in_flight: int = 0

    # --- Status bookkeeping ---

    def _set_status(self, kind: OperationKind, status: OperationStatus) -> None:
        self.operations = {**self.operations, kind: status}

    def _begin(self, kind: OperationKind) -> None:
        self.loading = True
        self.error = None
        self.in_flight += 1
        self._set_status(kind, OperationStatus(loading=True))

    def _finish(self, kind: OperationKind, error: Optional[str] = None) -> None:
        self.loading = False
        if error is not None:
            self.error = error
        self.in_flight = max(0, self.in_flight - 1)
        self._set_status(kind, OperationStatus(loading=False, error=error))

    @contextmanager
    def _operation(self, kind: OperationKind) -> Iterator[None]:
        self._begin(kind)
        try:
            yield
        except RequestFailed as e:
            logger.warning(f"{kind.value} failed: {e.message}")
            self._finish(kind, error=e.message)
            raise
        except BaseException:
            self._finish(kind)
            raise
        else:
            self._finish(kind)

    # --- Queries ---

    def find_student(self, student_id: str) -> Optional[Student]:
        for student in self.students:
            if student.id == student_id:
                return student
        return None

    def status_of(self, kind: OperationKind) -> OperationStatus:
        return self.operations[kind]

    # --- Operations ---

    async def fetch_students(self) -> List[Student]:
        """Replaces the whole list with the store's current list."""
        with self._operation(OperationKind.FETCH_ALL):
            students = await self._client.get_all_students()
            self.students = list(students)
            logger.info(f"Loaded {len(self.students)} students")
        return self.students

    async def fetch_student_by_id(self, student_id: str) -> Student:
        """Looks up one student and keeps it as the recent lookup."""
        with self._operation(OperationKind.FETCH_ONE):
            student = await self._client.get_student_by_id(student_id)
            self.recent_lookup = student
        return student

    async def create_student(self, draft: StudentDraft) -> Student:
        """Creates a student; the re-fetched record is appended to the list."""
        ensure_valid_draft(draft)
        with self._operation(OperationKind.CREATE):
            created = await self._client.create_student(draft)
            if self.find_student(created.id) is not None:
                # A list refresh that finished first already brought this record in
                self.students = [created if s.id == created.id else s for s in self.students]
            else:
                self.students = [*self.students, created]
            logger.info(f"Created student {created.id}")
        return created

    async def update_student(self, student_id: str, draft: StudentDraft) -> Student:
        """Updates a student and swaps the re-fetched record in at the same position.

        If the id is not in the local list the fetched record is dropped; updates never
        grow the list.
        """
        ensure_valid_draft(draft)
        with self._operation(OperationKind.UPDATE):
            updated = await self._client.update_student(student_id, draft)
            if self.find_student(updated.id) is not None:
                self.students = [updated if s.id == updated.id else s for s in self.students]
            else:
                logger.info(f"Updated student {updated.id} is not in the loaded list; not adding it")
        return updated

    async def delete_student(self, student_id: str) -> str:
        """Deletes a student and removes it from the list by id.

        The recent lookup is left alone even when it is the deleted student.
        """
        with self._operation(OperationKind.DELETE):
            await self._client.delete_student(student_id)
            self.students = [s for s in self.students if s.id != student_id]
            logger.info(f"Deleted student {student_id}")
        return student_id

    def clear_error(self) -> None:
        self.error = None
