# studentdesk/api/endpoints/students.py

import logging
from typing import Any, Dict, List
from fastapi import APIRouter, HTTPException, status

from studentdesk.models.student import WireStudentDraft, StudentCreated, StudentMutationResult
from studentdesk.db import crud
from studentdesk.core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Students"])


def _parse_student_id(raw_id: str) -> int:
    # Unknown and malformed ids are both "not found" to the caller
    try:
        return int(raw_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student with ID {raw_id} not found."
        )


def _not_found(student_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Student with ID {student_id} not found."
    )


def _unavailable(e: StoreUnavailable) -> HTTPException:
    logger.error(f"Record store database failure: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="The student database is not available."
    )

# === Student API Endpoints ===

@router.get(
    "/students",
    status_code=status.HTTP_200_OK,
    summary="List all students",
    description="Returns every student in insertion order."
)
async def read_students() -> List[Dict[str, Any]]:
    try:
        students = await crud.get_all_students()
    except StoreUnavailable as e:
        raise _unavailable(e)
    logger.info(f"Returning {len(students)} students")
    return [student.to_wire() for student in students]

@router.get(
    "/student/{student_id}",
    status_code=status.HTTP_200_OK,
    summary="Get a student by ID",
    description="Returns one student. 404 if the ID is unknown."
)
async def read_student(student_id: str) -> Dict[str, Any]:
    parsed_id = _parse_student_id(student_id)
    try:
        student = await crud.get_student_by_id(parsed_id)
    except StoreUnavailable as e:
        raise _unavailable(e)
    if student is None:
        raise _not_found(parsed_id)
    return student.to_wire()

@router.post(
    "/student",
    response_model=StudentCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a student",
    description="Creates a student and returns only its new ID; fetch the student to get the full record."
)
async def create_new_student(student_in: WireStudentDraft) -> StudentCreated:
    logger.info(f"Creating student: {student_in.name}")
    try:
        new_id = await crud.create_student(student_in)
    except StoreUnavailable as e:
        raise _unavailable(e)
    logger.info(f"Student created successfully: {new_id}")
    return StudentCreated(id=new_id)

@router.put(
    "/student/{student_id}",
    response_model=StudentMutationResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Update a student",
    description="Replaces a student's fields. 404 if the ID is unknown."
)
async def update_existing_student(student_id: str, student_in: WireStudentDraft) -> StudentMutationResult:
    parsed_id = _parse_student_id(student_id)
    try:
        updated = await crud.update_student(parsed_id, student_in)
    except StoreUnavailable as e:
        raise _unavailable(e)
    if not updated:
        raise _not_found(parsed_id)
    logger.info(f"Student {parsed_id} updated successfully.")
    return StudentMutationResult(id=parsed_id, updated=True)

@router.delete(
    "/student/{student_id}",
    response_model=StudentMutationResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Delete a student",
    description="Deletes a student. 404 if the ID is unknown."
)
async def delete_existing_student(student_id: str) -> StudentMutationResult:
    parsed_id = _parse_student_id(student_id)
    try:
        deleted = await crud.delete_student(parsed_id)
    except StoreUnavailable as e:
        raise _unavailable(e)
    if not deleted:
        raise _not_found(parsed_id)
    logger.info(f"Student {parsed_id} deleted successfully.")
    return StudentMutationResult(id=parsed_id, deleted=True)
