# studentdesk/models/student.py
import re
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from studentdesk.models.enums import Sex

GPA_MIN = 0.0
GPA_MAX = 10.0
GPA_MESSAGE = "GPA must be a number between 0 and 10"

# Plain decimal notation only: no underscores, hex, nan or inf
GPA_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_gpa(value: str) -> Optional[float]:
    """Returns the GPA as a float when it is a number in range, otherwise None."""
    text = value.strip()
    if not GPA_PATTERN.match(text):
        return None
    number = float(text)
    if number < GPA_MIN or number > GPA_MAX:
        return None
    return number


# --- Canonical in-memory representation (client side) ---

class Student(BaseModel):
    """A student record as held by the data view layer.

    Instances are immutable; state changes always swap in a new instance.
    Fields the store sends beyond the ones below are kept as extras.
    """
    id: str = Field(..., min_length=1, description="Store-assigned identifier, stringified")
    name: str = Field(..., description="Student's full name")
    grade_level: int = Field(..., description="Class/grade level (1-12)")
    sex: Sex
    age: int = Field(..., description="Age in years")
    sibling_count: int = Field(..., description="Number of siblings")
    gpa: str = Field(..., description="GPA kept as text for form round-tripping")

    model_config = ConfigDict(frozen=True, extra="allow")


class StudentDraft(BaseModel):
    """All student fields except the identifier; payload for create and update."""
    name: str = Field(..., min_length=1)
    grade_level: int = Field(..., ge=1, le=12)
    sex: Sex
    age: int = Field(..., ge=1, le=100)
    sibling_count: int = Field(..., ge=0, le=20)
    gpa: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @field_validator("gpa")
    @classmethod
    def gpa_must_be_in_range(cls, value: str) -> str:
        if parse_gpa(value) is None:
            raise ValueError(GPA_MESSAGE)
        return value.strip()

    @classmethod
    def from_student(cls, student: Student) -> "StudentDraft":
        return cls(
            name=student.name,
            grade_level=student.grade_level,
            sex=student.sex,
            age=student.age,
            sibling_count=student.sibling_count,
            gpa=student.gpa,
        )

# --- Record store wire models (server side) ---

class WireStudentDraft(BaseModel):
    """Request body accepted by POST /student and PUT /student/{id}."""
    name: str = Field(..., min_length=1, description="Student's full name")
    grade_level: int = Field(..., alias="class", ge=1, le=12, description="Class/grade level")
    sex: Sex
    age: int = Field(..., ge=1, le=100)
    siblings: int = Field(..., ge=0, le=20)
    gpa: float = Field(..., ge=0, le=10)

    model_config = ConfigDict(populate_by_name=True)


class StoredStudent(WireStudentDraft):
    """A student document as stored and returned by the record store."""
    id: int = Field(..., description="Auto-increment identifier")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class StudentCreated(BaseModel):
    """Response body of POST /student: the new identifier only."""
    id: int


class StudentMutationResult(BaseModel):
    id: int
    updated: Optional[bool] = None
    deleted: Optional[bool] = None
