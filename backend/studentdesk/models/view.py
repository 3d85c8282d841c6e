# studentdesk/models/view.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from studentdesk.models.enums import Sex, SortKey, SortDirection


class FilterConfig(BaseModel):
    """Optional grid filters. A missing value imposes no constraint."""
    name: Optional[str] = Field(default=None, description="Case-insensitive substring of the name")
    grade_level: Optional[int] = Field(default=None, description="Exact class/grade level")
    sex: Optional[Sex] = None
    min_age: Optional[int] = Field(default=None, description="Inclusive lower age bound")
    max_age: Optional[int] = Field(default=None, description="Inclusive upper age bound")

    model_config = ConfigDict(frozen=True)

    @field_validator("name", "sex", "grade_level", "min_age", "max_age", mode="before")
    @classmethod
    def blank_means_absent(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class SortConfig(BaseModel):
    key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC

    model_config = ConfigDict(frozen=True)


class OperationStatus(BaseModel):
    """Loading/error pair for one kind of record store operation."""
    loading: bool = False
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)
