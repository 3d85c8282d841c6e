# studentdesk/models/enums.py

from enum import Enum

# --- Student Related Enums ---

class Sex(str, Enum):
    """Enumeration for the sex recorded on a student."""
    MALE = "male"
    FEMALE = "female"

# --- Data View Enums ---

class SortKey(str, Enum):
    """Student fields the grid can be sorted by."""
    ID = "id"
    NAME = "name"
    GRADE_LEVEL = "grade_level"
    SEX = "sex"
    AGE = "age"
    SIBLING_COUNT = "sibling_count"
    GPA = "gpa"

class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

class OperationKind(str, Enum):
    """Record store operations tracked by the view state."""
    FETCH_ALL = "fetch_all"
    FETCH_ONE = "fetch_one"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
