import argparse
import asyncio
import os
import sys

# --- Path Setup ---
# Allow running from a source checkout without installing the package
scripts_dir = os.path.dirname(os.path.abspath(__file__))
backend_root = os.path.join(os.path.dirname(scripts_dir), "backend")
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

from studentdesk.core.exceptions import RequestFailed
from studentdesk.models.enums import SortDirection, SortKey
from studentdesk.models.view import FilterConfig, SortConfig
from studentdesk.services.student_service import StudentStoreClient
from studentdesk.state.lookup import StudentLookupController
from studentdesk.state.student_state import StudentViewState
from studentdesk.state.view_pipeline import filter_and_sort_students

COLUMNS = [
    ("ID", "id", 6),
    ("Name", "name", 24),
    ("Class", "grade_level", 6),
    ("Sex", "sex", 7),
    ("Age", "age", 4),
    ("Siblings", "sibling_count", 9),
    ("GPA", "gpa", 5),
]


def _cell(student, field):
    value = getattr(student, field)
    return str(getattr(value, "value", value))


def print_students(students):
    print("  ".join(title.ljust(width) for title, _, width in COLUMNS))
    print("-" * 72)
    for student in students:
        print("  ".join(_cell(student, field).ljust(width) for _, field, width in COLUMNS))
    print(f"\n{len(students)} student(s)")


def build_parser():
    parser = argparse.ArgumentParser(description="List or look up students in the record store.")
    parser.add_argument("--base-url", default=None, help="Record store base URL (default: STORE_BASE_URL)")
    parser.add_argument("--lookup", metavar="ID", help="Show a single student by ID")
    parser.add_argument("--name", help="Case-insensitive name filter")
    parser.add_argument("--grade", type=int, help="Exact class/grade level")
    parser.add_argument("--sex", choices=["male", "female"])
    parser.add_argument("--min-age", type=int)
    parser.add_argument("--max-age", type=int)
    parser.add_argument("--sort", choices=[key.value for key in SortKey], default=SortKey.NAME.value)
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    return parser


async def main(argv=None):
    args = build_parser().parse_args(argv)

    async with StudentStoreClient(base_url=args.base_url) as client:
        state = StudentViewState(client)

        if args.lookup:
            lookup = StudentLookupController(state)
            student = await lookup.search(args.lookup)
            if student is None:
                print(lookup.search_error)
                return 1
            print_students([student])
            return 0

        try:
            await state.fetch_students()
        except RequestFailed as e:
            print(f"Could not load students: {e.message}")
            return 1

        filters = FilterConfig(
            name=args.name,
            grade_level=args.grade,
            sex=args.sex,
            min_age=args.min_age,
            max_age=args.max_age,
        )
        sort_config = SortConfig(
            key=SortKey(args.sort),
            direction=SortDirection.DESC if args.desc else SortDirection.ASC,
        )
        print_students(filter_and_sort_students(state.students, filters, sort_config))
        return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
