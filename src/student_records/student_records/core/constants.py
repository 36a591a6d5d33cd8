"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

USERS_COLLECTION = "users"
STUDENTS_COLLECTION = "students"

SLUG_SEPARATOR = "-"
GRADE_KEY_SEPARATOR = "_"
ISO_DATE_FORMAT = "%Y-%m-%d"

DATE_FIELD = "date"
SUBJECTS_CACHE_FIELD = "subjects"

ROLE_DESTINATIONS = {
    "student": "/student",
    "teacher": "/teacher",
}
