"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

STUDENTS_COLLECTION = "students"
ATTENDANCE_SUBCOLLECTION = "attendance"

NAME_FIELD = "name"
GROUP_FIELD = "section"
STATUS_FIELD = "status"
TIME_IN_FIELD = "timeInTime"
TIME_OUT_FIELD = "timeOutTime"

WIRE_ON_TIME = "On Time"
WIRE_LATE = "Late"
WIRE_ABSENT = "absent"

DEFAULT_GROUP = "Gregorio Y. Zara"

# datetime.weekday(): Saturday and Sunday close a Sunday-first week on both ends.
DEFAULT_NON_ATTENDANCE_WEEKDAYS = frozenset({5, 6})
