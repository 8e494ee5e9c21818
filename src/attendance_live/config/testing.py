DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEFAULT_GROUP = "G"

SEED_PATH = ""

SKIP_NON_ATTENDANCE_DAYS = True
NON_ATTENDANCE_WEEKDAYS = (5, 6)
