import os

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_GROUP = os.getenv("DEFAULT_GROUP", "Gregorio Y. Zara")

SEED_PATH = os.getenv("SEED_PATH", "")

SKIP_NON_ATTENDANCE_DAYS = bool(int(os.getenv("SKIP_NON_ATTENDANCE_DAYS", "1")))
NON_ATTENDANCE_WEEKDAYS = tuple(int(d) for d in os.getenv("NON_ATTENDANCE_WEEKDAYS", "5,6").split(",") if d.strip())
