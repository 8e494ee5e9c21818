import os

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEFAULT_GROUP = os.getenv("DEFAULT_GROUP", "Gregorio Y. Zara")

# Seeds the bundled in-memory store; leave empty to start with no roster
SEED_PATH = os.getenv("SEED_PATH", "seed.json")

SKIP_NON_ATTENDANCE_DAYS = bool(int(os.getenv("SKIP_NON_ATTENDANCE_DAYS", "1")))
NON_ATTENDANCE_WEEKDAYS = tuple(int(d) for d in os.getenv("NON_ATTENDANCE_WEEKDAYS", "5,6").split(",") if d.strip())
