import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "deduction_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Check-out is the last punch inside this window (inclusive)
OUT_WINDOW_START = os.getenv("OUT_WINDOW_START", "14:00")
OUT_WINDOW_END = os.getenv("OUT_WINDOW_END", "23:00")

ISSUE_LATE_THRESHOLD_MINUTES = int(os.getenv("ISSUE_LATE_THRESHOLD_MINUTES", "15"))
CONSUME_PUNCHES_PER_EMPLOYEE = bool(int(os.getenv("CONSUME_PUNCHES_PER_EMPLOYEE", "0")))

# Empty URL disables email; in-app notifications are still written
MAIL_SERVICE_URL = os.getenv("MAIL_SERVICE_URL", "")
MAIL_SERVICE_TOKEN = os.getenv("MAIL_SERVICE_TOKEN", "")
MAIL_TIMEOUT_SECONDS = float(os.getenv("MAIL_TIMEOUT_SECONDS", "10"))
