import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "deduction_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

OUT_WINDOW_START = "14:00"
OUT_WINDOW_END = "23:00"
ISSUE_LATE_THRESHOLD_MINUTES = 15
CONSUME_PUNCHES_PER_EMPLOYEE = False

MAIL_SERVICE_URL = ""
MAIL_SERVICE_TOKEN = ""
MAIL_TIMEOUT_SECONDS = 5.0
