import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "strata_attendance_test"),
}

API_BASE_URL = "http://testserver"
API_TOKEN = None
QUEUE_PATH = os.getenv("QUEUE_PATH", ".cache/test_submission_queue.json")
SYNC_INTERVAL_SECONDS = 60
HTTP_TIMEOUT_SECONDS = 5.0

QUORUM_RATIO = "0.25"

LOG_LEVEL = "DEBUG"
LOG_FILE = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
