SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "session_attendance_test",
}
STORAGE_BACKEND = "memory"

NOTIFIER = "console"
DISPATCH_TIMEOUT_SECONDS = 5.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
