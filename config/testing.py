import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance_test"),
}

ACCESS_TOKEN_SECRET = "test-access-secret"
REFRESH_TOKEN_SECRET = "test-refresh-secret"
ACCESS_TOKEN_MINUTES = 15
REFRESH_TOKEN_DAYS = 7

WORK_START_TIME = "08:00"

COOKIE_SECURE = False

MAIL_CONFIG = {"host": ""}

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
