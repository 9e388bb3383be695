import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "meal_registration_test"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "0")),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
CRON_SECRET = "test-cron-secret"
DEFAULT_PAGE_SIZE = 10
SUMMARY_CACHE_TTL_SECONDS = 30
