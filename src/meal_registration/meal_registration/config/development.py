import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "meal_registration"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "0")),
}

# Shared secret the external cron sends as a bearer token.
CRON_SECRET = os.getenv("CRON_SECRET", "")

DEBUG = bool(int(os.getenv("DEBUG", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

# Seconds a cached daily summary may be served before it is recomputed.
SUMMARY_CACHE_TTL_SECONDS = int(os.getenv("SUMMARY_CACHE_TTL_SECONDS", "30"))
