# Backoffice/src/backoffice/config.py
# @ai-rules:
# 1. [Pattern]: Settings are plain module constants read from the environment at import time.
# 2. [Gotcha]: Tests that need a different backend patch the constant on backoffice.main, not here.
"""Environment configuration for the store back-office API."""

import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "store-backoffice")
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# "postgres" or "memory"
STORE_BACKEND = os.getenv("STORE_BACKEND", "postgres")

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "backoffice")
DB_USER = os.getenv("DB_USER", "backoffice")
DB_PASSWORD = os.getenv("DB_PASSWORD", "backoffice")
DB_POOL_MIN = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", "10"))

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", "10800"))  # 3 hours in seconds


def db_dsn() -> str:
    return f"dbname={DB_NAME} user={DB_USER} password={DB_PASSWORD} host={DB_HOST} port={DB_PORT}"
