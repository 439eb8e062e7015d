import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_portal_test"),
}

STORAGE_ROOT = os.getenv("STORAGE_ROOT", "storage-test")
STORAGE_PUBLIC_URL = "http://testserver/storage"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
