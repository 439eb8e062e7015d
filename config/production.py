import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "portal"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_portal"),
}

STORAGE_ROOT = os.getenv("STORAGE_ROOT", "/var/lib/employee-portal/storage")
STORAGE_PUBLIC_URL = os.getenv("STORAGE_PUBLIC_URL", "https://portal.example.org/storage")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
