import os

from config import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="root", default_database="admission_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

MAX_CONTENT_LENGTH = 1024 * 1024

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SEED_ADMIN_USERNAME = "admin"
SEED_ADMIN_PASSWORD = "admin123"
