import os

SECRET_KEY = "test-secret"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")
SQL_ECHO = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

MANAGER_PIN = "9999"
MANAGER_SESSION_MINUTES = 1

PHOTO_CAPTURE = "none"
PHOTO_DIR = "photos"

COOLDOWN_HOURS = 4
MAX_SHIFT_HOURS = 16
LONG_SHIFT_WARNING_HOURS = 12
MIN_SHIFT_MINUTES = 1
BREAK_THRESHOLD_HOURS = 6
BREAK_MINUTES = 30
MAX_CORRECTED_SHIFT_HOURS = 24

AUTO_SEED_DB = False
