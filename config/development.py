import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///timeclock.db")
SQL_ECHO = bool(int(os.getenv("SQL_ECHO", "0")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Shared manager PIN for corrections and admin deletes.
MANAGER_PIN = os.getenv("MANAGER_PIN", "9999")
MANAGER_SESSION_MINUTES = float(os.getenv("MANAGER_SESSION_MINUTES", "1"))

# "placeholder" writes a labelled JPEG per event, "none" disables photos.
PHOTO_CAPTURE = os.getenv("PHOTO_CAPTURE", "placeholder")
PHOTO_DIR = os.getenv("PHOTO_DIR", "photos")

COOLDOWN_HOURS = float(os.getenv("COOLDOWN_HOURS", "4"))
MAX_SHIFT_HOURS = float(os.getenv("MAX_SHIFT_HOURS", "16"))
LONG_SHIFT_WARNING_HOURS = float(os.getenv("LONG_SHIFT_WARNING_HOURS", "12"))
MIN_SHIFT_MINUTES = float(os.getenv("MIN_SHIFT_MINUTES", "1"))
BREAK_THRESHOLD_HOURS = float(os.getenv("BREAK_THRESHOLD_HOURS", "6"))
BREAK_MINUTES = float(os.getenv("BREAK_MINUTES", "30"))
MAX_CORRECTED_SHIFT_HOURS = float(os.getenv("MAX_CORRECTED_SHIFT_HOURS", "24"))

# Seed the sample roster when the employees table is empty.
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
