"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_COOLDOWN_HOURS = 4
DEFAULT_MAX_SHIFT_HOURS = 16
DEFAULT_LONG_SHIFT_WARNING_HOURS = 12
DEFAULT_MIN_SHIFT_MINUTES = 1
DEFAULT_BREAK_THRESHOLD_HOURS = 6
DEFAULT_BREAK_MINUTES = 30
DEFAULT_MAX_CORRECTED_SHIFT_HOURS = 24

DEFAULT_MANAGER_SESSION_MINUTES = 1

# Below this, clock-out messages talk in minutes instead of hours.
SHORT_SHIFT_MESSAGE_MINUTES = 6

FULL_DAY_HOURS = 8
DEFAULT_REPORT_DAYS = 7

NO_JOB_TITLE = "No Job Title"
NOTES_SEPARATOR = "; "
