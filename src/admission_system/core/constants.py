"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STATUS_NEW = "New"
STATUS_COMPLETED = "Completed"

SYSTEM_ACTOR = "SYSTEM"

MIN_PASSWORD_LENGTH = 6
DEFAULT_HISTORY_LIMIT = 200
