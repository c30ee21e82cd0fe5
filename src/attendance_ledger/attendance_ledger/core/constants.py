"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import datetime, timezone

DEFAULT_OUT_OF_ORDER_TOLERANCE_SECONDS = 0
DEFAULT_FUTURE_SKEW_TOLERANCE_SECONDS = 0
DEFAULT_LOG_LEVEL = "INFO"

# Bounds shared by every backend; they match the attendance_events columns.
MAX_USER_ID_LENGTH = 191
MIN_EVENT_TIME = datetime(1000, 1, 1, tzinfo=timezone.utc)
MAX_EVENT_TIME = datetime(9999, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)
