"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Values that operators may tune are read again from settings (see config/).
"""

from datetime import time

DESCRIPTOR_LENGTH = 128

# Absolute Euclidean distance. One value shared by every identification entry point.
DEFAULT_MATCH_THRESHOLD = 0.4

DEFAULT_ROSTER_CACHE_TTL_SECONDS = 5.0

DEFAULT_CHECKIN_LOOKBACK_HOURS = 12
DEFAULT_CHECKOUT_LOOKBACK_HOURS = 16
DEFAULT_CHECKIN_REQUIRED_WITHIN_HOURS = 24
DEFAULT_MIN_SECONDS_BETWEEN_EVENTS = 60

STANDARD_WORKDAY_HOURS = 8
LATE_AFTER = time(8, 30)

DEFAULT_VERIFICATION_CODE_TTL_SECONDS = 600
VERIFICATION_CODE_DIGITS = 6
