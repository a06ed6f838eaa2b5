"""Settings shared by every environment (override per env or via .env)."""
import os

from src.face_attendance.face_attendance.core import constants

# Face matching. One absolute Euclidean distance threshold for every
# identification endpoint. Earlier handlers used 0.4, 0.6 and 100.0 for the
# same decision; the 0.4 default is kept until product decides which value is intended.
MATCH_THRESHOLD = float(os.getenv("MATCH_THRESHOLD", str(constants.DEFAULT_MATCH_THRESHOLD)))
ROSTER_CACHE_TTL_SECONDS = float(
    os.getenv("ROSTER_CACHE_TTL_SECONDS", str(constants.DEFAULT_ROSTER_CACHE_TTL_SECONDS))
)

# Pairing windows (hours) and anti-spam interval (seconds)
CHECKIN_LOOKBACK_HOURS = float(os.getenv("CHECKIN_LOOKBACK_HOURS", str(constants.DEFAULT_CHECKIN_LOOKBACK_HOURS)))
CHECKOUT_LOOKBACK_HOURS = float(os.getenv("CHECKOUT_LOOKBACK_HOURS", str(constants.DEFAULT_CHECKOUT_LOOKBACK_HOURS)))
CHECKIN_REQUIRED_WITHIN_HOURS = float(
    os.getenv("CHECKIN_REQUIRED_WITHIN_HOURS", str(constants.DEFAULT_CHECKIN_REQUIRED_WITHIN_HOURS))
)
MIN_SECONDS_BETWEEN_EVENTS = float(
    os.getenv("MIN_SECONDS_BETWEEN_EVENTS", str(constants.DEFAULT_MIN_SECONDS_BETWEEN_EVENTS))
)

# Face enrolment
REQUIRE_ENROLLMENT_CODE = bool(int(os.getenv("REQUIRE_ENROLLMENT_CODE", "0")))
VERIFICATION_CODE_TTL_SECONDS = float(
    os.getenv("VERIFICATION_CODE_TTL_SECONDS", str(constants.DEFAULT_VERIFICATION_CODE_TTL_SECONDS))
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
