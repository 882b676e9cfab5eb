"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_OFFICE_RADIUS = 100
MIN_OFFICE_RADIUS = 10
MAX_OFFICE_RADIUS = 1000

DEFAULT_WORK_START = time(8, 0, 0)

DEFAULT_ACCESS_TOKEN_MINUTES = 15
DEFAULT_REFRESH_TOKEN_DAYS = 7
JWT_ALGORITHM = "HS256"

RESET_CODE_LENGTH = 6
RESET_CODE_MINUTES = 15

NOTIFICATION_TTL_DAYS = 30

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

MIN_PASSWORD_LENGTH = 6

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
