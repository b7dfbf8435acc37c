"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"
RATE_PRECISION = 2
DEFAULT_REPORT_DAYS = 7
DB_CONNECT_TIMEOUT_SECONDS = 10
SCHEMA_VERSION = 1
