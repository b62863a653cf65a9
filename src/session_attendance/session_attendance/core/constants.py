"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

COMPLETION_THRESHOLD_PERCENT = 75
DEFAULT_DISPATCH_TIMEOUT_SECONDS = 30.0
MIN_RATING = 1
MAX_RATING = 5
