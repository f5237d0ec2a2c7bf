"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

import sys

DEFAULT_MINIMUM_ATTENDANCE = 75.0
DEFAULT_SUBJECT_COLOR = "#8B5CF6"

# Below the minimum but at or above this is shown as "at risk".
RISK_FLOOR_PERCENT = 60.0

# Returned when a bunk/recovery count has no finite answer
# (minimum of 0% can never be breached, 100% can never be recovered).
UNBOUNDED = sys.maxsize

ISO_DATE_FORMAT = "%Y-%m-%d"
