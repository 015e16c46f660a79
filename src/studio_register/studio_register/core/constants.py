"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_STORAGE_PREFIX = "bb_"
DEFAULT_TRAILING_AWARD_DAYS = 30

# Student of the Month / Student of the Year weights (attendance, points)
MONTH_ATTENDANCE_WEIGHT = 0.7
MONTH_POINTS_WEIGHT = 0.3
YEAR_ATTENDANCE_WEIGHT = 0.6
YEAR_POINTS_WEIGHT = 0.4

MIN_IMPROVEMENT_SESSIONS = 4

# Academic year: Sep 1 .. Jul 31
ACADEMIC_YEAR_START_MONTH = 9
ACADEMIC_YEAR_END_MONTH = 7

ON_TIME_REASON = "On Time"
ON_TIME_POINTS = 1

MAX_POINTS_PER_GRANT = 100

# (preset id, label, points)
POINT_PRESETS = (
    ("practice", "Practised at Home", 5),
    ("trying", "Great Effort", 3),
    ("listening", "Focused", 3),
    ("impress", "Impressed Me", 2),
)

CLASS_COLORS = (
    "#F472B6",
    "#A78BFA",
    "#60A5FA",
    "#34D399",
    "#FBBF24",
    "#F87171",
)
