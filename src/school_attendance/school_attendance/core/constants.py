"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# (month, day) bounds of each term when a class has no explicit dates.
FIRST_SEMESTER_RANGE = ((2, 1), (6, 30))
SECOND_SEMESTER_RANGE = ((8, 1), (12, 31))

# Minimum frequency (percent) for a student to be considered approved.
APPROVAL_THRESHOLD_PERCENT = 75

ALLOWED_WEEKLY_FREQUENCIES = (1, 2)
DEFAULT_CLASS_TIME = "00:00"
DEFAULT_CLASSES_PER_DAY = 1
