"""Policy constants for calendar-based cycle prediction.

These are conventions, not physiology measured per user.  The YAML policy in
``cycle_config.yaml`` defaults to exactly these values.
"""

from __future__ import annotations

# Ovulation is assumed to fall this many days before the next period starts.
LUTEAL_PHASE_DAYS = 14

# Fertile window length, ending on (and including) ovulation day.
FERTILE_WINDOW_DAYS = 6

# Days counted as menstrual from the last period start (day 1 inclusive).
MENSTRUAL_PHASE_DAYS = 5

# Number of most recent period starts used for averaging.
HISTORY_WINDOW = 3

# Minimum number of starts required to compute one interval.
MIN_PERIOD_STARTS = 2

# Cycle length bounds used for warnings only
MIN_CYCLE_DAYS = 21
MAX_CYCLE_DAYS = 45

# Interval spread (max - min, days) thresholds for the regularity summary
REGULAR_MAX_SPREAD_DAYS = 2
IRREGULAR_MIN_SPREAD_DAYS = 7
