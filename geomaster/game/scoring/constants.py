from __future__ import annotations

MAX_ROUND_POINTS = 100
FAIR_TIME_MAX_ROUND_POINTS = 333
DEFAULT_SCALE_FACTOR_KM = 3000.0
DEFAULT_TIME_LIMIT_SECONDS = 30
TIME_BONUS_CAP = 2.0
TIME_BONUS_NUMERATOR = 3.0
TIME_BONUS_OFFSET_SECONDS = 0.1
FAIR_TIME_MAX_BONUS = 0.5
