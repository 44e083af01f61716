from __future__ import annotations

DEFAULT_ROUND_NUMBER = 1
NO_ACTIVE_LOCATION = 0
CREATABLE_MODES = frozenset({"solo", "ranked"})
DEFAULT_LOCALE = "de"
