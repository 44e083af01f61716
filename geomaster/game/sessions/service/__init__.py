from __future__ import annotations

from .constants import CREATABLE_MODES, DEFAULT_LOCALE
from .location_pool import load_location_pool, select_locations
from .sessions_complete import complete_session
from .sessions_create import create_session
from .sessions_queries import _load_owned_session, get_session_view
from .sessions_rounds import activate_location, mark_map_ready, time_remaining_seconds
from .sessions_submit import elapsed_seconds, submit_guess


class GameSessionService:
    _load_owned_session = staticmethod(_load_owned_session)
    load_location_pool = staticmethod(load_location_pool)
    select_locations = staticmethod(select_locations)
    elapsed_seconds = staticmethod(elapsed_seconds)
    time_remaining_seconds = staticmethod(time_remaining_seconds)

    create_session = staticmethod(create_session)
    get_session_view = staticmethod(get_session_view)
    activate_location = staticmethod(activate_location)
    mark_map_ready = staticmethod(mark_map_ready)
    submit_guess = staticmethod(submit_guess)
    complete_session = staticmethod(complete_session)


__all__ = ["CREATABLE_MODES", "DEFAULT_LOCALE", "GameSessionService"]
