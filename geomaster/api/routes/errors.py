from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from geomaster.game.duels.errors import (
    DuelAlreadyPlayedError,
    DuelChallengeDecodeError,
    DuelChallengerSessionInvalidError,
    DuelError,
    DuelGameTypeMismatchError,
    DuelResultNotFoundError,
    DuelSeedMismatchError,
    DuelSelfChallengeError,
    DuelSessionModeError,
)
from geomaster.game.game_types.errors import GameTypeError, GameTypeInactiveError
from geomaster.game.sessions.errors import (
    AuthenticationRequiredError,
    GameSessionError,
    InvalidGuessError,
    InvalidLocationIndexError,
    InvalidSessionModeError,
    LocationAlreadyGuessedError,
    LocationDataMissingError,
    LocationNotActiveError,
    LocationNotStartedError,
    NotEnoughLocationsError,
    PreviousLocationNotGuessedError,
    SessionAccessDeniedError,
    SessionAlreadyCompletedError,
    SessionIncompleteError,
    SessionNotFoundError,
)

DOMAIN_ERRORS = (GameSessionError, GameTypeError, DuelError)

# First match wins, so subclasses go before their bases.
_ERROR_CODES: tuple[tuple[type[Exception], int, str], ...] = (
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND, "E_SESSION_NOT_FOUND"),
    (SessionAccessDeniedError, status.HTTP_404_NOT_FOUND, "E_SESSION_NOT_FOUND"),
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED, "E_AUTH_REQUIRED"),
    (InvalidSessionModeError, status.HTTP_400_BAD_REQUEST, "E_MODE_INVALID"),
    (GameTypeInactiveError, status.HTTP_400_BAD_REQUEST, "E_GAME_TYPE_INACTIVE"),
    (GameTypeError, status.HTTP_400_BAD_REQUEST, "E_GAME_TYPE_INVALID"),
    (NotEnoughLocationsError, status.HTTP_422_UNPROCESSABLE_ENTITY, "E_NOT_ENOUGH_LOCATIONS"),
    (InvalidLocationIndexError, status.HTTP_400_BAD_REQUEST, "E_LOCATION_INDEX_INVALID"),
    (InvalidGuessError, status.HTTP_400_BAD_REQUEST, "E_GUESS_INVALID"),
    (LocationDataMissingError, status.HTTP_500_INTERNAL_SERVER_ERROR, "E_LOCATION_DATA_MISSING"),
    (SessionAlreadyCompletedError, status.HTTP_409_CONFLICT, "E_SESSION_COMPLETED"),
    (SessionIncompleteError, status.HTTP_409_CONFLICT, "E_SESSION_INCOMPLETE"),
    (LocationAlreadyGuessedError, status.HTTP_409_CONFLICT, "E_LOCATION_ALREADY_GUESSED"),
    (PreviousLocationNotGuessedError, status.HTTP_409_CONFLICT, "E_PREVIOUS_LOCATION_NOT_GUESSED"),
    (LocationNotActiveError, status.HTTP_409_CONFLICT, "E_LOCATION_NOT_ACTIVE"),
    (LocationNotStartedError, status.HTTP_409_CONFLICT, "E_LOCATION_NOT_STARTED"),
    (DuelChallengeDecodeError, status.HTTP_400_BAD_REQUEST, "E_DUEL_CHALLENGE_INVALID"),
    (DuelGameTypeMismatchError, status.HTTP_400_BAD_REQUEST, "E_DUEL_GAME_TYPE_MISMATCH"),
    (DuelSessionModeError, status.HTTP_400_BAD_REQUEST, "E_DUEL_SESSION_MODE"),
    (DuelSelfChallengeError, status.HTTP_409_CONFLICT, "E_DUEL_SELF_CHALLENGE"),
    (DuelSeedMismatchError, status.HTTP_409_CONFLICT, "E_DUEL_SEED_MISMATCH"),
    (DuelChallengerSessionInvalidError, status.HTTP_409_CONFLICT, "E_DUEL_CHALLENGER_INVALID"),
    (DuelAlreadyPlayedError, status.HTTP_409_CONFLICT, "E_DUEL_ALREADY_PLAYED"),
    (DuelResultNotFoundError, status.HTTP_404_NOT_FOUND, "E_DUEL_RESULT_NOT_FOUND"),
)


def _details(exc: Exception) -> dict[str, Any]:
    if isinstance(exc, SessionIncompleteError):
        return {"guessed": exc.guessed, "total": exc.total}
    if isinstance(exc, PreviousLocationNotGuessedError):
        return {"missing_index": exc.missing_index}
    if isinstance(exc, NotEnoughLocationsError):
        return {"available": exc.available, "required": exc.required}
    return {}


def http_error(exc: Exception) -> HTTPException:
    for error_type, status_code, code in _ERROR_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail={"code": code, **_details(exc)})
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"code": "E_REQUEST_INVALID"})
