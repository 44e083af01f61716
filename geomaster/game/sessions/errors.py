class GameSessionError(Exception):
    pass


class SessionNotFoundError(GameSessionError):
    pass


class SessionAccessDeniedError(GameSessionError):
    pass


class AuthenticationRequiredError(GameSessionError):
    pass


class InvalidSessionModeError(GameSessionError):
    pass


class NotEnoughLocationsError(GameSessionError):
    def __init__(self, *, available: int, required: int) -> None:
        super().__init__(f"not enough locations: need {required}, found {available}")
        self.available = available
        self.required = required


class InvalidLocationIndexError(GameSessionError):
    pass


class LocationDataMissingError(GameSessionError):
    pass


class SessionAlreadyCompletedError(GameSessionError):
    pass


class SessionIncompleteError(GameSessionError):
    def __init__(self, *, guessed: int, total: int) -> None:
        super().__init__(f"{guessed}/{total} locations guessed")
        self.guessed = guessed
        self.total = total


class LocationAlreadyGuessedError(GameSessionError):
    pass


class GuessAlreadySubmittedError(LocationAlreadyGuessedError):
    pass


class PreviousLocationNotGuessedError(GameSessionError):
    def __init__(self, *, missing_index: int) -> None:
        super().__init__(f"location {missing_index} must be completed first")
        self.missing_index = missing_index


class LocationNotActiveError(GameSessionError):
    pass


class LocationNotStartedError(GameSessionError):
    pass


class InvalidGuessError(GameSessionError):
    pass
