class GameTypeError(Exception):
    pass


class UnknownGameTypeError(GameTypeError):
    pass


class GameTypeInactiveError(GameTypeError):
    pass


class GameTypeNotRankableError(GameTypeError):
    pass
