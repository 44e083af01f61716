class DuelError(Exception):
    pass


class DuelChallengeDecodeError(DuelError):
    pass


class DuelGameTypeMismatchError(DuelError):
    pass


class DuelSelfChallengeError(DuelError):
    pass


class DuelSeedMismatchError(DuelError):
    pass


class DuelChallengerSessionInvalidError(DuelError):
    pass


class DuelSessionModeError(DuelError):
    pass


class DuelAlreadyPlayedError(DuelError):
    pass


class DuelResultNotFoundError(DuelError):
    pass
