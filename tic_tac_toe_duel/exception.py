class GameError(Exception):
    pass


class IllegalMoveError(GameError):
    pass


class InvariantViolationError(GameError):
    pass
