"""Client-facing game errors.

Each error carries a stable ``code`` for clients to branch on and a human
readable ``message``. They are reported only to the connection that issued
the failing command.
"""


class GameError(Exception):
    code = 'GameError'
    default_message = 'Game error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


class RoomNotFound(GameError):
    code = 'RoomNotFound'
    default_message = 'Room not found'


class RoomFull(GameError):
    code = 'RoomFull'
    default_message = 'Room is full'


class GameAlreadyStarted(GameError):
    code = 'GameAlreadyStarted'
    default_message = 'Game already in progress'


class NotEnoughPlayers(GameError):
    code = 'NotEnoughPlayers'
    default_message = 'Need at least 2 players to start'


class NotPlaying(GameError):
    code = 'NotPlaying'
    default_message = 'Game not in progress'


class NotYourTurn(GameError):
    code = 'NotYourTurn'
    default_message = 'Not your turn'


class InvalidMove(GameError):
    code = 'InvalidMove'
    default_message = 'Invalid move'
