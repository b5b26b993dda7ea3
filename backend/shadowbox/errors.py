"""Exception hierarchy for match handling.

Every error is scoped to one match or one request. The Socket.IO layer
decides which ones are reported back to the sender and which ones are
dropped quietly.
"""

from typing import Optional


class MatchError(Exception):
    """Base exception for all match errors."""

    message = 'Match error'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class MatchNotFound(MatchError):
    message = 'Match not found'


class MatchFull(MatchError):
    message = 'Match is full'


class AlreadyInMatch(MatchError):
    message = 'Already in a match'


class InvalidCombinationLength(MatchError):

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f'Combination must have {expected} moves')


class InvalidDirection(MatchError):

    def __init__(self, value):
        self.value = value
        super().__init__(f'Unknown direction: {value!r}')


class UnauthorizedAction(MatchError):
    """Sender lacks the role/slot for the action, or the match is in the wrong state.

    Stale or duplicate client messages end up here. Never reported to clients.
    """

    message = 'Action not allowed'


class IllegalTransition(MatchError):

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f'Illegal transition {current.value} -> {target.value}')


class UnknownVariant(MatchError):

    def __init__(self, name):
        self.name = name
        super().__init__(f'Unknown match variant: {name!r}')
