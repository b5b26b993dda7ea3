"""Match domain services: registry, timers, round coordination and move exchange.

Nothing in this package knows about Flask or Socket.IO requests. The
transport hands intents to ``MatchService`` and receives notifications
through the notifier it was built with.
"""

from .notifications import SocketIONotifier
from .registry import MatchRegistry
from .service import MatchService
from .settings import MatchSettings
from .timers import SocketIOScheduler, TimerSet

__all__ = [
    'MatchRegistry',
    'MatchService',
    'MatchSettings',
    'SocketIONotifier',
    'SocketIOScheduler',
    'TimerSet',
]
