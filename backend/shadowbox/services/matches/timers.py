import logging
import time
from typing import Callable, Dict, List


class ScheduledCall:
    """Handle for a delayed call. ``cancel()`` is safe to call any number of times."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Runs delayed calls as Socket.IO background tasks.

    Uses ``socketio.sleep`` so the same code works under threading,
    eventlet and gevent async modes.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(delay, callback)
        self.socketio.start_background_task(self._worker, call)
        return call

    def _worker(self, call: ScheduledCall) -> None:
        self.socketio.sleep(call.delay)
        if not call.cancelled:
            call.callback()


class TimerSet:
    """Per-match timers, at most one live timer per kind.

    Kinds used by the coordinator: ``countdown``, ``round``, ``move`` and
    ``transition``. Starting a kind replaces (and cancels) the previous
    timer of that kind. Callbacks run under the service lock and only if
    their handle is still the current one for the kind.
    """

    def __init__(self, scheduler, lock, code: str, logger=None):
        self.scheduler = scheduler
        self.lock = lock
        self.code = code
        self.logger = logger or logging.getLogger(__name__)
        self._calls: Dict[str, ScheduledCall] = {}

    def start(self, kind: str, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        self.cancel(kind)
        call = None

        def _fire():
            with self.lock:
                if call.cancelled or self._calls.get(kind) is not call:
                    self.logger.debug(f"[timer-abort] match={self.code} kind={kind} superseded")
                    return
                del self._calls[kind]
                callback()

        call = self.scheduler.call_later(delay, _fire)
        self._calls[kind] = call
        return call

    def cancel(self, kind: str) -> None:
        call = self._calls.pop(kind, None)
        if call is not None:
            call.cancel()

    def cancel_all(self) -> None:
        for kind in list(self._calls):
            self.cancel(kind)

    def active(self) -> List[str]:
        return sorted(self._calls)

    def __contains__(self, kind: str) -> bool:
        return kind in self._calls
