"""Deterministic stand-ins for the Socket.IO scheduler and notifier."""

import heapq
import itertools
from collections import defaultdict

from shadowbox.services.matches.timers import ScheduledCall


class ManualScheduler:
    """Virtual clock. Nothing fires until ``advance`` is called."""

    def __init__(self):
        self.clock = 0.0
        self._queue = []
        self._seq = itertools.count()

    def now(self):
        return self.clock

    def call_later(self, delay, callback):
        call = ScheduledCall(delay, callback)
        heapq.heappush(self._queue, (self.clock + delay, next(self._seq), call))
        return call

    def advance(self, seconds):
        target = self.clock + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, call = heapq.heappop(self._queue)
            self.clock = max(self.clock, due)
            if not call.cancelled:
                call.callback()
        self.clock = target

    def pending(self):
        return [call for _, _, call in self._queue if not call.cancelled]


class RecordingNotifier:
    """Records every notification as ``(sid, event, payload)``."""

    def __init__(self):
        self.sent = []
        self.rooms = defaultdict(list)

    def enroll(self, sid, code):
        if sid not in self.rooms[code]:
            self.rooms[code].append(sid)

    def send(self, sid, event, payload=None):
        self.sent.append((sid, event, payload))

    def broadcast(self, code, event, payload=None):
        for sid in self.rooms.get(code, []):
            self.sent.append((sid, event, payload))

    def close(self, code):
        self.rooms.pop(code, None)

    def events(self, sid=None, name=None):
        return [
            (s, e, p) for s, e, p in self.sent
            if (sid is None or s == sid) and (name is None or e == name)
        ]

    def payloads(self, sid, name):
        return [p for _, _, p in self.events(sid, name)]

    def names(self, sid):
        return [e for _, e, _ in self.events(sid)]

    def clear(self):
        self.sent.clear()
