import logging
import threading
from typing import Optional

from shadowbox.errors import AlreadyInMatch, MatchFull, MatchNotFound, UnauthorizedAction
from shadowbox.models import Match, MatchState
from .coordinator import RoundCoordinator, TRANSITION
from .exchange import CombinationExchange, MoveExchange
from .policies import build_policy
from .registry import MatchRegistry
from .settings import MatchSettings
from .timers import TimerSet


class MatchService:
    """Entry point for every inbound intent: create, join, moves, rematch, disconnect.

    Participants are identified by their socket id. Every public method,
    and every timer callback, runs under ``self.lock`` so match state is
    only ever touched by one handler at a time.
    """

    def __init__(self, notifier, scheduler, settings: Optional[MatchSettings] = None,
                 registry: Optional[MatchRegistry] = None, logger=None):
        self.lock = threading.RLock()
        self.notifier = notifier
        self.scheduler = scheduler
        self.settings = settings or MatchSettings()
        self.registry = registry if registry is not None else MatchRegistry()
        self.logger = logger or logging.getLogger(__name__)
        self.coordinator = RoundCoordinator(self.registry, notifier, self.settings, self.logger)
        self.moves = MoveExchange(self.coordinator, scheduler)
        self.combinations = CombinationExchange(self.coordinator)

    # ---- lifecycle ----

    def create_match(self, sid: str, variant: Optional[str] = None) -> str:
        with self.lock:
            if self.registry.match_for(sid) is not None:
                raise AlreadyInMatch()
            policy = build_policy(variant or self.settings.default_policy, self.settings)
            match = self.registry.create(sid, policy)
            match.timers = TimerSet(self.scheduler, self.lock, match.code, self.logger)
            self.notifier.enroll(sid, match.code)
            self.notifier.send(sid, 'matchCreated', {'matchCode': match.code})
            self.logger.info(f"[match-created] match={match.code} variant={policy.name} by={sid}")
            return match.code

    def join_match(self, sid: str, code: str) -> Match:
        with self.lock:
            match = self.registry.get(code)
            if match is None:
                raise MatchNotFound()
            if match.is_full:
                raise MatchFull()
            if self.registry.match_for(sid) is not None:
                raise AlreadyInMatch()
            match.slot_b = sid
            self.registry.bind(sid, match.code)
            self.notifier.enroll(sid, match.code)
            self.notifier.broadcast(match.code, 'matchStarted', {
                'matchCode': match.code,
                'player1': match.slot_a,
                'player2': match.slot_b,
            })
            self.logger.info(f"[match-joined] match={match.code} by={sid}")
            self.coordinator.begin_round(match)
            return match

    def propose_rematch(self, sid: str) -> bool:
        """Record a rematch vote. Returns True once both sides agreed and the reset happened."""
        with self.lock:
            match = self._match_of(sid)
            slot = match.slot_of(sid)
            if match.state is not MatchState.MATCH_END or match.rematch[slot]:
                raise UnauthorizedAction()
            match.rematch[slot] = True
            self.notifier.send(match.sid_of(slot.other), 'rematchProposed', {'by': slot.value})
            if not all(match.rematch.values()):
                return False
            match.reset_for_rematch()
            self.notifier.broadcast(match.code, 'rematchStarting')
            self.logger.info(f"[rematch] match={match.code}")
            self.coordinator.schedule(match, TRANSITION, self.settings.rematch_delay, self.coordinator.begin_round)
            return True

    def disconnect(self, sid: str) -> bool:
        with self.lock:
            match = self.registry.match_for(sid)
            if match is None:
                return False
            match.timers.cancel_all()
            other = match.sid_of(match.slot_of(sid).other)
            if other is not None:
                self.notifier.send(other, 'opponentDisconnected')
            self.registry.delete(match.code)
            self.notifier.close(match.code)
            self.logger.info(f"[match-closed] match={match.code} state={match.state.value} left={sid}")
            return True

    # ---- in-round actions ----

    def attack_move(self, sid: str, direction) -> None:
        with self.lock:
            self.moves.submit_move(self._match_of(sid), sid, direction)

    def defend_move(self, sid: str, direction) -> None:
        with self.lock:
            self.moves.respond_move(self._match_of(sid), sid, direction)

    def submit_combination(self, sid: str, combination) -> None:
        with self.lock:
            self.combinations.submit_combination(self._match_of(sid), sid, combination)

    def submit_guess(self, sid: str, guesses) -> None:
        with self.lock:
            self.combinations.submit_guess(self._match_of(sid), sid, guesses)

    # ---- queries ----

    def snapshot(self, code: str) -> Optional[dict]:
        with self.lock:
            match = self.registry.get(code)
            return match.to_dict() if match else None

    def _match_of(self, sid: str) -> Match:
        match = self.registry.match_for(sid)
        if match is None:
            raise UnauthorizedAction('Not in a live match')
        return match
