import logging
from typing import Callable

from shadowbox.models import Match, MatchState
from .scoring import determine_winner

COUNTDOWN = 'countdown'
ROUND = 'round'
MOVE = 'move'
TRANSITION = 'transition'


class RoundCoordinator:
    """Drives countdown -> active round -> round end -> next round / match end.

    All timers go through ``schedule`` so each callback first checks that
    the registry still holds this exact match; a deleted match never gets
    mutated or notified again.
    """

    def __init__(self, registry, notifier, settings, logger=None):
        self.registry = registry
        self.notifier = notifier
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    def schedule(self, match: Match, kind: str, delay: float, fn: Callable[[Match], None]) -> None:
        def _run():
            if not self.registry.is_live(match):
                self.logger.debug(f"[timer-stale] match={match.code} kind={kind}")
                return
            fn(match)

        match.timers.start(kind, delay, _run)

    def begin_round(self, match: Match) -> None:
        match.timers.cancel_all()
        match.move = None
        match.roles = match.policy.assign_roles(match)
        roles = ','.join(f"{s.value}={r.value}" for s, r in match.roles.items())
        self.logger.info(
            f"[round-begin] match={match.code} round={match.current_round}/{match.total_rounds} roles={roles}"
        )
        match.policy.open_round(self, match)

    def start_countdown(self, match: Match) -> None:
        match.transition(MatchState.COUNTDOWN)
        match.policy.announce_countdown(self, match)
        count = self.settings.countdown_seconds
        self.schedule(match, COUNTDOWN, 1, lambda m: self._countdown_tick(m, count))

    def _countdown_tick(self, match: Match, count: int) -> None:
        self.notifier.broadcast(match.code, 'countdown', {'count': count})
        if count <= 0:
            self.start_round(match)
            return
        self.schedule(match, COUNTDOWN, 1, lambda m: self._countdown_tick(m, count - 1))

    def start_round(self, match: Match) -> None:
        match.transition(match.policy.active_state)
        duration = match.policy.round_duration
        match.policy.announce_start(self, match)
        self.logger.info(f"[round-start] match={match.code} round={match.current_round} duration={duration}s")
        self.schedule(match, ROUND, 1, lambda m: self._round_tick(m, duration - 1))

    def _round_tick(self, match: Match, time_left: int) -> None:
        self.notifier.broadcast(match.code, 'roundTimer', {'timeLeft': time_left})
        if time_left > 0:
            self.schedule(match, ROUND, 1, lambda m: self._round_tick(m, time_left - 1))
            return
        self.logger.info(f"[round-expired] match={match.code} round={match.current_round}")
        match.policy.expire_round(self, match)
        self.end_round(match)

    def end_round(self, match: Match) -> None:
        for kind in (COUNTDOWN, ROUND, MOVE):
            match.timers.cancel(kind)
        match.move = None
        match.transition(MatchState.ROUND_END)
        event, payload = match.policy.round_result(match)
        self.notifier.broadcast(match.code, event, payload)
        self.logger.info(
            f"[round-end] match={match.code} round={match.current_round} scores={match.scores_payload()}"
        )
        if match.current_round >= match.total_rounds:
            self.schedule(match, TRANSITION, self.settings.match_end_delay, self.end_match)
        else:
            self.schedule(match, TRANSITION, self.settings.next_round_delay, self._next_round)

    def _next_round(self, match: Match) -> None:
        match.current_round += 1
        self.begin_round(match)

    def end_match(self, match: Match) -> None:
        match.timers.cancel_all()
        match.transition(MatchState.MATCH_END)
        winner = determine_winner(match.scores)
        self.notifier.broadcast(match.code, 'matchEnd', {
            'scores': match.scores_payload(),
            'winner': winner,
        })
        self.logger.info(f"[match-end] match={match.code} scores={match.scores_payload()} winner={winner}")
