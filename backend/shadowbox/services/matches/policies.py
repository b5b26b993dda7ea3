"""Round structures.

A policy decides who holds which role in a round, what each participant
is told at every phase, and what a round's result looks like. Timing and
state transitions stay in the coordinator, so both structures share the
same countdown, round timer, round end and rematch flow.
"""

from typing import Dict, Tuple

from shadowbox.errors import UnknownVariant
from shadowbox.models import Direction, Match, MatchState, Role, Slot
from .scoring import score_guess


class RoundPolicy:
    name = ''
    active_state = MatchState.PLAYING

    def __init__(self, total_rounds: int, round_duration: int):
        self.total_rounds = total_rounds
        self.round_duration = round_duration

    def assign_roles(self, match: Match) -> Dict[Slot, Role]:
        raise NotImplementedError

    def open_round(self, coordinator, match: Match) -> None:
        raise NotImplementedError

    def announce_countdown(self, coordinator, match: Match) -> None:
        raise NotImplementedError

    def announce_start(self, coordinator, match: Match) -> None:
        raise NotImplementedError

    def expire_round(self, coordinator, match: Match) -> None:
        """Called when the round timer runs out, before the round is ended."""

    def round_result(self, match: Match) -> Tuple[str, dict]:
        raise NotImplementedError

    def _send_role(self, coordinator, match: Match, role: Role, event: str, payload=None) -> None:
        coordinator.notifier.send(match.sid_of(match.holder(role)), event, payload)


class ReactivePolicy(RoundPolicy):
    """Attacker sends moves, defender mirrors them. Roles swap every round.

    The creator (player1) defends in odd rounds.
    """

    name = 'reactive'
    active_state = MatchState.PLAYING

    def assign_roles(self, match):
        if match.current_round % 2 == 1:
            return {Slot.PLAYER1: Role.DEFENDER, Slot.PLAYER2: Role.ATTACKER}
        return {Slot.PLAYER1: Role.ATTACKER, Slot.PLAYER2: Role.DEFENDER}

    def open_round(self, coordinator, match):
        coordinator.start_countdown(match)

    def announce_countdown(self, coordinator, match):
        for slot, role in match.roles.items():
            coordinator.notifier.send(match.sid_of(slot), 'roundStart', {
                'round': match.current_round,
                'totalRounds': match.total_rounds,
                'role': role.value,
                'countdownSeconds': coordinator.settings.countdown_seconds,
            })

    def announce_start(self, coordinator, match):
        payload = {'duration': self.round_duration, 'round': match.current_round}
        self._send_role(coordinator, match, Role.ATTACKER, 'startAttacking', payload)
        self._send_role(coordinator, match, Role.DEFENDER, 'startDefending', payload)

    def round_result(self, match):
        return 'roundEnd', {'round': match.current_round, 'scores': match.scores_payload()}


class GuessingPolicy(RoundPolicy):
    """Setter enters a combination, guesser has to reproduce it.

    Roles are fixed: player1 always sets.
    """

    name = 'guessing'
    active_state = MatchState.GUESSING

    def assign_roles(self, match):
        return {Slot.PLAYER1: Role.SETTER, Slot.PLAYER2: Role.GUESSER}

    def open_round(self, coordinator, match):
        match.combination = None
        match.last_result = None
        match.transition(MatchState.INPUTTING)
        payload = {'round': match.current_round}
        self._send_role(coordinator, match, Role.SETTER, 'inputCombination', payload)
        self._send_role(coordinator, match, Role.GUESSER, 'waitingForCombination', payload)

    def announce_countdown(self, coordinator, match):
        self._send_role(coordinator, match, Role.GUESSER, 'getReady', {
            'round': match.current_round,
            'countdownSeconds': coordinator.settings.countdown_seconds,
        })
        self._send_role(coordinator, match, Role.SETTER, 'watchingOpponent', {'round': match.current_round})

    def announce_start(self, coordinator, match):
        self._send_role(coordinator, match, Role.GUESSER, 'startGuessing', {
            'duration': self.round_duration,
            'round': match.current_round,
        })
        self._send_role(coordinator, match, Role.SETTER, 'opponentGuessing', {'duration': self.round_duration})

    def expire_round(self, coordinator, match):
        # no guess arrived in time: every slot counts as unfilled
        if match.last_result is None:
            score_guess(match, [Direction.NONE.value] * len(match.combination or []))

    def round_result(self, match):
        payload = dict(match.last_result or {})
        payload['scores'] = match.scores_payload()
        return 'roundResult', payload


def build_policy(name: str, settings) -> RoundPolicy:
    if name == ReactivePolicy.name:
        return ReactivePolicy(settings.reactive_total_rounds, settings.reactive_round_duration)
    if name == GuessingPolicy.name:
        return GuessingPolicy(settings.guessing_total_rounds, settings.guessing_round_duration)
    raise UnknownVariant(name)
