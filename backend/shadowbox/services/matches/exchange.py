from shadowbox.errors import (
    InvalidCombinationLength,
    InvalidDirection,
    UnauthorizedAction,
)
from shadowbox.models import Direction, Match, MatchState, Move, MoveStatus, Role
from .coordinator import MOVE
from .scoring import score_guess


class MoveExchange:
    """One attacker move and its defender response, raced against the reaction window.

    A move is ``pending`` until either the defender answers (``resolved``)
    or the window runs out (``missed``). Both paths check the pending
    status and flip it before notifying anyone, so exactly one outcome is
    ever emitted per move.
    """

    def __init__(self, coordinator, clock):
        self.coordinator = coordinator
        self.clock = clock

    @property
    def notifier(self):
        return self.coordinator.notifier

    def submit_move(self, match: Match, sender: str, direction) -> Move:
        if match.state is not MatchState.PLAYING or not match.has_role(sender, Role.ATTACKER):
            raise UnauthorizedAction()
        if match.move is not None and not match.move.responded:
            raise UnauthorizedAction('A move is already pending')
        try:
            direction = Direction.parse(direction)
        except InvalidDirection as exc:
            raise UnauthorizedAction(exc.message)

        match.timers.cancel(MOVE)
        move = Move(direction=direction, created_at=self.clock.now())
        match.move = move
        window_ms = self.coordinator.settings.reaction_window_ms
        defender = match.sid_of(match.holder(Role.DEFENDER))
        self.notifier.send(defender, 'incomingMove', {
            'direction': direction.value,
            'reactionTime': window_ms,
        })
        self.notifier.send(sender, 'moveSent', {'direction': direction.value})
        self.coordinator.schedule(
            match, MOVE, self.coordinator.settings.reaction_window,
            lambda m: self._expire(m, move),
        )
        return move

    def respond_move(self, match: Match, sender: str, detected) -> bool:
        if match.state is not MatchState.PLAYING or not match.has_role(sender, Role.DEFENDER):
            raise UnauthorizedAction()
        move = match.move
        if move is None or move.responded:
            raise UnauthorizedAction('No pending move')
        elapsed = self.clock.now() - move.created_at
        if elapsed > self.coordinator.settings.reaction_window:
            # window already closed, the timeout callback just hasn't run yet
            match.timers.cancel(MOVE)
            self._expire(match, move)
            return False
        move.status = MoveStatus.RESOLVED
        match.timers.cancel(MOVE)
        match.move = None

        try:
            detected = Direction.parse(detected, allow_none=True)
        except InvalidDirection:
            detected = Direction.NONE
        correct = detected is move.direction
        reaction_ms = int(round(elapsed * 1000))
        defender_slot = match.slot_of(sender)
        if correct:
            match.award(defender_slot)

        payload = {
            'expected': move.direction.value,
            'detected': detected.value,
            'correct': correct,
            'reactionTime': reaction_ms,
            'scores': match.scores_payload(),
        }
        self.notifier.send(sender, 'moveResult', payload)
        self.notifier.send(match.sid_of(defender_slot.other), 'opponentResult', payload)
        self.coordinator.logger.info(
            f"[move-result] match={match.code} expected={move.direction.value} "
            f"detected={detected.value} correct={correct} reaction={reaction_ms}ms"
        )
        return correct

    def _expire(self, match: Match, move: Move) -> None:
        if match.move is not move or move.responded:
            return
        move.status = MoveStatus.MISSED
        match.move = None
        payload = {'direction': move.direction.value}
        self.notifier.send(match.sid_of(match.holder(Role.DEFENDER)), 'moveMissed', payload)
        self.notifier.send(match.sid_of(match.holder(Role.ATTACKER)), 'opponentMissed', payload)
        self.coordinator.logger.info(f"[move-missed] match={match.code} direction={move.direction.value}")


class CombinationExchange:
    """Setter enters a fixed-length combination, guesser submits one attempt."""

    def __init__(self, coordinator):
        self.coordinator = coordinator

    def submit_combination(self, match: Match, sender: str, combination) -> None:
        if match.state is not MatchState.INPUTTING or not match.has_role(sender, Role.SETTER):
            raise UnauthorizedAction()
        length = self.coordinator.settings.combination_length
        if not isinstance(combination, (list, tuple)) or len(combination) != length:
            actual = len(combination) if isinstance(combination, (list, tuple)) else 0
            raise InvalidCombinationLength(length, actual)
        match.combination = [Direction.parse(d) for d in combination]
        self.coordinator.logger.info(f"[combination-set] match={match.code} round={match.current_round}")
        self.coordinator.start_countdown(match)

    def submit_guess(self, match: Match, sender: str, guesses) -> dict:
        if match.state is not MatchState.GUESSING or not match.has_role(sender, Role.GUESSER):
            raise UnauthorizedAction()
        result = score_guess(match, guesses)
        self.coordinator.end_round(match)
        return result
