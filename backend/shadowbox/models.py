from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import random
import string

from shadowbox.errors import IllegalTransition, InvalidDirection


class Direction(str, Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'
    NONE = 'none'  # unfilled guess slot

    @classmethod
    def parse(cls, value, allow_none: bool = False) -> 'Direction':
        try:
            direction = cls(str(value).lower())
        except ValueError:
            raise InvalidDirection(value)
        if direction is cls.NONE and not allow_none:
            raise InvalidDirection(value)
        return direction


class MatchState(str, Enum):
    WAITING = 'waiting'
    INPUTTING = 'inputting'
    COUNTDOWN = 'countdown'
    PLAYING = 'playing'
    GUESSING = 'guessing'
    ROUND_END = 'roundEnd'
    MATCH_END = 'matchEnd'


TRANSITIONS = {
    MatchState.WAITING: {MatchState.COUNTDOWN, MatchState.INPUTTING},
    MatchState.INPUTTING: {MatchState.COUNTDOWN},
    MatchState.COUNTDOWN: {MatchState.PLAYING, MatchState.GUESSING},
    MatchState.PLAYING: {MatchState.ROUND_END},
    MatchState.GUESSING: {MatchState.ROUND_END},
    MatchState.ROUND_END: {MatchState.COUNTDOWN, MatchState.INPUTTING, MatchState.MATCH_END},
    # rematch
    MatchState.MATCH_END: {MatchState.WAITING},
}


class Slot(str, Enum):
    PLAYER1 = 'player1'
    PLAYER2 = 'player2'

    @property
    def other(self) -> 'Slot':
        return Slot.PLAYER2 if self is Slot.PLAYER1 else Slot.PLAYER1


class Role(str, Enum):
    ATTACKER = 'attacker'
    DEFENDER = 'defender'
    SETTER = 'setter'
    GUESSER = 'guesser'


class MoveStatus(str, Enum):
    PENDING = 'pending'
    RESOLVED = 'resolved'
    MISSED = 'missed'


@dataclass
class Move:
    direction: Direction
    created_at: float
    status: MoveStatus = MoveStatus.PENDING

    @property
    def responded(self) -> bool:
        return self.status is not MoveStatus.PENDING

    def to_dict(self):
        return {
            'direction': self.direction.value,
            'status': self.status.value,
        }


def generate_match_code(length=6):
    """Generate a short, human-typeable match code."""
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


@dataclass
class Match:
    code: str
    slot_a: str
    policy: Any
    total_rounds: int
    slot_b: Optional[str] = None
    current_round: int = 1
    state: MatchState = MatchState.WAITING
    scores: Dict[Slot, int] = field(default_factory=lambda: {Slot.PLAYER1: 0, Slot.PLAYER2: 0})
    roles: Dict[Slot, Role] = field(default_factory=dict)
    move: Optional[Move] = None
    combination: Optional[List[Direction]] = None
    last_result: Optional[Dict[str, Any]] = None
    rematch: Dict[Slot, bool] = field(default_factory=lambda: {Slot.PLAYER1: False, Slot.PLAYER2: False})
    timers: Any = field(default=None, repr=False)

    @property
    def is_full(self) -> bool:
        return self.slot_b is not None

    def slot_of(self, sid: str) -> Optional[Slot]:
        if sid == self.slot_a:
            return Slot.PLAYER1
        if self.slot_b is not None and sid == self.slot_b:
            return Slot.PLAYER2
        return None

    def sid_of(self, slot: Slot) -> Optional[str]:
        return self.slot_a if slot is Slot.PLAYER1 else self.slot_b

    def holder(self, role: Role) -> Optional[Slot]:
        for slot, assigned in self.roles.items():
            if assigned is role:
                return slot
        return None

    def has_role(self, sid: str, role: Role) -> bool:
        slot = self.slot_of(sid)
        return slot is not None and self.roles.get(slot) is role

    def transition(self, target: MatchState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise IllegalTransition(self.state, target)
        self.state = target

    def award(self, slot: Slot, points: int = 1) -> None:
        if points < 0:
            raise ValueError('scores only increase')
        self.scores[slot] += points

    def reset_for_rematch(self) -> None:
        self.transition(MatchState.WAITING)
        self.current_round = 1
        self.scores = {Slot.PLAYER1: 0, Slot.PLAYER2: 0}
        self.rematch = {Slot.PLAYER1: False, Slot.PLAYER2: False}
        self.roles = {}
        self.move = None
        self.combination = None
        self.last_result = None

    def scores_payload(self) -> Dict[str, int]:
        return {slot.value: score for slot, score in self.scores.items()}

    def to_dict(self):
        return {
            'match_code': self.code,
            'variant': self.policy.name,
            'state': self.state.value,
            'players': {Slot.PLAYER1.value: True, Slot.PLAYER2.value: self.is_full},
            'current_round': self.current_round,
            'total_rounds': self.total_rounds,
            'scores': self.scores_payload(),
            'roles': {slot.value: role.value for slot, role in self.roles.items()},
            'move': self.move.to_dict() if self.move else None,
            'rematch': {slot.value: flag for slot, flag in self.rematch.items()},
        }
