from typing import Dict, List

from shadowbox.errors import InvalidDirection
from shadowbox.models import Direction, Match, Role, Slot


def determine_winner(scores: Dict[Slot, int]) -> str:
    """Strict comparison: higher score wins, equal scores tie."""
    p1, p2 = scores[Slot.PLAYER1], scores[Slot.PLAYER2]
    if p1 > p2:
        return Slot.PLAYER1.value
    if p2 > p1:
        return Slot.PLAYER2.value
    return 'tie'


def normalize_guesses(guesses, length: int) -> List[Direction]:
    """Coerce a submitted guess into exactly ``length`` directions.

    Missing or unknown entries become ``Direction.NONE``.
    """
    if not isinstance(guesses, (list, tuple)):
        guesses = []
    normalized = []
    for i in range(length):
        raw = guesses[i] if i < len(guesses) else None
        try:
            normalized.append(Direction.parse(raw, allow_none=True) if raw else Direction.NONE)
        except InvalidDirection:
            normalized.append(Direction.NONE)
    return normalized


def score_guess(match: Match, guesses) -> Dict:
    """Apply scoring for the current guessing round.

    +1 to the guesser for each position matching the setter's combination.
    The round summary is stored on ``match.last_result``.
    """
    combination = match.combination or []
    normalized = normalize_guesses(guesses, len(combination))
    results = []
    correct_moves = 0
    for expected, guessed in zip(combination, normalized):
        is_correct = guessed is expected
        if is_correct:
            correct_moves += 1
        results.append({
            'expected': expected.value,
            'guessed': guessed.value,
            'correct': is_correct,
        })
    guesser = match.holder(Role.GUESSER)
    if correct_moves:
        match.award(guesser, correct_moves)
    match.last_result = {
        'round': match.current_round,
        'combination': [d.value for d in combination],
        'guesses': [d.value for d in normalized],
        'results': results,
        'correctMoves': correct_moves,
    }
    return match.last_result
