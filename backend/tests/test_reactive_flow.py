import pytest

from shadowbox.errors import UnauthorizedAction
from shadowbox.models import MatchState, MoveStatus, Role, Slot

COUNTDOWN = 4      # ticks 3, 2, 1, 0
ROUND = 30
NEXT_ROUND = 3
MATCH_END = 2


def play_round(service, scheduler, attacker, defender, answer):
    """Countdown, one move, optional answer, then let the round timer run out."""
    scheduler.advance(COUNTDOWN)
    service.attack_move(attacker, 'right')
    scheduler.advance(0.5)
    if answer:
        service.defend_move(defender, answer)
    scheduler.advance(ROUND - 0.5)


def test_join_starts_countdown_with_roles(reactive_match, notifier):
    match = reactive_match
    assert match.state is MatchState.COUNTDOWN
    assert match.roles == {Slot.PLAYER1: Role.DEFENDER, Slot.PLAYER2: Role.ATTACKER}
    assert notifier.payloads('alice', 'roundStart') == [
        {'round': 1, 'totalRounds': 4, 'role': 'defender', 'countdownSeconds': 3}
    ]
    assert notifier.payloads('bob', 'roundStart')[0]['role'] == 'attacker'


def test_end_to_end_round_then_roles_swap(service, notifier, scheduler, reactive_match):
    match = reactive_match
    scheduler.advance(COUNTDOWN)
    assert [p['count'] for p in notifier.payloads('alice', 'countdown')] == [3, 2, 1, 0]
    assert match.state is MatchState.PLAYING
    assert notifier.payloads('bob', 'startAttacking') == [{'duration': 30, 'round': 1}]
    assert notifier.payloads('alice', 'startDefending') == [{'duration': 30, 'round': 1}]

    service.attack_move('bob', 'up')
    assert notifier.payloads('bob', 'moveSent') == [{'direction': 'up'}]
    assert notifier.payloads('alice', 'incomingMove') == [{'direction': 'up', 'reactionTime': 2000}]

    scheduler.advance(0.35)
    service.defend_move('alice', 'up')
    expected = {
        'expected': 'up',
        'detected': 'up',
        'correct': True,
        'reactionTime': 350,
        'scores': {'player1': 1, 'player2': 0},
    }
    assert notifier.payloads('alice', 'moveResult') == [expected]
    assert notifier.payloads('bob', 'opponentResult') == [expected]
    assert match.move is None

    scheduler.advance(ROUND - 0.35)
    timer = [p['timeLeft'] for p in notifier.payloads('alice', 'roundTimer')]
    assert timer == list(range(29, -1, -1))
    assert match.state is MatchState.ROUND_END
    assert notifier.payloads('alice', 'roundEnd') == [{'round': 1, 'scores': {'player1': 1, 'player2': 0}}]

    scheduler.advance(NEXT_ROUND)
    assert match.current_round == 2
    assert match.state is MatchState.COUNTDOWN
    assert notifier.payloads('alice', 'roundStart')[-1]['role'] == 'attacker'
    assert notifier.payloads('bob', 'roundStart')[-1]['role'] == 'defender'


def test_wrong_direction_scores_nothing(service, notifier, scheduler, reactive_match):
    scheduler.advance(COUNTDOWN)
    service.attack_move('bob', 'left')
    service.defend_move('alice', 'right')
    result = notifier.payloads('alice', 'moveResult')[0]
    assert result['correct'] is False
    assert result['scores'] == {'player1': 0, 'player2': 0}


def test_unknown_detected_direction_counts_as_none(service, notifier, scheduler, reactive_match):
    scheduler.advance(COUNTDOWN)
    service.attack_move('bob', 'left')
    service.defend_move('alice', 'sideways')
    result = notifier.payloads('alice', 'moveResult')[0]
    assert result['detected'] == 'none'
    assert result['correct'] is False


def test_timeout_marks_move_missed(service, notifier, scheduler, reactive_match):
    match = reactive_match
    scheduler.advance(COUNTDOWN)
    move = service.moves.submit_move(match, 'bob', 'down')
    scheduler.advance(2)
    assert move.status is MoveStatus.MISSED
    assert match.move is None
    assert notifier.payloads('alice', 'moveMissed') == [{'direction': 'down'}]
    assert notifier.payloads('bob', 'opponentMissed') == [{'direction': 'down'}]
    assert match.scores == {Slot.PLAYER1: 0, Slot.PLAYER2: 0}


@pytest.mark.parametrize('offset', [-0.001, 0.001])
def test_response_racing_reaction_window_yields_one_outcome(service, notifier, scheduler, reactive_match, offset):
    scheduler.advance(COUNTDOWN)
    service.attack_move('bob', 'left')
    scheduler.advance(2 + offset)
    if offset < 0:
        service.defend_move('alice', 'left')
    else:
        with pytest.raises(UnauthorizedAction):
            service.defend_move('alice', 'left')
    scheduler.advance(5)

    defender_outcomes = notifier.events('alice', 'moveResult') + notifier.events('alice', 'moveMissed')
    attacker_outcomes = notifier.events('bob', 'opponentResult') + notifier.events('bob', 'opponentMissed')
    assert len(defender_outcomes) == 1
    assert len(attacker_outcomes) == 1
    if offset < 0:
        assert notifier.payloads('alice', 'moveResult')[0]['reactionTime'] == 1999
    else:
        assert notifier.events('alice', 'moveMissed')


def test_late_response_loses_to_unfired_timeout(service, notifier, scheduler, reactive_match):
    match = reactive_match
    scheduler.advance(COUNTDOWN)
    service.attack_move('bob', 'up')
    # window elapsed but the timeout has not been run yet
    scheduler.clock += 2.2
    service.defend_move('alice', 'up')

    assert notifier.events('alice', 'moveResult') == []
    assert notifier.events('bob', 'opponentResult') == []
    assert notifier.payloads('alice', 'moveMissed') == [{'direction': 'up'}]
    assert notifier.payloads('bob', 'opponentMissed') == [{'direction': 'up'}]
    assert match.scores == {Slot.PLAYER1: 0, Slot.PLAYER2: 0}
    assert match.move is None

    scheduler.advance(1)
    assert len(notifier.events('alice', 'moveMissed')) == 1


def test_only_one_pending_move(service, notifier, scheduler, reactive_match):
    match = reactive_match
    scheduler.advance(COUNTDOWN)
    service.attack_move('bob', 'up')
    with pytest.raises(UnauthorizedAction):
        service.attack_move('bob', 'down')
    assert match.move.direction.value == 'up'
    assert len(notifier.events('alice', 'incomingMove')) == 1

    scheduler.advance(2)
    service.attack_move('bob', 'down')
    assert len(notifier.events('alice', 'incomingMove')) == 2


@pytest.mark.parametrize('action, sender, direction', [
    ('attack_move', 'alice', 'up'),     # defender cannot attack
    ('defend_move', 'bob', 'up'),       # attacker cannot defend
    ('defend_move', 'alice', 'up'),     # no pending move
    ('attack_move', 'bob', 'diagonal'),
    ('attack_move', 'bob', 'none'),
    ('attack_move', 'mallory', 'up'),   # not in any match
])
def test_unauthorized_actions_are_rejected(service, notifier, scheduler, reactive_match, action, sender, direction):
    scheduler.advance(COUNTDOWN)
    notifier.clear()
    with pytest.raises(UnauthorizedAction):
        getattr(service, action)(sender, direction)
    assert notifier.sent == []


def test_moves_rejected_outside_playing(service, reactive_match):
    with pytest.raises(UnauthorizedAction):
        service.attack_move('bob', 'up')


def test_round_end_clears_pending_move_without_miss(service, notifier, scheduler, reactive_match):
    match = reactive_match
    scheduler.advance(COUNTDOWN + ROUND - 0.5)
    service.attack_move('bob', 'up')
    scheduler.advance(0.5)
    assert match.state is MatchState.ROUND_END
    assert match.move is None
    scheduler.advance(NEXT_ROUND)
    assert notifier.events('alice', 'moveMissed') == []


def test_full_match_reaches_match_end_once(service, notifier, scheduler, reactive_match):
    match = reactive_match
    seen_scores = []
    play_round(service, scheduler, 'bob', 'alice', 'right')     # alice +1
    seen_scores.append(dict(match.scores))
    scheduler.advance(NEXT_ROUND)
    play_round(service, scheduler, 'alice', 'bob', 'right')     # bob +1
    seen_scores.append(dict(match.scores))
    scheduler.advance(NEXT_ROUND)
    play_round(service, scheduler, 'bob', 'alice', 'right')     # alice +1
    seen_scores.append(dict(match.scores))
    scheduler.advance(NEXT_ROUND)
    play_round(service, scheduler, 'alice', 'bob', None)        # missed
    seen_scores.append(dict(match.scores))

    assert [p['round'] for p in notifier.payloads('alice', 'roundEnd')] == [1, 2, 3, 4]
    assert match.state is MatchState.ROUND_END
    assert notifier.events('alice', 'matchEnd') == []
    for earlier, later in zip(seen_scores, seen_scores[1:]):
        assert all(later[slot] >= earlier[slot] for slot in earlier)

    scheduler.advance(MATCH_END)
    assert match.state is MatchState.MATCH_END
    assert match.current_round == match.total_rounds
    assert notifier.payloads('alice', 'matchEnd') == [
        {'scores': {'player1': 2, 'player2': 1}, 'winner': 'player1'}
    ]
    scheduler.advance(100)
    assert len(notifier.events('bob', 'matchEnd')) == 1
    assert scheduler.pending() == []
