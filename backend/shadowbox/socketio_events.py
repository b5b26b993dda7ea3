from flask import current_app, request
from flask_socketio import emit

from shadowbox import socketio
from shadowbox.errors import (
    AlreadyInMatch,
    InvalidCombinationLength,
    InvalidDirection,
    MatchFull,
    MatchNotFound,
    UnauthorizedAction,
    UnknownVariant,
)


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _service():
    return current_app.extensions['shadowbox']


def _ignore_unauthorized(action, *args) -> None:
    try:
        action(_get_sid(), *args)
    except UnauthorizedAction as exc:
        current_app.logger.debug(f"[ignored] sid={_get_sid()} action={action.__name__} reason={exc.message}")


def _field(data, *keys):
    """Accept either a bare value or a dict carrying it under one of ``keys``."""
    if isinstance(data, dict):
        for key in keys:
            if data.get(key) is not None:
                return data[key]
        return None
    return data


def handle_connect(auth=None):
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    _service().disconnect(_get_sid())


def handle_create_match(data=None):
    variant = data.get('variant') if isinstance(data, dict) else None
    try:
        _service().create_match(_get_sid(), variant)
    except (AlreadyInMatch, UnknownVariant) as exc:
        emit('joinError', {'message': exc.message})


def handle_join_match(data=None):
    code = _field(data, 'code', 'matchCode')
    if not code or not isinstance(code, str):
        emit('joinError', {'message': 'Match code is required'})
        return
    try:
        _service().join_match(_get_sid(), code)
    except (MatchNotFound, MatchFull, AlreadyInMatch) as exc:
        emit('joinError', {'message': exc.message})


def handle_attack_move(data=None):
    _ignore_unauthorized(_service().attack_move, _field(data, 'direction'))


def handle_defend_move(data=None):
    _ignore_unauthorized(_service().defend_move, _field(data, 'direction'))


def handle_submit_combination(data=None):
    try:
        _ignore_unauthorized(_service().submit_combination, _field(data, 'combination'))
    except (InvalidCombinationLength, InvalidDirection) as exc:
        emit('combinationError', {'message': exc.message})


def handle_submit_guess(data=None):
    _ignore_unauthorized(_service().submit_guess, _field(data, 'guesses'))


def handle_propose_rematch(data=None):
    _ignore_unauthorized(_service().propose_rematch)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createMatch', handle_create_match, namespace=namespace)
    socketio.on_event('joinMatch', handle_join_match, namespace=namespace)
    socketio.on_event('attackMove', handle_attack_move, namespace=namespace)
    socketio.on_event('defendMove', handle_defend_move, namespace=namespace)
    socketio.on_event('submitCombination', handle_submit_combination, namespace=namespace)
    socketio.on_event('submitGuess', handle_submit_guess, namespace=namespace)
    socketio.on_event('proposeRematch', handle_propose_rematch, namespace=namespace)
