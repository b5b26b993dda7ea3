from typing import Any, Dict, Optional


def match_room(code: str) -> str:
    return f"match:{code}"


class SocketIONotifier:
    """Outbound notifications over Socket.IO.

    Participants are addressed by socket id; a whole match is addressed
    through its room. Uses the server object directly so it works from
    background tasks as well as from request handlers.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def enroll(self, sid: str, code: str) -> None:
        self.socketio.server.enter_room(sid, match_room(code), namespace=self.namespace)

    def send(self, sid: str, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self._emit(event, payload, sid)

    def broadcast(self, code: str, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self._emit(event, payload, match_room(code))

    def close(self, code: str) -> None:
        self.socketio.server.close_room(match_room(code), namespace=self.namespace)

    def _emit(self, event, payload, to):
        if payload is None:
            self.socketio.emit(event, to=to, namespace=self.namespace)
        else:
            self.socketio.emit(event, payload, to=to, namespace=self.namespace)
