"""Delivery of game events to connected clients.

The session layer only talks to a broadcaster; it never touches Socket.IO
directly, so the transport can be swapped or recorded in tests.
"""


class Broadcaster:
    def to_room(self, room_id: str, event: str, payload) -> None:
        raise NotImplementedError

    def to_connection(self, sid: str, event: str, payload) -> None:
        raise NotImplementedError

    def enter(self, sid: str, room_id: str) -> None:
        raise NotImplementedError


class SocketIOBroadcaster(Broadcaster):
    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def to_room(self, room_id, event, payload):
        # socketio.emit works from request handlers and background tasks alike
        self.socketio.emit(event, payload, to=room_id, namespace=self.namespace)

    def to_connection(self, sid, event, payload):
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def enter(self, sid, room_id):
        self.socketio.server.enter_room(sid, room_id, namespace=self.namespace)


class RecordingBroadcaster(Broadcaster):
    """Keeps every event in memory; used by the CLI match runner and tests."""

    def __init__(self):
        self.events = []
        self.memberships = {}

    def to_room(self, room_id, event, payload):
        self.events.append(('room', room_id, event, payload))

    def to_connection(self, sid, event, payload):
        self.events.append(('sid', sid, event, payload))

    def enter(self, sid, room_id):
        self.memberships.setdefault(room_id, set()).add(sid)

    def names(self, target=None):
        return [e[2] for e in self.events if target is None or e[1] == target]

    def last(self, event):
        for kind, target, name, payload in reversed(self.events):
            if name == event:
                return payload
        return None

    def clear(self):
        self.events.clear()
