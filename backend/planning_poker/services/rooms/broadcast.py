import logging

logger = logging.getLogger(__name__)

WS_NAMESPACE = '/ws'
STATE_EVENT = 'state_update'


class BroadcastDispatcher:
    """Pushes room snapshots to the Socket.IO room named after the room id.

    A connection is "bound" to a room for broadcast purposes once it has been
    attached to the Socket.IO room of the same name.
    """

    def __init__(self, socketio, namespace: str = WS_NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def publish(self, room_id: str, view: dict) -> None:
        # Use socketio.emit since this may be called from a background task
        self.socketio.emit(STATE_EVENT, view, to=room_id, namespace=self.namespace)
        logger.debug(f"[broadcast] room={room_id} members={len(view.get('members', []))}")

    def attach(self, sid: str, room_id: str) -> None:
        self.socketio.server.enter_room(sid, room_id, namespace=self.namespace)

    def detach(self, sid: str, room_id: str) -> None:
        self.socketio.server.leave_room(sid, room_id, namespace=self.namespace)

    def notify(self, sid: str, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)
