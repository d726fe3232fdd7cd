import logging
import threading
from typing import Dict, NamedTuple, Optional, Tuple

from planning_poker.errors import InvalidRequest, NotAMember, RoomNotFound
from planning_poker.models import Room

logger = logging.getLogger(__name__)

EVICTED_EVENT = 'evicted'


class Binding(NamedTuple):
    room_id: str
    member_id: str


class MembershipManager:
    """Tracks which room and member each connection (sid) speaks for.

    Only the initial join carries a room id; later events are routed with the
    stored binding.
    """

    def __init__(self, store, dispatcher):
        self.store = store
        self.dispatcher = dispatcher
        self._bindings: Dict[str, Binding] = {}
        self._lock = threading.Lock()

    def init_app(self, app) -> None:
        with self._lock:
            self._bindings.clear()
        app.extensions['room_memberships'] = self

    def __len__(self):
        with self._lock:
            return len(self._bindings)

    def binding(self, sid: str) -> Optional[Binding]:
        with self._lock:
            return self._bindings.get(sid)

    def resolve(self, sid: str) -> Tuple[Room, str]:
        binding = self.binding(sid)
        if binding is None:
            raise NotAMember()
        room = self.store.find(binding.room_id)
        if room is None:
            raise RoomNotFound(binding.room_id)
        return room, binding.member_id

    def bind(self, sid: str, room_id, name) -> dict:
        if not room_id or not isinstance(room_id, str):
            raise InvalidRequest('room_id is required')
        if not isinstance(name, str) or not name.strip():
            raise InvalidRequest('name is required')
        name = name.strip()

        room = self.store.get(room_id)
        previous = self.binding(sid)
        if previous is not None and previous.room_id != room_id:
            self.unbind(sid)

        view, evicted = room.join(sid, name)
        with self._lock:
            self._bindings[sid] = Binding(room_id, sid)
            for stale_sid in evicted:
                stale = self._bindings.get(stale_sid)
                if stale is not None and stale.room_id == room_id:
                    del self._bindings[stale_sid]

        self.dispatcher.attach(sid, room_id)
        for stale_sid in evicted:
            self.dispatcher.detach(stale_sid, room_id)
            self.dispatcher.notify(stale_sid, EVICTED_EVENT, {'room_id': room_id, 'name': name})
        self.dispatcher.publish(room_id, view)
        return view

    def unbind(self, sid: str) -> bool:
        """Drop the connection's binding and leave its room.

        Runs at most once per binding; an empty room is closed and removed,
        otherwise the remaining members get one update.
        """
        with self._lock:
            binding = self._bindings.pop(sid, None)
        if binding is None:
            return False

        room_id = binding.room_id
        try:
            self.dispatcher.detach(sid, room_id)
            room = self.store.find(room_id)
            if room is None:
                return True
            with room.lock:
                removed = room.leave(binding.member_id)
                empty = room.is_empty
                if empty:
                    room.close()
                view = room.view() if removed and not empty else None
            if empty:
                self.store.remove(room_id)
                logger.info(f"[room-empty] room={room_id} removed after last member left")
            elif view is not None:
                self.dispatcher.publish(room_id, view)
        except Exception:
            logger.exception(f"[unbind-failed] sid={sid} room={room_id}")
        return True
