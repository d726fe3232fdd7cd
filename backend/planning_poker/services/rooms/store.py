import logging
import secrets
import string
import threading
import time
from typing import Dict, List, Optional

from planning_poker.errors import IdGenerationExhausted, RoomNotFound
from planning_poker.models import Room

logger = logging.getLogger(__name__)

# Same alphabet as URL-safe short ids
ID_ALPHABET = string.ascii_letters + string.digits + '_-'


def generate_room_id(length: int = 6) -> str:
    """Generate a short, URL-safe room id (uniqueness is checked by the store)."""
    return ''.join(secrets.choice(ID_ALPHABET) for _ in range(length))


class RoomStore:
    """Process-wide in-memory registry of rooms.

    The registry lock only guards the id -> Room mapping and is never held
    while taking a room's own lock.
    """

    def __init__(self, id_length: int = 6, max_attempts: int = 16, id_factory=None):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        self.id_length = id_length
        self.max_attempts = max_attempts
        self.id_factory = id_factory or generate_room_id

    def init_app(self, app) -> None:
        self.id_length = int(app.config.get('ROOM_ID_LENGTH', 6))
        self.max_attempts = int(app.config.get('ROOM_ID_MAX_ATTEMPTS', 16))
        self.clear()
        app.extensions['room_store'] = self

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id):
        with self._lock:
            return room_id in self._rooms

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def clear(self) -> None:
        with self._lock:
            rooms = list(self._rooms.values())
            self._rooms.clear()
        for room in rooms:
            room.close()

    def create(self, now: Optional[float] = None) -> str:
        with self._lock:
            for _ in range(self.max_attempts):
                room_id = self.id_factory(self.id_length)
                if room_id not in self._rooms:
                    self._rooms[room_id] = Room(room_id, created_at=now)
                    break
            else:
                logger.error(f"[room-create-failed] attempts={self.max_attempts} rooms={len(self._rooms)}")
                raise IdGenerationExhausted()
        logger.info(f"[room-create] room={room_id}")
        return room_id

    def find(self, room_id) -> Optional[Room]:
        if not room_id:
            return None
        with self._lock:
            return self._rooms.get(room_id)

    def get(self, room_id) -> Room:
        room = self.find(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def remove(self, room_id) -> bool:
        with self._lock:
            room = self._rooms.pop(room_id, None)
        if room is None:
            return False
        room.close()
        logger.info(f"[room-remove] room={room_id}")
        return True

    def sweep_expired(self, now: Optional[float] = None, max_age: float = 3600) -> List[str]:
        """Remove every room whose age is strictly greater than ``max_age``."""
        if now is None:
            now = time.time()
        with self._lock:
            expired = [room for room in self._rooms.values() if room.age(now) > max_age]
            for room in expired:
                del self._rooms[room.id]
        for room in expired:
            room.close()
            logger.info(f"[room-expire] room={room.id} age={int(room.age(now))}s")
        return [room.id for room in expired]
