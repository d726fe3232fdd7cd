import logging
import threading
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Tuple

from .cards import CardValue, is_numeric_card, is_valid_card, normalize_card
from .errors import InvalidCard, NotAMember, RoomNotFound

logger = logging.getLogger(__name__)

# Wire markers for a selection that is not revealed yet
HIDDEN = True
UNSET = None


class Member:
    __slots__ = ('id', 'name', 'card')

    def __init__(self, member_id: str, name: str):
        self.id = member_id
        self.name = name
        self.card: Optional[CardValue] = None

    def to_dict(self, revealed: bool):
        if revealed:
            selection = self.card
        else:
            selection = HIDDEN if self.card is not None else UNSET
        return {
            'id': self.id,
            'name': self.name,
            'selection': selection,
        }


class Room:
    """Authoritative state of one planning session.

    Every mutating method takes ``self.lock``, refuses to run on a closed
    room, and returns the sanitized ``view()`` computed before the lock is
    released so callers can broadcast it without holding the lock.

    Countdown ticks carry a token; anything that ends or restarts a
    countdown (reveal, new round, restart, close) bumps the token so a late
    tick is discarded instead of revealing.
    """

    def __init__(self, room_id: str, created_at: Optional[float] = None):
        self.id = room_id
        self.members: Dict[str, Member] = {}
        self.revealed = False
        self.countdown: Optional[int] = None
        self.created_at = time.time() if created_at is None else created_at
        self.closed = False
        self.lock = threading.RLock()
        self._countdown_token = 0

    def __repr__(self):
        return f'<Room {self.id} members={len(self.members)} revealed={self.revealed}>'

    @property
    def is_empty(self) -> bool:
        return not self.members

    def age(self, now: float) -> float:
        return now - self.created_at

    def _ensure_open(self) -> None:
        if self.closed:
            raise RoomNotFound(self.id)

    def _stop_countdown(self) -> None:
        self.countdown = None
        self._countdown_token += 1

    def _reveal(self) -> None:
        self.revealed = True
        self._stop_countdown()

    # -------------------- Membership -------------------- #

    def join(self, member_id: str, name: str) -> Tuple[dict, List[str]]:
        """Add or reset a member; returns the view and the ids evicted by name."""
        with self.lock:
            self._ensure_open()
            evicted = [mid for mid, m in self.members.items() if m.name == name and mid != member_id]
            for mid in evicted:
                del self.members[mid]
                logger.info(f"[member-evict] room={self.id} member={mid} name={name!r}")
            self.members[member_id] = Member(member_id, name)
            logger.info(f"[member-join] room={self.id} member={member_id} name={name!r}")
            return self.view(), evicted

    def leave(self, member_id: str) -> bool:
        with self.lock:
            removed = self.members.pop(member_id, None) is not None
            if removed:
                logger.info(f"[member-leave] room={self.id} member={member_id} remaining={len(self.members)}")
            return removed

    # -------------------- Round flow -------------------- #

    def select_card(self, member_id: str, value) -> dict:
        value = normalize_card(value)
        if not is_valid_card(value):
            raise InvalidCard(value)
        with self.lock:
            self._ensure_open()
            member = self.members.get(member_id)
            if member is None:
                raise NotAMember()
            member.card = value
            logger.info(f"[card-select] room={self.id} member={member_id}")
            return self.view()

    def reveal(self) -> dict:
        with self.lock:
            self._ensure_open()
            self._reveal()
            logger.info(f"[reveal] room={self.id}")
            return self.view()

    def start_countdown(self, ticks: int) -> Optional[Tuple[int, dict]]:
        """Begin (or restart) a staged reveal.

        Returns ``(token, view)``, or None when the room is already revealed.
        A restart while counting wins over the running countdown.
        """
        with self.lock:
            self._ensure_open()
            if self.revealed:
                logger.info(f"[countdown-skip] room={self.id} already revealed")
                return None
            self._stop_countdown()
            if ticks <= 0:
                self._reveal()
            else:
                self.countdown = ticks
            logger.info(f"[countdown-start] room={self.id} ticks={ticks} token={self._countdown_token}")
            return self._countdown_token, self.view()

    def tick(self, token: int) -> Optional[dict]:
        """Apply one countdown tick; None if the countdown was cancelled."""
        with self.lock:
            if self.closed or token != self._countdown_token or self.countdown is None:
                return None
            self.countdown -= 1
            if self.countdown <= 0:
                self._reveal()
                logger.info(f"[reveal] room={self.id} via countdown")
            return self.view()

    def new_round(self) -> dict:
        with self.lock:
            self._ensure_open()
            self.revealed = False
            self._stop_countdown()
            for member in self.members.values():
                member.card = None
            logger.info(f"[new-round] room={self.id}")
            return self.view()

    def close(self) -> None:
        with self.lock:
            self.closed = True
            self._stop_countdown()

    # -------------------- Views -------------------- #

    def average(self) -> Optional[str]:
        with self.lock:
            cards = [m.card for m in self.members.values() if is_numeric_card(m.card)]
        if not cards:
            return None
        # Ties round up (2.25 -> "2.3"), matching clients that use toFixed
        mean = Decimal(sum(cards)) / len(cards)
        return str(mean.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))

    def view(self) -> dict:
        """Sanitized snapshot; card values appear only once revealed."""
        with self.lock:
            payload = {
                'id': self.id,
                'members': [m.to_dict(self.revealed) for m in self.members.values()],
                'revealed': self.revealed,
                'average': self.average() if self.revealed else None,
            }
            if self.countdown is not None:
                payload['countdown'] = self.countdown
            return payload
