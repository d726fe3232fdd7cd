"""Room engine services: registry, membership, broadcast and timers.

Socket handlers and HTTP routes go through these objects; the Room model
itself never talks to the transport.
"""

from .broadcast import BroadcastDispatcher
from .countdown import CountdownController
from .membership import Binding, MembershipManager
from .store import RoomStore

__all__ = [
    'Binding',
    'BroadcastDispatcher',
    'CountdownController',
    'MembershipManager',
    'RoomStore',
]
