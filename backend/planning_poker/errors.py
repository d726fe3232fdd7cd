"""Errors raised by the room engine.

Each error carries a stable ``kind`` that is sent back to the originating
connection (Socket.IO ``error`` event) or HTTP caller.
"""


class RoomError(Exception):
    kind = 'RoomError'
    status_code = 400
    default_message = 'Room error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'kind': self.kind, 'message': self.message}


class RoomNotFound(RoomError):
    kind = 'RoomNotFound'
    status_code = 404
    default_message = 'Room not found'

    def __init__(self, room_id=None):
        super().__init__(f'Room {room_id} not found' if room_id else None)
        self.room_id = room_id


class NotAMember(RoomError):
    kind = 'NotAMember'
    status_code = 403
    default_message = 'Not a member of an active room; rejoin to continue'


class InvalidCard(RoomError):
    kind = 'InvalidCard'
    default_message = 'Invalid card value'

    def __init__(self, value=None):
        super().__init__(f'Invalid card value: {value!r}')
        self.value = value


class IdGenerationExhausted(RoomError):
    kind = 'IdGenerationExhausted'
    status_code = 503
    default_message = 'Could not allocate a room id, try again'


class InvalidRequest(RoomError):
    kind = 'InvalidRequest'
    default_message = 'Invalid request'
