from flask import current_app, request
from flask_socketio import emit
from planning_poker import socketio, memberships, dispatcher, countdowns
from planning_poker.errors import NotAMember, RoomError
from planning_poker.services.rooms.broadcast import WS_NAMESPACE


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # Transport-level loss: same cleanup as an explicit leave, at most once per sid
    memberships.unbind(_get_sid())


def handle_join_game(data):
    data = _payload(data)
    sid = _get_sid()
    view = memberships.bind(sid, data.get('room_id'), data.get('name'))
    emit('joined', {'room_id': view['id'], 'member_id': sid})


def handle_leave_game(data=None):
    sid = _get_sid()
    binding = memberships.binding(sid)
    if binding is None or not memberships.unbind(sid):
        raise NotAMember()
    emit('left', {'room_id': binding.room_id})


def handle_select_card(data):
    room, member_id = memberships.resolve(_get_sid())
    view = room.select_card(member_id, _payload(data).get('card'))
    dispatcher.publish(room.id, view)


def handle_reveal_cards(data=None):
    room, _ = memberships.resolve(_get_sid())
    dispatcher.publish(room.id, room.reveal())


def handle_start_countdown(data=None):
    room, _ = memberships.resolve(_get_sid())
    countdowns.start(room)


def handle_new_round(data=None):
    room, _ = memberships.resolve(_get_sid())
    dispatcher.publish(room.id, room.new_round())


def handle_ping(data=None):
    emit('pong', data or {})


def handle_error(exc):
    """Report a failed request to the originating connection only."""
    if isinstance(exc, RoomError):
        current_app.logger.info(f"[ws-error] sid={_get_sid()} kind={exc.kind} message={exc.message}")
        emit('error', exc.to_dict())
        return
    current_app.logger.exception(f"[ws-error] sid={_get_sid()} unexpected failure")
    emit('error', {'kind': 'InternalError', 'message': 'Internal server error'})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=WS_NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=WS_NAMESPACE)
    socketio.on_event('join_game', handle_join_game, namespace=WS_NAMESPACE)
    socketio.on_event('leave_game', handle_leave_game, namespace=WS_NAMESPACE)
    socketio.on_event('select_card', handle_select_card, namespace=WS_NAMESPACE)
    socketio.on_event('reveal_cards', handle_reveal_cards, namespace=WS_NAMESPACE)
    socketio.on_event('start_countdown', handle_start_countdown, namespace=WS_NAMESPACE)
    socketio.on_event('new_round', handle_new_round, namespace=WS_NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=WS_NAMESPACE)
    socketio.on_error(WS_NAMESPACE)(handle_error)
