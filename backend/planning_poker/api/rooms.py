from flask import Blueprint, jsonify, current_app
from planning_poker import rooms
from planning_poker.errors import RoomError


rooms_api = Blueprint('rooms_api', __name__)


@rooms_api.errorhandler(RoomError)
def handle_room_error(err):
    current_app.logger.info(f"[http-error] kind={err.kind} message={err.message}")
    return jsonify({'error': err.message, 'kind': err.kind}), err.status_code


@rooms_api.route('', methods=['POST'])
def create_room():
    room_id = rooms.create()
    return jsonify({'room_id': room_id}), 201


@rooms_api.route('/<string:room_id>', methods=['GET'])
def get_room(room_id):
    # Same sanitized shape as the state_update broadcast
    return jsonify(rooms.get(room_id).view())
