from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

from planning_poker.services.rooms import (
    BroadcastDispatcher,
    CountdownController,
    MembershipManager,
    RoomStore,
)
from planning_poker.services.rooms.broadcast import WS_NAMESPACE

socketio = SocketIO(async_mode=None)
rooms = RoomStore()
dispatcher = BroadcastDispatcher(socketio, namespace=WS_NAMESPACE)
memberships = MembershipManager(rooms, dispatcher)
countdowns = CountdownController(socketio, dispatcher)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room engine state is process-wide and starts empty for every app
    rooms.init_app(flask_app)
    memberships.init_app(flask_app)
    countdowns.init_app(flask_app)

    from planning_poker.main import main
    flask_app.register_blueprint(main)

    from planning_poker.api.rooms import rooms_api
    flask_app.register_blueprint(rooms_api, url_prefix='/api/rooms')

    from planning_poker.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from planning_poker.services.rooms.sweeper import start_expiry_sweeper
    start_expiry_sweeper(flask_app, socketio, rooms)

    return flask_app
