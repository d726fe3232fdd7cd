import logging
from typing import Optional

from planning_poker.models import Room

logger = logging.getLogger(__name__)


class CountdownController:
    """Staged reveal: publishes one update per tick, then the revealed state.

    - Runs inline in TESTING so event flow stays deterministic
    - A tick whose token has been invalidated (new round, reveal, restart,
      room removed) stops the loop without touching the room
    """

    def __init__(self, socketio, dispatcher, ticks: int = 3, tick_seconds: float = 1.0):
        self.socketio = socketio
        self.dispatcher = dispatcher
        self.ticks = ticks
        self.tick_seconds = tick_seconds
        self.inline = False

    def init_app(self, app) -> None:
        self.ticks = int(app.config.get('COUNTDOWN_TICKS', 3))
        self.tick_seconds = float(app.config.get('COUNTDOWN_TICK_SEC', 1.0))
        self.inline = bool(app.config.get('TESTING'))
        app.extensions['room_countdowns'] = self

    def start(self, room: Room) -> Optional[dict]:
        started = room.start_countdown(self.ticks)
        if started is None:
            return None
        token, view = started
        self.dispatcher.publish(room.id, view)
        if view['revealed']:
            return view
        if self.inline:
            self._worker(room, token)
        else:
            self.socketio.start_background_task(self._worker, room, token)
        return view

    def _worker(self, room: Room, token: int) -> None:
        try:
            while True:
                self.socketio.sleep(self.tick_seconds)
                view = room.tick(token)
                if view is None:
                    logger.info(f"[countdown-abort] room={room.id} token={token}")
                    return
                logger.info(f"[countdown-tick] room={room.id} remaining={view.get('countdown', 0)}")
                # A mutation that landed after the tick has already broadcast newer state
                if room.view() == view:
                    self.dispatcher.publish(room.id, view)
                else:
                    logger.info(f"[countdown-stale] room={room.id} token={token} superseded")
                if view['revealed']:
                    return
        except Exception:
            logger.exception(f"[countdown-failed] room={room.id} token={token}")
