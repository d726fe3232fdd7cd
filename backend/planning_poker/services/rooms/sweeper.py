import logging
import time

logger = logging.getLogger(__name__)


def start_expiry_sweeper(app, socketio, store) -> bool:
    """Start the periodic room expiry loop as a Socket.IO background task.

    No-ops in TESTING; tests call ``store.sweep_expired`` directly.
    """
    if app.config.get('TESTING'):
        return False

    interval = int(app.config.get('ROOM_SWEEP_INTERVAL_SEC', 3600))
    max_age = int(app.config.get('ROOM_MAX_AGE_SEC', 3600))

    def _worker():
        while True:
            socketio.sleep(interval)
            try:
                removed = store.sweep_expired(time.time(), max_age)
                logger.info(f"[sweep] removed={len(removed)} remaining={len(store)}")
            except Exception:
                logger.exception("[sweep-failed]")

    socketio.start_background_task(_worker)
    logger.info(f"[sweep-set] interval={interval}s max_age={max_age}s")
    return True
