"""Background work driven by Socket.IO: the reveal delay and the clock heartbeat.

Both run through ``socketio.start_background_task`` so they follow whatever
async mode the server was started with (threading or eventlet).
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable

from flask_socketio import SocketIO

from ..config import Config
from ..game import service

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]

_heartbeat_lock = Lock()
_heartbeat_started = False
_heartbeat_generation = 0


def schedule_reveal(socketio: SocketIO, room_code: str, token: int, notify: Notifier) -> None:
    """Commit the pending reveal for ``room_code`` after the reveal delay."""
    if not Config.ENABLE_BACKGROUND_TASKS:
        return

    delay = Config.REVEAL_DURATION_MS / 1000

    def _worker(code: str, expected_token: int) -> None:
        socketio.sleep(delay)
        if service.complete_reveal(code, expected_token):
            notify(code)

    socketio.start_background_task(_worker, room_code, token)


def run_heartbeat_once(notify: Notifier) -> list[str]:
    touched = service.tick_all()
    for code in touched:
        notify(code)
    service.evict_stale_rooms()
    return touched


def ensure_heartbeat(socketio: SocketIO, notify: Notifier) -> bool:
    """Start the global clock task unless it is already running."""
    global _heartbeat_started

    if not Config.ENABLE_BACKGROUND_TASKS:
        return False

    with _heartbeat_lock:
        if _heartbeat_started:
            return False
        _heartbeat_started = True
        generation = _heartbeat_generation

    interval = Config.TICK_INTERVAL_SEC

    def _runner() -> None:
        logger.info(f"[heartbeat-start] interval={interval}s")
        while _heartbeat_generation == generation:
            try:
                run_heartbeat_once(notify)
            except Exception:
                logger.exception("[heartbeat-error]")
            socketio.sleep(interval)

    socketio.start_background_task(_runner)
    return True


def stop_heartbeat() -> None:
    """Let the running clock task exit after its current tick."""
    global _heartbeat_started, _heartbeat_generation

    with _heartbeat_lock:
        _heartbeat_generation += 1
        _heartbeat_started = False
