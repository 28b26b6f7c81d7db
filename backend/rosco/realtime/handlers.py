from __future__ import annotations

import logging

from flask import request
from flask_socketio import SocketIO, emit, join_room

from ..game import service
from ..game.errors import RoscoError
from . import tasks

logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _room_code_from(payload: dict) -> str:
    # roomId is what the bundled browser client sends.
    raw = payload.get("roomCode") or payload.get("roomId") or ""
    if not isinstance(raw, str):
        return ""
    return service.normalize_code(raw)


def _name_from(payload: dict) -> str:
    raw = payload.get("name", "")
    if not isinstance(raw, str):
        return ""
    return raw.strip()


def register_socketio_handlers(socketio: SocketIO) -> None:
    def _broadcast_room_state(room_code: str) -> None:
        room = service.get_room(room_code)
        if not room:
            return
        socketio.emit("game-update", service.room_public_state(room), to=room.code)

    def _safe_broadcast_room_state(room_code: str) -> None:
        try:
            _broadcast_room_state(room_code)
        except Exception:
            logger.exception(f"[broadcast-error] room={room_code}")

    @socketio.on("create-room")
    def create_room(data=None):
        if not isinstance(data, dict):
            emit("error-msg", "Datos inválidos")
            return {"ok": False, "error": "invalid_payload"}

        name = _name_from(data)
        if not _validate_name(name):
            emit("error-msg", "Nombre inválido")
            return {"ok": False, "error": "invalid_payload"}

        room = service.create_room(request.sid, name)
        join_room(room.code)
        emit("room-created", room.code)

        tasks.ensure_heartbeat(socketio, _safe_broadcast_room_state)
        return {"ok": True, "roomCode": room.code}

    @socketio.on("join-room")
    def join_room_event(data=None):
        if not isinstance(data, dict):
            emit("error-msg", "Datos inválidos")
            return {"ok": False, "error": "invalid_payload"}

        room_code = _room_code_from(data)
        name = _name_from(data)

        if not _validate_name(name):
            emit("error-msg", "Nombre inválido")
            return {"ok": False, "error": "invalid_payload"}

        try:
            room = service.join_room(room_code, request.sid, name)
        except RoscoError as exc:
            emit("error-msg", exc.message)
            return {"ok": False, "error": exc.code}

        join_room(room.code)
        tasks.ensure_heartbeat(socketio, _safe_broadcast_room_state)
        _safe_broadcast_room_state(room.code)
        return {"ok": True, "roomCode": room.code}

    @socketio.on("answer")
    def answer(data=None):
        if not isinstance(data, dict):
            return

        room_code = _room_code_from(data)
        text = data.get("text", data.get("answer"))
        if not room_code or not isinstance(text, str):
            return

        room = service.get_room(room_code)
        if not room:
            return

        outcome = service.submit_answer(room, request.sid, text)
        if outcome is None:
            return

        _safe_broadcast_room_state(room.code)
        tasks.schedule_reveal(socketio, room.code, outcome.token, _safe_broadcast_room_state)

    @socketio.on("pasapalabra")
    def pasapalabra(data=None):
        if not isinstance(data, dict):
            return

        room_code = _room_code_from(data)
        if not room_code:
            return

        room = service.get_room(room_code)
        if not room:
            return

        if service.pasapalabra(room, request.sid):
            _safe_broadcast_room_state(room.code)

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.debug(f"[connect] sid={request.sid}")

    @socketio.on("disconnect")
    def on_disconnect(*args):
        # Rooms are not resumable; the seat stays until the room is evicted.
        logger.debug(f"[disconnect] sid={request.sid}")
