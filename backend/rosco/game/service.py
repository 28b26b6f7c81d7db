from __future__ import annotations

import itertools
import logging
import random
import string
import time
from threading import RLock

from ..config import Config
from .errors import RoomCodeExhausted, RoomFull, RoomNotFound
from .letters import next_pending_index
from .models import AnswerOutcome, GameState, PendingReveal, Player, Reveal, Room
from .questions import QuestionCatalog, load_catalog

logger = logging.getLogger(__name__)

MAX_PLAYERS = 2
CODE_ALPHABET = string.ascii_uppercase + string.digits


def now_ms() -> int:
    return int(time.time() * 1000)


_lock = RLock()
_rooms: dict[str, Room] = {}
_reveal_tokens = itertools.count(1)


# ---- Registry ----

def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def _generate_code(length: int) -> str:
    return "".join(random.choices(CODE_ALPHABET, k=length))


def create_room(
    owner_id: str,
    player_name: str,
    catalog: QuestionCatalog | None = None,
    time_per_player: int | None = None,
) -> Room:
    catalog = catalog or load_catalog()
    letters = catalog.letters
    questions = {letter: catalog.random_question(letter) for letter in letters}
    game = GameState(
        letters=letters,
        questions=questions,
        time_per_player=time_per_player or Config.TIME_PER_PLAYER_SEC,
    )

    with _lock:
        for _ in range(Config.ROOM_CODE_MAX_ATTEMPTS):
            code = _generate_code(Config.ROOM_CODE_LENGTH)
            if code not in _rooms:
                break
        else:
            raise RoomCodeExhausted()

        ts = now_ms()
        room = Room(
            code=code,
            game=game,
            players=[Player(id=owner_id, name=player_name)],
            created_at_ms=ts,
            last_activity_ms=ts,
        )
        _rooms[code] = room

    logger.info(f"[room-create] room={code} owner={owner_id}")
    return room


def get_room(code: str) -> Room | None:
    with _lock:
        return _rooms.get(normalize_code(code))


def delete_room(code: str) -> bool:
    with _lock:
        room = _rooms.pop(normalize_code(code), None)
    if room is None:
        return False
    with room.lock:
        room.pending_reveal = None
    return True


def list_rooms() -> list[Room]:
    with _lock:
        return list(_rooms.values())


def clear_rooms() -> None:
    with _lock:
        codes = list(_rooms.keys())
    for code in codes:
        delete_room(code)


def join_room(code: str, player_id: str, player_name: str) -> Room:
    room = get_room(code)
    if room is None:
        raise RoomNotFound()

    with room.lock:
        if len(room.players) >= MAX_PLAYERS:
            raise RoomFull()

        room.players.append(Player(id=player_id, name=player_name))
        room.game.started = True
        room.last_activity_ms = now_ms()

    logger.info(f"[room-join] room={room.code} player={player_id}")
    return room


def evict_stale_rooms(now: int | None = None) -> list[str]:
    """Drop rooms finished past their TTL or idle for too long."""
    now = now if now is not None else now_ms()
    finished_ttl_ms = Config.ROOM_FINISHED_TTL_SEC * 1000
    idle_ttl_ms = Config.ROOM_IDLE_TTL_SEC * 1000

    stale: list[str] = []
    for room in list_rooms():
        with room.lock:
            if room.finished_at_ms is not None and now - room.finished_at_ms >= finished_ttl_ms:
                stale.append(room.code)
            elif now - room.last_activity_ms >= idle_ttl_ms:
                stale.append(room.code)

    for code in stale:
        if delete_room(code):
            logger.info(f"[room-evict] room={code}")
    return stale


# ---- Turn & scoring ----

def normalize_answer(text: str) -> str:
    return text.strip().casefold()


def _can_act_locked(room: Room, actor_id: str) -> bool:
    g = room.game
    if not g.started or g.finished or g.paused:
        return False
    if not 0 <= g.turn < len(room.players):
        return False
    return room.players[g.turn].id == actor_id


def _other_turn(room: Room) -> int:
    return (room.game.turn + 1) % len(room.players)


def _finish_locked(room: Room) -> None:
    room.game.finished = True
    room.finished_at_ms = now_ms()
    scores = ",".join(str(p.score) for p in room.players)
    logger.info(f"[room-finish] room={room.code} answered={len(room.game.results)} scores={scores}")


def _arm_reveal_locked(room: Room, index: int, correct: bool) -> int:
    g = room.game
    question = g.questions[g.letters[index]]
    token = next(_reveal_tokens)

    g.paused = True
    g.reveal = Reveal(index=index, answer=question.answer, correct=correct)
    room.pending_reveal = PendingReveal(token=token, next_index=next_pending_index(g, index))

    logger.debug(
        f"[reveal-set] room={room.code} index={index} correct={correct} next={room.pending_reveal.next_index}"
    )
    return token


def submit_answer(room: Room, actor_id: str, text: str) -> AnswerOutcome | None:
    if not isinstance(text, str):
        return None

    with room.lock:
        if not _can_act_locked(room, actor_id):
            return None

        g = room.game
        idx = g.letter_index
        player = room.players[g.turn]
        expected = g.questions[g.letters[idx]].answer
        correct = normalize_answer(text) == normalize_answer(expected)

        g.passed.pop(idx, None)
        if correct:
            g.results[idx] = "correct"
            player.score += 1
        else:
            g.results[idx] = "wrong"
            player.score = max(0, player.score - Config.WRONG_PENALTY)
            g.turn = _other_turn(room)

        room.last_activity_ms = now_ms()
        token = _arm_reveal_locked(room, idx, correct)
        return AnswerOutcome(index=idx, correct=correct, token=token)


def pasapalabra(room: Room, actor_id: str) -> bool:
    with room.lock:
        if not _can_act_locked(room, actor_id):
            return False

        g = room.game
        idx = g.letter_index
        g.passed[idx] = True

        nxt = next_pending_index(g, idx)
        if nxt is None:
            _finish_locked(room)
        else:
            g.letter_index = nxt
            g.turn = _other_turn(room)

        room.last_activity_ms = now_ms()
        return True


def complete_reveal(code: str, token: int) -> bool:
    """Commit the transition queued by the last answer.

    Returns False when the room is gone or the token no longer matches
    the pending slot, in which case nothing is mutated.
    """
    room = get_room(code)
    if room is None:
        logger.info(f"[reveal-abort] room={code} token={token} room gone")
        return False

    with room.lock:
        pending = room.pending_reveal
        if pending is None or pending.token != token:
            logger.info(f"[reveal-abort] room={code} token={token} stale")
            return False

        g = room.game
        room.pending_reveal = None
        g.paused = False
        g.reveal = None

        if pending.next_index is None:
            _finish_locked(room)
        else:
            g.letter_index = pending.next_index

        logger.debug(f"[reveal-fire] room={code} letter_index={g.letter_index} finished={g.finished}")
        return True


# ---- Clock ----

def tick_room(room: Room) -> bool:
    """Run one clock second for the room; True if the room was touched."""
    with room.lock:
        g = room.game
        if not g.started or g.finished or g.paused:
            return False

        if g.timer[g.turn] > 0:
            g.timer[g.turn] -= 1

        if g.timer[g.turn] <= 0:
            other = _other_turn(room)
            if g.timer[other] > 0:
                g.turn = other

        if all(t <= 0 for t in g.timer):
            _finish_locked(room)

        return True


def tick_all() -> list[str]:
    return [room.code for room in list_rooms() if tick_room(room)]


# ---- Snapshot ----

def room_public_state(room: Room) -> dict:
    with room.lock:
        g = room.game
        reveal = None
        if g.reveal is not None:
            reveal = {"index": g.reveal.index, "answer": g.reveal.answer, "correct": g.reveal.correct}

        return {
            "players": [{"id": p.id, "name": p.name, "score": p.score} for p in room.players],
            "game": {
                "started": g.started,
                "finished": g.finished,
                "paused": g.paused,
                "turn": g.turn,
                "letterIndex": g.letter_index,
                "letters": list(g.letters),
                "questions": {
                    letter: {"question": q.question, "answer": q.answer}
                    for letter, q in g.questions.items()
                },
                "results": {str(i): outcome for i, outcome in g.results.items()},
                "passed": {str(i): flag for i, flag in g.passed.items()},
                "timer": list(g.timer),
                "reveal": reveal,
            },
        }
