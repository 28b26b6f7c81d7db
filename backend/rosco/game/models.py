from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Literal


Outcome = Literal["correct", "wrong"]


@dataclass
class Player:
    id: str
    name: str
    score: int = 0


@dataclass
class Question:
    question: str
    answer: str


@dataclass
class Reveal:
    index: int
    answer: str
    correct: bool


@dataclass
class PendingReveal:
    token: int
    # None means the ring is exhausted and the game finishes when the reveal fires.
    next_index: int | None


@dataclass
class AnswerOutcome:
    index: int
    correct: bool
    token: int


@dataclass
class GameState:
    letters: list[str]
    questions: dict[str, Question]
    time_per_player: int = 180
    started: bool = False
    finished: bool = False
    paused: bool = False
    turn: int = 0
    letter_index: int = 0
    results: dict[int, Outcome] = field(default_factory=dict)
    passed: dict[int, bool] = field(default_factory=dict)
    timer: list[int] = field(default_factory=list)
    reveal: Reveal | None = None

    def __post_init__(self) -> None:
        if not self.timer:
            self.timer = [self.time_per_player, self.time_per_player]


@dataclass
class Room:
    code: str
    game: GameState
    players: list[Player] = field(default_factory=list)
    created_at_ms: int = 0
    last_activity_ms: int = 0
    finished_at_ms: int | None = None
    pending_reveal: PendingReveal | None = None
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)
