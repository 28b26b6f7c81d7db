from __future__ import annotations

from .models import GameState


def next_pending_index(game: GameState, from_index: int) -> int | None:
    """Return the first unanswered index after ``from_index`` around the ring.

    The scan wraps once, so ``from_index`` itself is the last candidate.
    Returns None when every letter already has a result.
    """
    total = len(game.letters)
    for step in range(1, total + 1):
        idx = (from_index + step) % total
        if idx not in game.results:
            return idx
    return None
