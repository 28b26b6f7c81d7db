import os
from pathlib import Path


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Heartbeat and reveal tasks; tests drive the service directly instead
    ENABLE_BACKGROUND_TASKS = os.environ.get("ENABLE_BACKGROUND_TASKS", "1") == "1"

    # Question bank
    QUESTIONS_PATH = os.environ.get(
        "QUESTIONS_PATH",
        str(Path(__file__).resolve().parent / "game" / "questions.json"),
    )

    # Rooms
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "5"))
    ROOM_CODE_MAX_ATTEMPTS = int(os.environ.get("ROOM_CODE_MAX_ATTEMPTS", "1000"))
    ROOM_FINISHED_TTL_SEC = int(os.environ.get("ROOM_FINISHED_TTL_SEC", "600"))
    ROOM_IDLE_TTL_SEC = int(os.environ.get("ROOM_IDLE_TTL_SEC", "3600"))

    # Game
    WRONG_PENALTY = int(os.environ.get("WRONG_PENALTY", "2"))
    TIME_PER_PLAYER_SEC = int(os.environ.get("TIME_PER_PLAYER_SEC", "180"))
    REVEAL_DURATION_MS = int(os.environ.get("REVEAL_DURATION_MS", "2000"))
    TICK_INTERVAL_SEC = float(os.environ.get("TICK_INTERVAL_SEC", "1"))
