from __future__ import annotations


class RoscoError(Exception):
    """Base class for errors reported back to the originating connection."""

    code = "rosco_error"
    message = "Error inesperado"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class RoomNotFound(RoscoError):
    code = "room_not_found"
    message = "Sala inexistente"


class RoomFull(RoscoError):
    code = "room_full"
    message = "Sala llena"


class RoomCodeExhausted(RoscoError):
    code = "room_code_exhausted"
    message = "No se pudo generar un código de sala"
