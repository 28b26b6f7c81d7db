"""Rosco (Pasapalabra) two-player game server."""

__version__ = "0.1.0"
