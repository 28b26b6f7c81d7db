"""Rosco game domain: models, question bank and the per-room state machine."""
