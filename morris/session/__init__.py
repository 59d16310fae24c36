"""
Session Module - Runs one live game.

A session is a TurnController bound to:
- A view supplied by the surrounding application
- A bot policy for the automated player (if any)
- A task queue that defers automated turns

Sessions are in-memory only; reset() starts a new game with the
same players and view.
"""

from .controller import TurnController, GameType
from .scheduler import TaskQueue, ScheduledTask
from .view import (
    EngineView,
    PlayerView,
    LoggingEngineView,
    NullPlayerView,
    SoundEffect,
    Interaction,
)

__all__ = [
    "TurnController",
    "GameType",
    "TaskQueue",
    "ScheduledTask",
    "EngineView",
    "PlayerView",
    "LoggingEngineView",
    "NullPlayerView",
    "SoundEffect",
    "Interaction",
]
