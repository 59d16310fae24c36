"""
View interfaces - What the engine tells the outside world.

The engine never renders, plays audio or captures input. It pushes
notifications through these interfaces, which the surrounding
application implements and injects. The engine holds a reference
only; it never owns or outlives the view.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from ..engine_core.player import Player, ProcessingState
    from ..engine_core.state import GameState


class SoundEffect(Enum):
    PLACE = "place"
    MILL_FORMED = "mill-formed"
    PIECE_LOST = "piece-lost"
    GAME_START = "game-start"


class Interaction(Enum):
    """How selectable nodes may be used."""
    NONE = "none"  # Input disabled
    TAP = "tap"
    DRAG = "drag"


class PlayerView(ABC):
    """Per-player UI hooks."""

    @abstractmethod
    def setup_ui_for(self, player: Player):
        pass

    @abstractmethod
    def update_is_current_player(self, is_current_player: bool):
        pass

    @abstractmethod
    def update_pieces_left(self, pieces_left: int):
        pass

    @abstractmethod
    def update_processing_state(self, state: ProcessingState):
        pass


class EngineView(ABC):
    """Engine-level UI hooks, plus the two player views."""

    @property
    @abstractmethod
    def p1_view(self) -> PlayerView | None:
        pass

    @property
    @abstractmethod
    def p2_view(self) -> PlayerView | None:
        pass

    @abstractmethod
    def update_tips(self, state: GameState, automated_turn: bool):
        """Called on every controller state change."""
        pass

    @abstractmethod
    def update_selectable_nodes(self, node_ids: list[int], interaction: Interaction):
        pass

    @abstractmethod
    def play_sound(self, effect: SoundEffect):
        pass

    @abstractmethod
    def game_won(self, winner: Player):
        pass

    @abstractmethod
    def handle_engine_error(self, message: str):
        """Non-fatal diagnostic from an automated-player step."""
        pass


class NullPlayerView(PlayerView):
    def setup_ui_for(self, player: Player):
        pass

    def update_is_current_player(self, is_current_player: bool):
        pass

    def update_pieces_left(self, pieces_left: int):
        pass

    def update_processing_state(self, state: ProcessingState):
        pass


class LoggingEngineView(EngineView):
    """
    View that only writes to the log.

    Used headless (CLI, scripts) and as the default when no view is
    injected.
    """

    def __init__(self):
        self._p1_view = NullPlayerView()
        self._p2_view = NullPlayerView()

    @property
    def p1_view(self) -> PlayerView:
        return self._p1_view

    @property
    def p2_view(self) -> PlayerView:
        return self._p2_view

    def update_tips(self, state: GameState, automated_turn: bool):
        logger.debug("Tips: {} (automated turn: {})", state.value, automated_turn)

    def update_selectable_nodes(self, node_ids: list[int], interaction: Interaction):
        logger.debug("Selectable ({}): {}", interaction.value, node_ids)

    def play_sound(self, effect: SoundEffect):
        logger.debug("Sound: {}", effect.value)

    def game_won(self, winner: Player):
        logger.info("{} wins", winner.name)

    def handle_engine_error(self, message: str):
        logger.warning("Engine error: {}", message)
