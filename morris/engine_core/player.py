"""
Player representation for the mill game.

A player owns up to nine pieces. Pieces are either waiting to be
placed (pieces_left_to_play) or sitting on a board node. Taken pieces
are never stored; they are implied by the other two counts.

Legality predicates (can_place, can_move, can_fly, has_lost) are
derived from the current board every time they are asked for.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from ..errors import EmptyName
from ..telemetry.schemas import PlayerReport
from .state import (
    Board,
    GameState,
    Node,
    PieceColour,
    STARTING_PIECES,
    FLYING_THRESHOLD,
    LOSE_THRESHOLD,
)

if TYPE_CHECKING:
    from ..session.view import PlayerView


class PlayerColour(Enum):
    GREEN = "green"
    RED = "red"


class PlayerKind(Enum):
    HUMAN = "human"
    AUTOMATED = "automated"


class PlayerNumber(Enum):
    P1 = 0
    P2 = 1


class ProcessingState(Enum):
    """What an automated player is busy with, for the view."""
    WAITING = "waiting"
    THINKING = "thinking"
    PLACING = "placing"
    MOVING = "moving"
    TAKING_PIECE = "taking_piece"


@dataclass
class AutomatonProfile:
    """Extra data carried only by automated players."""
    think_time: float = 0.5
    processing_state: ProcessingState = ProcessingState.WAITING


class Player:
    """
    One side of the game.

    Human and automated players share this type; automated players
    additionally carry an AutomatonProfile.
    """

    def __init__(
        self,
        name: str,
        colour: PlayerColour,
        kind: PlayerKind = PlayerKind.HUMAN,
        is_starting_player: bool = False,
        player_number: PlayerNumber = PlayerNumber.P1,
        view: PlayerView | None = None,
        automaton: AutomatonProfile | None = None,
    ):
        """
        Initialize a player with no pieces on the board.

        Args:
            name: Display name (must not be empty)
            colour: GREEN or RED
            kind: HUMAN or AUTOMATED
            is_starting_player: Whether this player moves first
            player_number: P1 or P2
            view: Optional view receiving UI updates for this player
            automaton: Think-time and status for automated players

        Raises:
            EmptyName: if name is empty
        """
        if not name:
            raise EmptyName()

        self._name = name
        self._colour = colour
        self._kind = kind
        self._player_number = player_number
        self._is_starting_player = is_starting_player
        self._is_current_player = is_starting_player
        self._pieces_left_to_play = STARTING_PIECES
        self._pieces_on_board: list[Node] = []
        self._view = view

        if kind == PlayerKind.AUTOMATED and automaton is None:
            automaton = AutomatonProfile()
        self._automaton = automaton

        if self._view:
            self._view.setup_ui_for(self)

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def colour(self) -> PlayerColour:
        return self._colour

    @property
    def piece_colour(self) -> PieceColour:
        return PieceColour(self._colour.value)

    @property
    def kind(self) -> PlayerKind:
        return self._kind

    @property
    def is_automated(self) -> bool:
        return self._kind == PlayerKind.AUTOMATED

    @property
    def player_number(self) -> PlayerNumber:
        return self._player_number

    @property
    def is_starting_player(self) -> bool:
        return self._is_starting_player

    @property
    def view(self) -> PlayerView | None:
        return self._view

    # =========================================================================
    # Observable fields
    # =========================================================================

    @property
    def is_current_player(self) -> bool:
        return self._is_current_player

    @is_current_player.setter
    def is_current_player(self, value: bool):
        self._is_current_player = value
        if self._view:
            self._view.update_is_current_player(value)

    @property
    def pieces_left_to_play(self) -> int:
        return self._pieces_left_to_play

    def _set_pieces_left_to_play(self, value: int):
        self._pieces_left_to_play = value
        if self._view:
            self._view.update_pieces_left(value)

    @property
    def automaton(self) -> AutomatonProfile | None:
        return self._automaton

    @property
    def think_time(self) -> float:
        return self._automaton.think_time if self._automaton else 0.0

    @property
    def processing_state(self) -> ProcessingState | None:
        return self._automaton.processing_state if self._automaton else None

    @processing_state.setter
    def processing_state(self, value: ProcessingState):
        if not self._automaton:
            return
        self._automaton.processing_state = value
        if self._view:
            self._view.update_processing_state(value)

    # =========================================================================
    # Pieces
    # =========================================================================

    @property
    def pieces_on_board(self) -> list[Node]:
        return list(self._pieces_on_board)

    @property
    def num_of_pieces_in_play(self) -> int:
        return len(self._pieces_on_board)

    @property
    def num_of_blocked_nodes(self) -> int:
        return sum(1 for node in self._pieces_on_board if node.blocked)

    @property
    def movable_nodes(self) -> list[Node]:
        if self.can_fly:
            return list(self._pieces_on_board)
        return [node for node in self._pieces_on_board if node.has_empty_neighbours]

    @property
    def takeable_nodes(self) -> list[Node]:
        """Pieces an opponent may take: those outside mills, unless none are."""
        not_in_mill = [node for node in self._pieces_on_board if not node.in_active_mill]
        if not not_in_mill:
            return list(self._pieces_on_board)
        return not_in_mill

    @property
    def has_takeable_nodes(self) -> bool:
        return len(self.takeable_nodes) > 0

    @property
    def has_played_no_pieces(self) -> bool:
        return self._pieces_left_to_play == STARTING_PIECES

    # =========================================================================
    # Derived legality
    # =========================================================================

    @property
    def can_place(self) -> bool:
        return self._pieces_left_to_play > 0

    @property
    def can_move(self) -> bool:
        count = len(self._pieces_on_board)
        return (
            self._pieces_left_to_play == 0
            and count > LOSE_THRESHOLD
            and count > FLYING_THRESHOLD
            and len(self.movable_nodes) > 0
        )

    @property
    def can_fly(self) -> bool:
        return self._pieces_left_to_play == 0 and len(self._pieces_on_board) == FLYING_THRESHOLD

    @property
    def has_lost(self) -> bool:
        count = len(self._pieces_on_board)
        if self._pieces_left_to_play != 0:
            return False
        return count <= LOSE_THRESHOLD or len(self.movable_nodes) == 0

    @property
    def state(self) -> GameState:
        """The phase this player would be in if it were their turn."""
        if self.can_place:
            return GameState.PLACING_PIECES
        if self.can_move:
            return GameState.MOVING_PIECES
        if self.can_fly:
            return GameState.FLYING_PIECES
        return GameState.GAME_OVER

    # =========================================================================
    # Piece lifecycle
    # =========================================================================

    def play_piece(self, node: Node) -> bool:
        """
        Place a new piece on an empty node.

        Returns True if a mill was formed.
        """
        self._set_pieces_left_to_play(self._pieces_left_to_play - 1)
        self._pieces_on_board.append(node)
        return node.set_colour(self.piece_colour)

    def undo_play_piece(self, node: Node):
        """Reverse play_piece, for speculative exploration only."""
        self._set_pieces_left_to_play(self._pieces_left_to_play + 1)
        self._remove(node)
        node.set_colour(PieceColour.NONE)

    def move_piece(self, old_node: Node, new_node: Node) -> bool:
        """
        Move a piece between nodes (adjacent or flying).

        Returns True if a mill was formed at the new node.
        """
        self.lose_piece(old_node)
        self._pieces_on_board.append(new_node)
        return new_node.set_colour(self.piece_colour)

    def lose_piece(self, node: Node):
        """Remove a piece from the board. Never forms a mill."""
        self._remove(node)
        node.set_colour(PieceColour.NONE)

    def _remove(self, node: Node):
        self._pieces_on_board = [n for n in self._pieces_on_board if n.id != node.id]

    def reset(self):
        self._set_pieces_left_to_play(STARTING_PIECES)
        self._pieces_on_board = []
        if self._automaton:
            self.processing_state = ProcessingState.WAITING

    def clone(self, board: Board) -> Player:
        """
        Copy this player onto another board.

        Pieces are re-resolved by id against the given board, so the
        copy never references nodes of the board it was cloned from.
        The copy has no view.
        """
        player = Player.__new__(Player)
        player._name = self._name
        player._colour = self._colour
        player._kind = self._kind
        player._player_number = self._player_number
        player._is_starting_player = self._is_starting_player
        player._is_current_player = self._is_current_player
        player._pieces_left_to_play = self._pieces_left_to_play
        player._view = None
        player._automaton = replace(self._automaton) if self._automaton else None
        player._pieces_on_board = []
        for node in self._pieces_on_board:
            node_to_add = board.get_node(node.id)
            if node_to_add is not None:
                player._pieces_on_board.append(node_to_add)
        return player

    def to_dict(self) -> dict:
        """Serialize for telemetry."""
        return PlayerReport(
            player_number=self._player_number.value,
            name=self._name,
            colour=self._colour.value,
            kind=self._kind.value,
            current_player=self._is_current_player,
            pieces_left_to_play=self._pieces_left_to_play,
            pieces_on_board_count=len(self._pieces_on_board),
            blocked_pieces_count=self.num_of_blocked_nodes,
            processing_state=self.processing_state.value if self.processing_state else None,
        ).model_dump()

    def __repr__(self) -> str:
        return (
            f"Player({self._name!r}, {self._colour.value}, "
            f"left={self._pieces_left_to_play}, on_board={len(self._pieces_on_board)})"
        )
