"""
Game Snapshot - A self-contained position for move enumeration.

A snapshot holds a board and the two players bound to that board,
plus whether the side to act has just formed a mill (and so owes a
take). Snapshots are treated as values: make() never changes the
snapshot it is called on, it returns a new one built on copies.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Board
from .player import Player
from .move import Move


@dataclass(frozen=True)
class GameSnapshot:
    """
    Position used by the move generator and by look-ahead search.

    The constructor wraps the given objects as-is. Use capture() to
    detach a snapshot from a live game.
    """
    board: Board
    current_player: Player
    opponent: Player
    mill_formed_last_turn: bool = False
    last_move: Move | None = None  # The resolved move that produced this snapshot

    @classmethod
    def capture(
        cls,
        board: Board,
        current_player: Player,
        opponent: Player,
        mill_formed_last_turn: bool = False,
    ) -> GameSnapshot:
        """Clone live objects into an independent snapshot."""
        new_board = board.clone()
        return cls(
            board=new_board,
            current_player=current_player.clone(new_board),
            opponent=opponent.clone(new_board),
            mill_formed_last_turn=mill_formed_last_turn,
        )

    def get_possible_moves(self) -> list[Move]:
        """All legal moves for the side to act."""
        from .generator import MoveGenerator

        return MoveGenerator().generate(self)

    def make(self, move: Move) -> GameSnapshot:
        """Apply a move, returning the successor snapshot."""
        from .reducer import apply_move

        return apply_move(self, move)

    @property
    def is_game_over(self) -> bool:
        """True when the side to act has lost (and owes no take)."""
        return not self.mill_formed_last_turn and self.current_player.has_lost
