"""
Reducer - Applies moves to snapshots.

Design principles:
- Pure function: (snapshot, move) -> new snapshot
- Works on copies of the board and both players; the input
  snapshot is never touched
- Uses the same player primitives as the live game
  (play_piece / move_piece / lose_piece)
- Rejects any move the generator would not offer, before copying
"""

from __future__ import annotations
from dataclasses import dataclass

from ..errors import InvalidId, InvalidState
from .generator import is_legal
from .move import Move, MoveType
from .snapshot import GameSnapshot
from .state import Board, Node, is_valid_id


@dataclass
class Reducer:
    """
    Reducer applies moves to snapshots.

    Stateless - all state is in GameSnapshot.
    """

    def apply(self, snapshot: GameSnapshot, move: Move) -> GameSnapshot:
        """
        Apply a move to a snapshot.

        Returns the successor snapshot. Its last_move is the applied
        move with forms_mill filled in.

        Raises:
            InvalidId: if the move names a node that does not exist
            InvalidState: if a take is owed and the move is not a take,
                a take is attempted when none is owed, or the move is
                not one of the legal moves
        """
        self._validate_move(snapshot, move)

        board = snapshot.board.clone()
        current_player = snapshot.current_player.clone(board)
        opponent = snapshot.opponent.clone(board)

        if move.move_type == MoveType.TAKE_PIECE:
            opponent.lose_piece(self._node(board, move.target_node_id))
            return self._next_turn(board, current_player, opponent, move.with_outcome(False))

        if move.move_type == MoveType.PLACE_PIECE:
            mill_formed = current_player.play_piece(self._node(board, move.target_node_id))
        else:
            mill_formed = current_player.move_piece(
                self._node(board, move.target_node_id),
                self._node(board, move.destination_node_id),
            )

        resolved = move.with_outcome(mill_formed)

        if mill_formed:
            # Same side acts again, this time to take from the opponent
            return GameSnapshot(
                board=board,
                current_player=current_player,
                opponent=opponent,
                mill_formed_last_turn=True,
                last_move=resolved,
            )

        return self._next_turn(board, current_player, opponent, resolved)

    def _validate_move(self, snapshot: GameSnapshot, move: Move):
        is_take = move.move_type == MoveType.TAKE_PIECE
        if snapshot.mill_formed_last_turn and not is_take:
            raise InvalidState(f"A piece must be taken before {move.move_type.value}")
        if is_take and not snapshot.mill_formed_last_turn:
            raise InvalidState("No mill was formed, nothing to take")

        if not is_valid_id(move.target_node_id):
            raise InvalidId(move.target_node_id)
        if move.is_relocation and not is_valid_id(move.destination_node_id):
            raise InvalidId(move.destination_node_id)

        # Anything the generator would not offer is rejected
        if not is_legal(snapshot, move):
            raise InvalidState(f"Illegal move: {move.describe()}")

    def _node(self, board: Board, node_id: int | None) -> Node:
        node = board.get_node(node_id)
        if node is None:
            raise InvalidId(node_id)
        return node

    def _next_turn(self, board, acting_player, waiting_player, resolved: Move) -> GameSnapshot:
        acting_player.is_current_player = False
        waiting_player.is_current_player = True
        return GameSnapshot(
            board=board,
            current_player=waiting_player,
            opponent=acting_player,
            mill_formed_last_turn=False,
            last_move=resolved,
        )


def apply_move(snapshot: GameSnapshot, move: Move) -> GameSnapshot:
    """
    Convenience function to apply a move.

    Creates a Reducer and applies the move.
    """
    reducer = Reducer()
    return reducer.apply(snapshot, move)
