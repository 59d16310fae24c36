"""
Move Generator - Generates all legal moves from a snapshot.

The generator is used by:
1. Bots to enumerate possible moves
2. Look-ahead search over snapshots
3. Validation (is this move in legal_moves?)

Moves come from exactly one phase per call, chosen in priority order:
take (if a mill was just formed), place, fly, move along an edge.
Nothing is memoized; every call reads the snapshot fresh.
"""

from __future__ import annotations
from dataclasses import dataclass

from .move import Move
from .snapshot import GameSnapshot


@dataclass
class MoveGenerator:
    """Generates legal moves for the side to act."""

    def generate(self, snapshot: GameSnapshot) -> list[Move]:
        """
        Generate all legal moves for the current player.

        Returns a list of Move values; forms_mill is left unset.
        """
        # A take is owed: nothing else is legal
        if snapshot.mill_formed_last_turn:
            return self._generate_take_moves(snapshot)

        current_player = snapshot.current_player

        if current_player.can_place:
            return self._generate_place_moves(snapshot)

        if current_player.can_fly:
            return self._generate_fly_moves(snapshot)

        return self._generate_move_along_moves(snapshot)

    def _generate_take_moves(self, snapshot: GameSnapshot) -> list[Move]:
        return [Move.take(node.id) for node in snapshot.opponent.takeable_nodes]

    def _generate_place_moves(self, snapshot: GameSnapshot) -> list[Move]:
        return [Move.place(node.id) for node in snapshot.board.empty_nodes]

    def _generate_fly_moves(self, snapshot: GameSnapshot) -> list[Move]:
        empty_nodes = snapshot.board.empty_nodes
        moves = []
        for node in snapshot.current_player.pieces_on_board:
            for empty_node in empty_nodes:
                moves.append(Move.fly(node.id, empty_node.id))
        return moves

    def _generate_move_along_moves(self, snapshot: GameSnapshot) -> list[Move]:
        moves = []
        for node in snapshot.current_player.movable_nodes:
            for neighbour in node.empty_neighbours:
                moves.append(Move.move_along(node.id, neighbour.id))
        return moves


def legal_moves(snapshot: GameSnapshot) -> list[Move]:
    """
    Convenience function to get legal moves.

    Creates a MoveGenerator and generates moves.
    """
    return MoveGenerator().generate(snapshot)


def is_legal(snapshot: GameSnapshot, move: Move) -> bool:
    """Check if a specific move is legal, ignoring its resolved fields."""
    for candidate in legal_moves(snapshot):
        if (
            candidate.move_type == move.move_type
            and candidate.target_node_id == move.target_node_id
            and candidate.destination_node_id == move.destination_node_id
        ):
            return True
    return False
