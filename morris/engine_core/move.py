"""
Move System - Values describing one step of play.

A Move names node ids, never nodes, so it is valid against any board
(live or snapshot). It does not own or touch board state.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum


class MoveType(Enum):
    """Kinds of moves."""
    PLACE_PIECE = "place"
    MOVE_PIECE = "move"  # Along an edge
    FLY_PIECE = "fly"  # Anywhere, once down to three pieces
    TAKE_PIECE = "take"


@dataclass(frozen=True)
class Move:
    """
    One move.

    target_node_id is the node acted upon: where a piece is placed,
    the piece being moved, or the piece being taken.
    forms_mill is unknown (None) until the move has been applied.
    """
    move_type: MoveType
    target_node_id: int
    destination_node_id: int | None = None
    forms_mill: bool | None = None
    node_to_take_id: int | None = None

    @classmethod
    def place(cls, node_id: int) -> Move:
        return cls(move_type=MoveType.PLACE_PIECE, target_node_id=node_id)

    @classmethod
    def move_along(cls, from_id: int, to_id: int) -> Move:
        return cls(
            move_type=MoveType.MOVE_PIECE,
            target_node_id=from_id,
            destination_node_id=to_id,
        )

    @classmethod
    def fly(cls, from_id: int, to_id: int) -> Move:
        return cls(
            move_type=MoveType.FLY_PIECE,
            target_node_id=from_id,
            destination_node_id=to_id,
        )

    @classmethod
    def take(cls, node_id: int) -> Move:
        return cls(move_type=MoveType.TAKE_PIECE, target_node_id=node_id)

    @property
    def is_relocation(self) -> bool:
        return self.move_type in (MoveType.MOVE_PIECE, MoveType.FLY_PIECE)

    def with_outcome(self, forms_mill: bool) -> Move:
        """Return a copy with the applied result filled in."""
        return replace(self, forms_mill=forms_mill)

    def with_take(self, node_id: int) -> Move:
        """Return a copy resolved against the opponent's takeable piece."""
        return replace(self, node_to_take_id=node_id)

    def describe(self) -> str:
        """Human-readable summary, for logs and the CLI."""
        if self.move_type == MoveType.PLACE_PIECE:
            text = f"place on {self.target_node_id}"
        elif self.move_type == MoveType.TAKE_PIECE:
            text = f"take {self.target_node_id}"
        else:
            text = f"{self.move_type.value} {self.target_node_id} -> {self.destination_node_id}"
        if self.node_to_take_id is not None:
            text += f", take {self.node_to_take_id}"
        return text
