"""
Engine Core - Board topology, players and move generation.

The core is:
1. The static board (24 nodes, adjacency, 16 mills)
2. Players and their derived legality
3. Immutable snapshots that enumerate legal moves
4. The reducer that turns (snapshot, move) into the next snapshot
"""

from .state import (
    Board,
    Node,
    PieceColour,
    GameState,
    ADJACENCY,
    MILLS,
    NUM_NODES,
    STARTING_PIECES,
    FLYING_THRESHOLD,
    LOSE_THRESHOLD,
    is_valid_id,
)
from .player import (
    Player,
    PlayerColour,
    PlayerKind,
    PlayerNumber,
    ProcessingState,
    AutomatonProfile,
)
from .move import Move, MoveType
from .snapshot import GameSnapshot
from .generator import MoveGenerator, legal_moves, is_legal
from .reducer import Reducer, apply_move

__all__ = [
    "Board",
    "Node",
    "PieceColour",
    "GameState",
    "ADJACENCY",
    "MILLS",
    "NUM_NODES",
    "STARTING_PIECES",
    "FLYING_THRESHOLD",
    "LOSE_THRESHOLD",
    "is_valid_id",
    "Player",
    "PlayerColour",
    "PlayerKind",
    "PlayerNumber",
    "ProcessingState",
    "AutomatonProfile",
    "Move",
    "MoveType",
    "GameSnapshot",
    "MoveGenerator",
    "legal_moves",
    "is_legal",
    "Reducer",
    "apply_move",
]
