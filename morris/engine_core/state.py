"""
Board State - Static topology, nodes and the board.

The board looks like this:

    0---------1---------2
    |         |         |
    |  3------4------5  |
    |  |      |      |  |
    |  |   6--7--8   |  |
    |  |   |     |   |  |
    9--10--11    12--13-14
    |  |   |     |   |  |
    |  |   15-16-17  |  |
    |  |      |      |  |
    |  18-----19-----20 |
    |         |         |
    21--------22-------23

Design principles:
- Topology (adjacency and mills) is fixed and shared by every board
- Only node occupancy is mutable
- Derived queries (empty neighbours, active mills) are recomputed
  from current occupancy on every call
"""

from __future__ import annotations
from enum import Enum

from ..errors import InvalidId
from ..telemetry.schemas import BoardReport


NUM_NODES = 24
STARTING_PIECES = 9
FLYING_THRESHOLD = 3
LOSE_THRESHOLD = 2

ADJACENCY: dict[int, frozenset[int]] = {
    0: frozenset({1, 9}),
    1: frozenset({0, 2, 4}),
    2: frozenset({1, 14}),
    3: frozenset({4, 10}),
    4: frozenset({1, 3, 5, 7}),
    5: frozenset({4, 13}),
    6: frozenset({7, 11}),
    7: frozenset({4, 6, 8}),
    8: frozenset({7, 12}),
    9: frozenset({0, 10, 21}),
    10: frozenset({3, 9, 11, 18}),
    11: frozenset({6, 10, 15}),
    12: frozenset({8, 13, 17}),
    13: frozenset({5, 12, 14, 20}),
    14: frozenset({2, 13, 23}),
    15: frozenset({11, 16}),
    16: frozenset({15, 17, 19}),
    17: frozenset({12, 16}),
    18: frozenset({10, 19}),
    19: frozenset({16, 18, 20, 22}),
    20: frozenset({13, 19}),
    21: frozenset({9, 22}),
    22: frozenset({19, 21, 23}),
    23: frozenset({14, 22}),
}

# Mill ids are indices into this tuple
MILLS: tuple[tuple[int, int, int], ...] = (
    # Rings
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (9, 10, 11),
    (12, 13, 14),
    (15, 16, 17),
    (18, 19, 20),
    (21, 22, 23),
    # Spokes
    (0, 9, 21),
    (3, 10, 18),
    (6, 11, 15),
    (1, 4, 7),
    (16, 19, 22),
    (8, 12, 17),
    (5, 13, 20),
    (2, 14, 23),
)

NODE_MILLS: dict[int, frozenset[int]] = {
    node_id: frozenset(
        mill_id for mill_id, mill in enumerate(MILLS) if node_id in mill
    )
    for node_id in range(NUM_NODES)
}


def is_valid_id(node_id) -> bool:
    """Check that an id names one of the 24 board positions."""
    return isinstance(node_id, int) and not isinstance(node_id, bool) and 0 <= node_id < NUM_NODES


class PieceColour(Enum):
    """What occupies a node."""
    NONE = "none"
    GREEN = "green"
    RED = "red"


class GameState(Enum):
    """States of the turn controller (and derived per-player phases)."""
    PLACING_PIECES = "placing_pieces"
    MOVING_PIECES = "moving_pieces"
    FLYING_PIECES = "flying_pieces"
    TAKING_PIECE = "taking_piece"
    GAME_OVER = "game_over"


class Node:
    """
    One of the 24 board positions.

    Neighbours and mill membership are fixed at construction;
    only the colour of the piece sitting on the node changes.
    """

    def __init__(self, node_id: int, board: Board):
        if not is_valid_id(node_id):
            raise InvalidId(node_id)
        self._id = node_id
        self._board = board
        self._colour = PieceColour.NONE

    @property
    def id(self) -> int:
        return self._id

    @property
    def colour(self) -> PieceColour:
        return self._colour

    @property
    def is_empty(self) -> bool:
        return self._colour == PieceColour.NONE

    @property
    def neighbour_ids(self) -> frozenset[int]:
        return ADJACENCY[self._id]

    @property
    def mill_ids(self) -> frozenset[int]:
        return NODE_MILLS[self._id]

    @property
    def neighbours(self) -> list[Node]:
        return [self._board.nodes[n] for n in sorted(self.neighbour_ids)]

    @property
    def empty_neighbours(self) -> list[Node]:
        return [n for n in self.neighbours if n.is_empty]

    @property
    def has_empty_neighbours(self) -> bool:
        return len(self.empty_neighbours) > 0

    @property
    def blocked(self) -> bool:
        return not self.has_empty_neighbours

    @property
    def in_active_mill(self) -> bool:
        """True if any mill through this node is filled by one colour."""
        return any(self._board.is_mill_complete(m) for m in self.mill_ids)

    def set_colour(self, colour: PieceColour) -> bool:
        """
        Set the occupant of this node.

        Returns True if the node now completes at least one mill.
        Completing two mills at once is still a single True.
        """
        self._colour = colour
        return self.in_active_mill

    def __repr__(self) -> str:
        return f"Node({self._id}, {self._colour.value})"


class Board:
    """
    The 24 nodes of a game.

    Constructed once per game and reused: reset() clears occupancy,
    never topology.
    """

    def __init__(self):
        self._nodes = tuple(Node(node_id, self) for node_id in range(NUM_NODES))

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def empty_nodes(self) -> list[Node]:
        return self.get_nodes(PieceColour.NONE)

    def get_node(self, node_id: int) -> Node | None:
        """Get node by id, or None if no such node exists."""
        if not is_valid_id(node_id):
            return None
        return self._nodes[node_id]

    def get_nodes(self, colour: PieceColour) -> list[Node]:
        """Get all nodes with the given occupant, in id order."""
        return [n for n in self._nodes if n.colour == colour]

    def is_mill_complete(self, mill_id: int) -> bool:
        first, second, third = (self._nodes[i].colour for i in MILLS[mill_id])
        return first != PieceColour.NONE and first == second == third

    @property
    def active_mill_ids(self) -> list[int]:
        return [m for m in range(len(MILLS)) if self.is_mill_complete(m)]

    def reset(self):
        """Clear every node."""
        for node in self._nodes:
            node.set_colour(PieceColour.NONE)

    def clone(self) -> Board:
        """Copy occupancy into a fresh board with its own nodes."""
        board = Board()
        for node in self._nodes:
            board._nodes[node.id]._colour = node.colour
        return board

    def to_dict(self) -> dict:
        """Serialize for telemetry."""
        return BoardReport(
            nodes={str(n.id): n.colour.value for n in self._nodes},
            empty_count=len(self.empty_nodes),
            active_mills=[list(MILLS[m]) for m in self.active_mill_ids],
        ).model_dump()
