"""
Pydantic Schemas for telemetry reports.

These models define the key/value snapshot of board, player and
engine state offered to external logging. Every report is turned into
a plain mapping with model_dump() before it leaves the engine.
"""

from typing import Optional
from pydantic import BaseModel, Field


class BoardReport(BaseModel):
    """Occupancy of every node."""
    nodes: dict[str, str] = Field(description="node id -> none, green or red")
    empty_count: int = 0
    active_mills: list[list[int]] = Field(default_factory=list)


class PlayerReport(BaseModel):
    """Piece bookkeeping for one player."""
    player_number: int
    name: str
    colour: str
    kind: str = Field(description="human or automated")
    current_player: bool = False
    pieces_left_to_play: int = 0
    pieces_on_board_count: int = 0
    blocked_pieces_count: int = 0
    processing_state: Optional[str] = None


class EngineReport(BaseModel):
    """Full engine state, attached to diagnostics."""
    state: str
    msg: str = ""
    board: BoardReport
    player_one: PlayerReport
    player_two: PlayerReport
    winner: Optional[int] = None
