"""
Bot Policy - Interface for automated-player decision-making.

A BotPolicy takes a snapshot and returns a decision. The engine only
relies on the contract "given a position, return one legal move";
any search or heuristic can be layered on top of the snapshot API.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.generator import legal_moves as generate_legal_moves

if TYPE_CHECKING:
    from ..engine_core.move import Move
    from ..engine_core.snapshot import GameSnapshot


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to make
    - Explanation (for logs/debugging)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects moves.
    Implementations can range from random choice
    to full game-tree search over snapshots.
    """

    @abstractmethod
    def select_move(
        self,
        snapshot: GameSnapshot,
        legal_moves: list[Move],
    ) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            snapshot: Current position
            legal_moves: Moves generated for that position

        Returns:
            BotDecision with the selected move
        """
        pass

    def choose_move(self, snapshot: GameSnapshot) -> Move:
        """
        Decide a whole turn.

        Picks a move and, if it forms a mill, also picks which
        opponent piece to take. The returned move has forms_mill
        set and, when a take follows, node_to_take_id.
        """
        decision = self.select_move(snapshot, generate_legal_moves(snapshot))
        next_snapshot = snapshot.make(decision.move)
        move = next_snapshot.last_move

        if next_snapshot.mill_formed_last_turn:
            take_moves = generate_legal_moves(next_snapshot)
            # Opponent may have no pieces left to take
            if take_moves:
                take = self.select_move(next_snapshot, take_moves)
                move = move.with_take(take.move.target_node_id)

        return move

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - The default automated opponent
    - Baseline comparison
    - Self-play from the CLI
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(
        self,
        snapshot: GameSnapshot,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        move = self.rng.choice(legal_moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_moves),
            evaluated_moves=len(legal_moves),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal move.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_move(
        self,
        snapshot: GameSnapshot,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=legal_moves[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )
