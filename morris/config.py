"""
Engine configuration.

Values come from environment variables so the same engine can be tuned
for tests, the CLI and an embedding application without code changes.
"""

from __future__ import annotations
from dataclasses import dataclass
import os


@dataclass
class EngineConfig:
    """Runtime settings for a game."""

    think_time: float = 0.5  # Seconds an automated player "thinks" per step
    seed: int | None = None  # Seed for the random policy
    player_one_name: str = "Player 1"
    player_two_name: str = "Player 2"
    automaton_name: str = "Computer"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables."""
        seed = os.getenv("MORRIS_SEED")
        return cls(
            think_time=max(0.0, float(os.getenv("MORRIS_THINK_TIME", "0.5"))),
            seed=int(seed) if seed else None,
            player_one_name=os.getenv("MORRIS_P1_NAME", "Player 1"),
            player_two_name=os.getenv("MORRIS_P2_NAME", "Player 2"),
            automaton_name=os.getenv("MORRIS_AUTOMATON_NAME", "Computer"),
            log_level=os.getenv("MORRIS_LOG_LEVEL", "INFO").upper(),
        )
