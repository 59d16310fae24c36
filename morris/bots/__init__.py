"""
Bots module - Automated player implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- BotDecision: A selected move plus debugging details
- RandomPolicy: Uniform random choice among legal moves
- FirstLegalPolicy: Deterministic choice, for tests
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
]
