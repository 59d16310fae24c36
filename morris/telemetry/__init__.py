"""
Telemetry - Serializable reports of engine state.

The engine only exposes mappings; shipping them anywhere (analytics,
crash reports, log aggregation) is the embedding application's job.
"""

from .schemas import BoardReport, PlayerReport, EngineReport

__all__ = [
    "BoardReport",
    "PlayerReport",
    "EngineReport",
]
