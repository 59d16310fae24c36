"""
Morris - Nine Men's Morris Rules Engine

A deterministic rules engine for the classic mill game played on the
24-point board. The engine provides:
- Static board topology and mill detection
- Player piece bookkeeping and derived legality
- Legal move generation over immutable snapshots (for look-ahead)
- A turn controller that sequences human and automated input
"""

__version__ = "0.1.0"
