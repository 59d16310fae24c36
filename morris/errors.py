"""
Errors raised by the engine.

All errors are local and synchronous: they are raised before any board
or player state is touched, so catching one leaves the game intact.
"""


class MorrisError(Exception):
    """Base class for engine errors."""


class EngineError(MorrisError):
    """An action was rejected by the turn controller."""


class InvalidId(EngineError):
    """Node id outside the board, or an id with no corresponding node."""

    def __init__(self, node_id):
        super().__init__(f"Invalid node id: {node_id}")
        self.node_id = node_id


class InvalidState(EngineError):
    """The requested action is not legal in the controller's current state."""

    def __init__(self, message: str, state=None):
        super().__init__(message)
        self.state = state


class PlayerError(MorrisError):
    """A player could not be constructed."""


class EmptyName(PlayerError):
    """Player constructed without a display name."""

    def __init__(self):
        super().__init__("Player name must not be empty")
