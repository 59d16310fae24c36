"""
Pytest fixtures for Morris tests.
"""

import pytest

from ..config import EngineConfig
from ..bots import FirstLegalPolicy
from ..engine_core.state import Board
from ..engine_core.player import Player, PlayerColour, PlayerNumber
from ..engine_core.snapshot import GameSnapshot
from ..session.controller import TurnController, GameType
from ..session.scheduler import TaskQueue
from ..session.view import EngineView, PlayerView


class RecordingPlayerView(PlayerView):
    """Player view that remembers every call."""

    def __init__(self):
        self.calls = []

    def setup_ui_for(self, player):
        self.calls.append(("setup", player.name))

    def update_is_current_player(self, is_current_player):
        self.calls.append(("current", is_current_player))

    def update_pieces_left(self, pieces_left):
        self.calls.append(("pieces_left", pieces_left))

    def update_processing_state(self, state):
        self.calls.append(("processing", state))


class RecordingView(EngineView):
    """Engine view that remembers every call."""

    def __init__(self):
        self._p1_view = RecordingPlayerView()
        self._p2_view = RecordingPlayerView()
        self.tips = []
        self.selectable = []
        self.sounds = []
        self.winners = []
        self.errors = []

    @property
    def p1_view(self):
        return self._p1_view

    @property
    def p2_view(self):
        return self._p2_view

    def update_tips(self, state, automated_turn):
        self.tips.append((state, automated_turn))

    def update_selectable_nodes(self, node_ids, interaction):
        self.selectable.append((node_ids, interaction))

    def play_sound(self, effect):
        self.sounds.append(effect)

    def game_won(self, winner):
        self.winners.append(winner)

    def handle_engine_error(self, message):
        self.errors.append(message)


class FakeClock:
    """Manually advanced clock for the task queue."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def play(player: Player, board: Board, *node_ids: int):
    """Place pieces for a player on the given nodes."""
    for node_id in node_ids:
        player.play_piece(board.get_node(node_id))


def lose(player: Player, board: Board, *node_ids: int):
    """Remove pieces of a player from the given nodes."""
    for node_id in node_ids:
        player.lose_piece(board.get_node(node_id))


@pytest.fixture
def board() -> Board:
    return Board()


@pytest.fixture
def p1() -> Player:
    return Player(
        "Player 1", PlayerColour.GREEN, is_starting_player=True, player_number=PlayerNumber.P1
    )


@pytest.fixture
def p2() -> Player:
    return Player("Player 2", PlayerColour.RED, player_number=PlayerNumber.P2)


@pytest.fixture
def snapshot(board, p1, p2) -> GameSnapshot:
    """Snapshot wrapping the live fixtures (not a copy)."""
    return GameSnapshot(board=board, current_player=p1, opponent=p2)


@pytest.fixture
def moving_position(board, p1, p2):
    """Both sides have all nine pieces on the board and none left to place."""
    play(p1, board, *range(0, 9))
    play(p2, board, *range(15, 24))
    return board, p1, p2


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def task_queue(clock) -> TaskQueue:
    return TaskQueue(clock=clock)


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(think_time=0.5, seed=7)


@pytest.fixture
def pvp_controller(view, config, task_queue) -> TurnController:
    return TurnController(
        GameType.PLAYER_VS_PLAYER, view=view, config=config, task_queue=task_queue
    )


@pytest.fixture
def pva_controller(view, config, task_queue) -> TurnController:
    return TurnController(
        GameType.PLAYER_VS_AUTOMATON,
        view=view,
        config=config,
        policy=FirstLegalPolicy(),
        task_queue=task_queue,
    )
