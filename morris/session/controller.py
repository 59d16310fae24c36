"""
Turn Controller - Sequences human and automated input over the core.

The controller:
1. Accepts taps and drags from the view
2. Validates the node ids and its own state
3. Mutates the live board and players
4. Decides the next state from the next player's derived state
5. Schedules automated turns on the task queue

It is the only thing that mutates the live board and players. Input
is disabled the moment an action starts and re-enabled once the
resulting state has settled on a human turn.
"""

from __future__ import annotations
from enum import Enum

from loguru import logger

from ..bots.policy import BotPolicy, RandomPolicy
from ..config import EngineConfig
from ..engine_core.player import (
    AutomatonProfile,
    Player,
    PlayerColour,
    PlayerKind,
    PlayerNumber,
    ProcessingState,
)
from ..engine_core.generator import is_legal
from ..engine_core.snapshot import GameSnapshot
from ..engine_core.state import Board, GameState, Node
from ..engine_core.move import MoveType
from ..errors import InvalidId, InvalidState
from ..telemetry.schemas import EngineReport
from .scheduler import TaskQueue
from .view import EngineView, Interaction, LoggingEngineView, SoundEffect


class GameType(Enum):
    PLAYER_VS_PLAYER = "player_vs_player"
    PLAYER_VS_AUTOMATON = "player_vs_automaton"


class TurnController:
    """
    The state machine driving one game.

    Usage:
        controller = TurnController(GameType.PLAYER_VS_AUTOMATON, view=my_view)

        controller.handle_tap(4)          # place a piece
        controller.handle_drag(4, 5)      # move a piece
        controller.task_queue.run_due()   # let the automated player act
    """

    def __init__(
        self,
        game_type: GameType = GameType.PLAYER_VS_PLAYER,
        view: EngineView | None = None,
        config: EngineConfig | None = None,
        policy: BotPolicy | None = None,
        task_queue: TaskQueue | None = None,
    ):
        self._config = config or EngineConfig()
        self._view = view or LoggingEngineView()
        self._policy = policy or RandomPolicy(seed=self._config.seed)
        self._tasks = task_queue if task_queue is not None else TaskQueue()
        self._game_type = game_type

        self._p1 = Player(
            name=self._config.player_one_name,
            colour=PlayerColour.GREEN,
            kind=PlayerKind.HUMAN,
            is_starting_player=True,
            player_number=PlayerNumber.P1,
            view=self._view.p1_view,
        )

        if game_type == GameType.PLAYER_VS_PLAYER:
            self._p2 = Player(
                name=self._config.player_two_name,
                colour=PlayerColour.RED,
                kind=PlayerKind.HUMAN,
                is_starting_player=False,
                player_number=PlayerNumber.P2,
                view=self._view.p2_view,
            )
        else:
            self._p2 = Player(
                name=self._config.automaton_name,
                colour=PlayerColour.RED,
                kind=PlayerKind.AUTOMATED,
                is_starting_player=False,
                player_number=PlayerNumber.P2,
                view=self._view.p2_view,
                automaton=AutomatonProfile(think_time=self._config.think_time),
            )

        self._board = Board()
        self._current_player = self._p1 if self._p1.is_starting_player else self._p2
        self._state = GameState.PLACING_PIECES
        self._winner: Player | None = None
        self._accepting_input = False
        self._selectable_node_ids: list[int] = []
        self._interaction = Interaction.NONE

        # Bumped on reset so tasks queued for an earlier game do nothing
        self._generation = 0

        self._begin()

    # =========================================================================
    # Public state
    # =========================================================================

    @property
    def game_type(self) -> GameType:
        return self._game_type

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> Board:
        return self._board

    @property
    def p1(self) -> Player:
        return self._p1

    @property
    def p2(self) -> Player:
        return self._p2

    @property
    def current_player(self) -> Player:
        return self._current_player

    @property
    def next_player(self) -> Player:
        """The player who is not to act."""
        return self._p2 if self._current_player is self._p1 else self._p1

    @property
    def winner(self) -> Player | None:
        return self._winner

    @property
    def accepting_input(self) -> bool:
        return self._accepting_input

    @property
    def selectable_node_ids(self) -> list[int]:
        return list(self._selectable_node_ids)

    @property
    def interaction(self) -> Interaction:
        return self._interaction

    @property
    def task_queue(self) -> TaskQueue:
        return self._tasks

    def snapshot(self) -> GameSnapshot:
        """Detached copy of the live position, for look-ahead."""
        return GameSnapshot.capture(
            self._board,
            self._current_player,
            self.next_player,
            mill_formed_last_turn=self._state == GameState.TAKING_PIECE,
        )

    # =========================================================================
    # Input
    # =========================================================================

    def handle_tap(self, node_id: int):
        """
        Handle a tap on a node.

        Places a piece while placing, takes an opponent piece while
        taking.

        Raises:
            InvalidId: if node_id is not a board position
            InvalidState: if taps are not allowed now, or the node
                cannot be used for the current action
        """
        node = self._get_node(node_id)
        self._ensure_accepting_input()

        if self._state == GameState.PLACING_PIECES:
            if not node.is_empty:
                raise InvalidState(f"Node {node_id} is occupied", self._state)
            self._disable_input()
            self._place_node_for(self._current_player, node)
        elif self._state == GameState.TAKING_PIECE:
            opponent = self.next_player
            if node_id not in {n.id for n in opponent.takeable_nodes}:
                raise InvalidState(f"Node {node_id} cannot be taken", self._state)
            self._disable_input()
            self._take_node_belonging_to(opponent, node)
        else:
            raise InvalidState(f"Cannot tap while {self._state.value}", self._state)

    def handle_drag(self, from_id: int, to_id: int):
        """
        Handle a piece dragged from one node to another.

        Only checks that the piece belongs to the current player and
        the destination is free. The view is expected to offer only
        destinations from movable_positions_for().

        Raises:
            InvalidId: if either id is not a board position
            InvalidState: if moving is not allowed now
        """
        old_node = self._get_node(from_id)
        new_node = self._get_node(to_id)
        self._ensure_accepting_input()

        if self._state not in (GameState.MOVING_PIECES, GameState.FLYING_PIECES):
            raise InvalidState(f"Cannot move pieces while {self._state.value}", self._state)
        if old_node.colour != self._current_player.piece_colour:
            raise InvalidState(
                f"Node {from_id} does not hold a piece of {self._current_player.name}",
                self._state,
            )
        if not new_node.is_empty:
            raise InvalidState(f"Node {to_id} is occupied", self._state)

        self._disable_input()
        self._move_node_for(self._current_player, old_node, new_node)

    def movable_positions_for(self, node_id: int) -> list[int]:
        """
        Where the piece on a node may go.

        Raises:
            InvalidId: if node_id is not a board position
            InvalidState: if not moving or flying
        """
        node = self._get_node(node_id)

        if self._state == GameState.MOVING_PIECES:
            return [n.id for n in node.empty_neighbours]
        if self._state == GameState.FLYING_PIECES:
            return [n.id for n in self._board.empty_nodes]
        raise InvalidState(f"No movable positions while {self._state.value}", self._state)

    def reset(self):
        """Start a new game with the same players."""
        self._generation += 1
        self._p1.reset()
        self._p2.reset()
        self._board.reset()
        self._winner = None
        self._set_current_player(self._p1 if self._p1.is_starting_player else self._p2)
        self._begin()

    # =========================================================================
    # Telemetry
    # =========================================================================

    def to_dict(self, msg: str = "") -> dict:
        """Serialize engine, board and both players."""
        return EngineReport(
            state=self._state.value,
            msg=msg,
            board=self._board.to_dict(),
            player_one=self._p1.to_dict(),
            player_two=self._p2.to_dict(),
            winner=self._winner.player_number.value if self._winner else None,
        ).model_dump()

    # =========================================================================
    # Turn flow
    # =========================================================================

    def _begin(self):
        logger.info("New game: {} vs {}", self._p1.name, self._p2.name)
        self._set_current_player(self._current_player)
        self._set_state(GameState.PLACING_PIECES)
        self._view.play_sound(SoundEffect.GAME_START)
        self._start_turn()

    def _start_turn(self):
        if self._current_player.is_automated:
            self._disable_input()
            self._make_move_for(self._current_player)
        else:
            self._update_selectable_nodes()

    def _set_state(self, state: GameState):
        self._state = state
        automated_turn = state != GameState.TAKING_PIECE and self._current_player.is_automated
        self._view.update_tips(state, automated_turn)

    def _set_current_player(self, player: Player):
        if self._current_player is not player:
            self._current_player.is_current_player = False
        self._current_player = player
        player.is_current_player = True

    def _place_node_for(self, player: Player, node: Node):
        mill_formed = player.play_piece(node)
        logger.debug("{} placed on {} (mill: {})", player.name, node.id, mill_formed)
        self._after_piece_played(player, mill_formed)

    def _move_node_for(self, player: Player, old_node: Node, new_node: Node):
        mill_formed = player.move_piece(old_node, new_node)
        logger.debug(
            "{} moved {} -> {} (mill: {})", player.name, old_node.id, new_node.id, mill_formed
        )
        self._after_piece_played(player, mill_formed)

    def _after_piece_played(self, player: Player, mill_formed: bool):
        if not mill_formed:
            self._view.play_sound(SoundEffect.PLACE)
            self._next_turn()
            return

        self._view.play_sound(SoundEffect.MILL_FORMED)

        if not self.next_player.has_takeable_nodes:
            self._next_turn()
            return

        self._set_state(GameState.TAKING_PIECE)
        # Automated players take in their own deferred step
        if not player.is_automated:
            self._update_selectable_nodes()

    def _take_node_belonging_to(self, player: Player, node: Node):
        player.lose_piece(node)
        logger.debug("{} lost piece on {}", player.name, node.id)
        self._view.play_sound(SoundEffect.PIECE_LOST)
        self._next_turn()

    def _next_turn(self):
        next_state = self.next_player.state

        if next_state == GameState.GAME_OVER:
            self._winner = self._current_player
            self._disable_input()
            self._set_state(GameState.GAME_OVER)
            logger.info("Game over, {} wins", self._winner.name)
            self._view.game_won(self._winner)
            return

        self._switch_players()
        self._set_state(next_state)
        self._start_turn()

    def _switch_players(self):
        previous = self._current_player
        self._set_current_player(self.next_player)
        if previous.is_automated:
            previous.processing_state = ProcessingState.WAITING
        logger.debug("Turn passes to {}", self._current_player.name)

    # =========================================================================
    # Selectable nodes
    # =========================================================================

    def _update_selectable_nodes(self):
        if self._state in (GameState.PLACING_PIECES, GameState.TAKING_PIECE):
            interaction = Interaction.TAP
        elif self._state in (GameState.MOVING_PIECES, GameState.FLYING_PIECES):
            interaction = Interaction.DRAG
        else:
            raise InvalidState(f"Nothing is selectable while {self._state.value}", self._state)

        self._selectable_node_ids = [n.id for n in self._get_selectable_nodes()]
        self._interaction = interaction
        self._accepting_input = True
        self._view.update_selectable_nodes(self.selectable_node_ids, interaction)

    def _get_selectable_nodes(self) -> list[Node]:
        if self._state == GameState.TAKING_PIECE:
            return self.next_player.takeable_nodes
        if self._state in (GameState.MOVING_PIECES, GameState.FLYING_PIECES):
            return self._current_player.movable_nodes
        return self._board.empty_nodes

    def _disable_input(self):
        self._accepting_input = False
        self._selectable_node_ids = []
        self._interaction = Interaction.NONE
        self._view.update_selectable_nodes([], Interaction.NONE)

    def _ensure_accepting_input(self):
        if not self._accepting_input:
            raise InvalidState("Input is disabled", self._state)

    def _get_node(self, node_id: int) -> Node:
        node = self._board.get_node(node_id)
        if node is None:
            raise InvalidId(node_id)
        return node

    # =========================================================================
    # Automated turns
    # =========================================================================

    def _make_move_for(self, player: Player):
        player.processing_state = ProcessingState.THINKING
        generation = self._generation
        self._tasks.schedule(
            player.think_time,
            lambda: self._decide_and_apply(player, generation),
            name=f"{player.name}: move",
        )

    def _decide_and_apply(self, player: Player, generation: int):
        if generation != self._generation:
            logger.debug("Dropping move task from a previous game")
            return

        opponent = self.next_player
        snapshot = GameSnapshot.capture(self._board, player, opponent)

        try:
            move = self._policy.choose_move(snapshot)
        except Exception as e:
            self._report_error(f"Failed to calculate move for automated player. ({e})", e)
            return

        try:
            if not is_legal(snapshot, move):
                raise InvalidState(f"Illegal move: {move.describe()}", self._state)

            if move.move_type == MoveType.PLACE_PIECE:
                player.processing_state = ProcessingState.PLACING
                self._place_node_for(player, self._get_node(move.target_node_id))
            else:
                player.processing_state = ProcessingState.MOVING
                self._move_node_for(
                    player,
                    self._get_node(move.target_node_id),
                    self._get_node(move.destination_node_id),
                )
        except Exception as e:
            self._report_error(
                f"Failed to apply move ({move.describe()}) for automated player. ({e})", e
            )
            return

        if self._state == GameState.TAKING_PIECE:
            self._tasks.schedule(
                player.think_time,
                lambda: self._take_for(player, opponent, move.node_to_take_id, generation),
                name=f"{player.name}: take",
            )

    def _take_for(self, player: Player, opponent: Player, node_id: int | None, generation: int):
        if generation != self._generation:
            logger.debug("Dropping take task from a previous game")
            return

        try:
            node = self._get_node(node_id)
            if node_id not in {n.id for n in opponent.takeable_nodes}:
                raise InvalidState(f"Node {node_id} cannot be taken", self._state)
            player.processing_state = ProcessingState.TAKING_PIECE
            self._take_node_belonging_to(opponent, node)
        except Exception as e:
            self._report_error(f"Failed to take piece {node_id} for automated player. ({e})", e)

    def _report_error(self, message: str, error: Exception):
        logger.opt(exception=error).error("{} | state: {}", message, self.to_dict(message))
        self._view.handle_engine_error(message)
