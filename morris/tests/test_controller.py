"""
Tests for the turn controller.

Tests:
- Placing, taking and moving through taps and drags
- Input validation
- Game over and reset
- Automated turns driven by the task queue
- Error reporting for automated turns
- Notifications pushed to the view
"""

import pytest

from ..bots import BotDecision, BotPolicy, FirstLegalPolicy
from ..engine_core.move import Move
from ..engine_core.player import PlayerKind, ProcessingState
from ..engine_core.state import GameState, PieceColour
from ..errors import InvalidId, InvalidState
from ..session.controller import GameType, TurnController
from ..session.view import Interaction, SoundEffect
from .conftest import lose, play


# Eighteen placements that never form a mill. Leaves 18-23 empty.
P1_PLACEMENTS = [0, 2, 4, 6, 8, 10, 13, 15, 17]
P2_PLACEMENTS = [1, 3, 5, 7, 9, 11, 12, 14, 16]


def place_all(controller):
    for p1_node, p2_node in zip(P1_PLACEMENTS, P2_PLACEMENTS):
        controller.handle_tap(p1_node)
        controller.handle_tap(p2_node)


class TestStart:
    """Tests for a fresh game."""

    def test_initial_state(self, pvp_controller, view):
        assert pvp_controller.state == GameState.PLACING_PIECES
        assert pvp_controller.current_player is pvp_controller.p1
        assert pvp_controller.p1.is_current_player
        assert not pvp_controller.p2.is_current_player
        assert pvp_controller.accepting_input
        assert pvp_controller.interaction == Interaction.TAP
        assert pvp_controller.selectable_node_ids == list(range(24))
        assert pvp_controller.winner is None

        assert view.sounds == [SoundEffect.GAME_START]
        assert view.tips == [(GameState.PLACING_PIECES, False)]
        assert view.selectable[-1] == (list(range(24)), Interaction.TAP)

    def test_players(self, pvp_controller, pva_controller):
        assert pvp_controller.p1.piece_colour == PieceColour.GREEN
        assert pvp_controller.p2.piece_colour == PieceColour.RED
        assert pvp_controller.p2.kind == PlayerKind.HUMAN
        assert pva_controller.p2.kind == PlayerKind.AUTOMATED
        assert pva_controller.p2.name == "Computer"
        assert pva_controller.game_type == GameType.PLAYER_VS_AUTOMATON

    def test_player_views_set_up(self, pvp_controller, view):
        assert view.p1_view.calls[0] == ("setup", "Player 1")
        assert view.p2_view.calls[0] == ("setup", "Player 2")

    def test_default_view(self):
        """A controller runs headless without an injected view."""
        controller = TurnController()
        controller.handle_tap(0)
        assert controller.board.get_node(0).colour == PieceColour.GREEN


class TestPlacing:
    """Tests for taps while placing."""

    def test_tap_places_and_passes_turn(self, pvp_controller, view):
        pvp_controller.handle_tap(4)

        assert pvp_controller.board.get_node(4).colour == PieceColour.GREEN
        assert pvp_controller.p1.pieces_left_to_play == 8
        assert pvp_controller.current_player is pvp_controller.p2
        assert pvp_controller.state == GameState.PLACING_PIECES
        assert 4 not in pvp_controller.selectable_node_ids
        assert len(pvp_controller.selectable_node_ids) == 23
        assert view.sounds[-1] == SoundEffect.PLACE
        assert view.tips[-1] == (GameState.PLACING_PIECES, False)

    def test_tap_occupied(self, pvp_controller):
        pvp_controller.handle_tap(4)
        with pytest.raises(InvalidState):
            pvp_controller.handle_tap(4)
        assert pvp_controller.current_player is pvp_controller.p2

    @pytest.mark.parametrize("node_id", [-1, 24, 100, True, "3", None])
    def test_tap_invalid_id(self, pvp_controller, node_id):
        with pytest.raises(InvalidId):
            pvp_controller.handle_tap(node_id)

    def test_drag_while_placing(self, pvp_controller):
        with pytest.raises(InvalidState):
            pvp_controller.handle_drag(0, 1)

    def test_no_movable_positions_while_placing(self, pvp_controller):
        with pytest.raises(InvalidState):
            pvp_controller.movable_positions_for(0)

    def test_current_player_notifications(self, pvp_controller, view):
        pvp_controller.handle_tap(0)

        assert ("current", False) in view.p1_view.calls
        assert ("current", True) in view.p2_view.calls
        assert ("pieces_left", 8) in view.p1_view.calls


class TestTaking:
    """Tests for forming a mill and taking a piece."""

    @pytest.fixture
    def mill_owed(self, pvp_controller):
        for node_id in (0, 9, 1, 10, 2):
            pvp_controller.handle_tap(node_id)
        return pvp_controller

    def test_mill_enters_taking(self, mill_owed, view):
        assert mill_owed.state == GameState.TAKING_PIECE
        assert mill_owed.current_player is mill_owed.p1
        assert mill_owed.selectable_node_ids == [9, 10]
        assert mill_owed.interaction == Interaction.TAP
        assert view.sounds[-1] == SoundEffect.MILL_FORMED
        assert view.tips[-1] == (GameState.TAKING_PIECE, False)

    def test_take(self, mill_owed, view):
        mill_owed.handle_tap(9)

        assert mill_owed.board.get_node(9).is_empty
        assert [n.id for n in mill_owed.p2.pieces_on_board] == [10]
        assert mill_owed.current_player is mill_owed.p2
        assert mill_owed.state == GameState.PLACING_PIECES
        assert view.sounds[-1] == SoundEffect.PIECE_LOST

    def test_cannot_take_own_piece(self, mill_owed):
        with pytest.raises(InvalidState):
            mill_owed.handle_tap(0)
        assert mill_owed.state == GameState.TAKING_PIECE

    def test_cannot_take_empty_node(self, mill_owed):
        with pytest.raises(InvalidState):
            mill_owed.handle_tap(20)

    def test_snapshot_owes_take(self, mill_owed):
        snapshot = mill_owed.snapshot()
        assert snapshot.mill_formed_last_turn
        assert [m.target_node_id for m in snapshot.get_possible_moves()] == [9, 10]


class TestMoving:
    """Tests for drags once all pieces are placed."""

    def test_enters_moving(self, pvp_controller, view):
        place_all(pvp_controller)

        assert pvp_controller.state == GameState.MOVING_PIECES
        assert pvp_controller.current_player is pvp_controller.p1
        assert pvp_controller.interaction == Interaction.DRAG
        assert pvp_controller.selectable_node_ids == [10, 13]
        assert view.tips[-1] == (GameState.MOVING_PIECES, False)

    def test_movable_positions(self, pvp_controller):
        place_all(pvp_controller)

        assert pvp_controller.movable_positions_for(10) == [18]
        assert pvp_controller.movable_positions_for(13) == [20]
        assert pvp_controller.movable_positions_for(0) == []

    def test_drag(self, pvp_controller):
        place_all(pvp_controller)
        pvp_controller.handle_drag(10, 18)

        assert pvp_controller.board.get_node(10).is_empty
        assert pvp_controller.board.get_node(18).colour == PieceColour.GREEN
        assert pvp_controller.current_player is pvp_controller.p2
        assert pvp_controller.selectable_node_ids == [3, 9, 11, 14, 16]

    def test_drag_opponent_piece(self, pvp_controller):
        place_all(pvp_controller)
        with pytest.raises(InvalidState):
            pvp_controller.handle_drag(9, 21)

    def test_drag_to_occupied(self, pvp_controller):
        place_all(pvp_controller)
        with pytest.raises(InvalidState):
            pvp_controller.handle_drag(10, 3)

    def test_drag_invalid_id(self, pvp_controller):
        place_all(pvp_controller)
        with pytest.raises(InvalidId):
            pvp_controller.handle_drag(10, 24)

    def test_tap_while_moving(self, pvp_controller):
        place_all(pvp_controller)
        with pytest.raises(InvalidState):
            pvp_controller.handle_tap(18)

    def test_flying_positions(self, pvp_controller):
        place_all(pvp_controller)
        for node_id in (2, 4, 6, 8, 15, 17):
            pvp_controller.p1.lose_piece(pvp_controller.board.get_node(node_id))
        pvp_controller.handle_drag(10, 18)
        pvp_controller.handle_drag(9, 21)

        assert pvp_controller.state == GameState.FLYING_PIECES
        assert pvp_controller.selectable_node_ids == [0, 13, 18]
        assert pvp_controller.movable_positions_for(0) == [
            n.id for n in pvp_controller.board.empty_nodes
        ]


class TestGameOver:
    """Tests for the end of a game."""

    @pytest.fixture
    def won(self, pvp_controller):
        place_all(pvp_controller)
        for node_id in (1, 3, 5, 7, 9, 11):
            pvp_controller.p2.lose_piece(pvp_controller.board.get_node(node_id))
        # 4 -> 1 completes 0-1-2
        pvp_controller.handle_drag(4, 1)
        pvp_controller.handle_tap(12)
        return pvp_controller

    def test_winner(self, won, view):
        assert won.state == GameState.GAME_OVER
        assert won.winner is won.p1
        assert view.winners == [won.p1]
        assert view.tips[-1] == (GameState.GAME_OVER, False)

    def test_input_disabled(self, won):
        assert not won.accepting_input
        assert won.selectable_node_ids == []
        assert won.interaction == Interaction.NONE
        with pytest.raises(InvalidState):
            won.handle_tap(20)

    def test_to_dict(self, won):
        data = won.to_dict("done")

        assert data["state"] == "game_over"
        assert data["msg"] == "done"
        assert data["winner"] == 0
        assert data["player_two"]["pieces_on_board_count"] == 2
        assert data["board"]["nodes"]["1"] == "green"


class TestReset:
    """Tests for starting over."""

    def test_reset(self, pvp_controller, view):
        for node_id in (0, 9, 1, 10, 2):
            pvp_controller.handle_tap(node_id)

        pvp_controller.reset()

        assert pvp_controller.state == GameState.PLACING_PIECES
        assert pvp_controller.current_player is pvp_controller.p1
        assert len(pvp_controller.board.empty_nodes) == 24
        assert pvp_controller.p1.pieces_left_to_play == 9
        assert pvp_controller.p2.pieces_on_board == []
        assert pvp_controller.accepting_input
        assert view.sounds[-1] == SoundEffect.GAME_START

    def test_reset_drops_pending_automated_move(self, pva_controller, task_queue):
        pva_controller.handle_tap(0)
        assert len(task_queue) == 1

        pva_controller.reset()
        task_queue.run_all()

        assert len(pva_controller.board.empty_nodes) == 24
        assert pva_controller.current_player is pva_controller.p1
        assert pva_controller.p2.processing_state == ProcessingState.WAITING


class TestAutomatedTurns:
    """Tests for the automated player."""

    def test_uses_given_task_queue(self, task_queue):
        """An empty queue passed in is the queue turns are scheduled on."""
        controller = TurnController(GameType.PLAYER_VS_AUTOMATON, task_queue=task_queue)
        assert controller.task_queue is task_queue

        controller.handle_tap(0)
        assert len(task_queue) == 1

    def test_move_scheduled_after_human_turn(self, pva_controller, task_queue, view):
        pva_controller.handle_tap(0)

        assert pva_controller.current_player is pva_controller.p2
        assert not pva_controller.accepting_input
        assert task_queue.pending == ["Computer: move"]
        assert pva_controller.p2.processing_state == ProcessingState.THINKING
        assert view.tips[-1] == (GameState.PLACING_PIECES, True)

    def test_human_input_rejected_while_thinking(self, pva_controller):
        pva_controller.handle_tap(0)
        with pytest.raises(InvalidState):
            pva_controller.handle_tap(5)

    def test_waits_for_think_time(self, pva_controller, task_queue, clock):
        pva_controller.handle_tap(0)

        clock.advance(0.4)
        assert task_queue.run_due() == 0
        clock.advance(0.1)
        assert task_queue.run_due() == 1

        assert pva_controller.board.get_node(1).colour == PieceColour.RED
        assert pva_controller.current_player is pva_controller.p1
        assert pva_controller.accepting_input
        assert pva_controller.p2.processing_state == ProcessingState.WAITING

    def test_processing_states_reported(self, pva_controller, task_queue, view):
        pva_controller.handle_tap(0)
        task_queue.run_all()

        processing = [call[1] for call in view.p2_view.calls if call[0] == "processing"]
        assert processing == [
            ProcessingState.THINKING,
            ProcessingState.PLACING,
            ProcessingState.WAITING,
        ]

    def test_mill_take_is_a_second_step(self, pva_controller, task_queue, clock, view):
        for node_id in (21, 22, 5):
            pva_controller.handle_tap(node_id)
            clock.advance(0.5)
            task_queue.run_due()

        # Placed 0, 1 and then 2, completing a mill
        assert pva_controller.state == GameState.TAKING_PIECE
        assert pva_controller.current_player is pva_controller.p2
        assert task_queue.pending == ["Computer: take"]
        assert not pva_controller.accepting_input
        assert view.sounds[-1] == SoundEffect.MILL_FORMED
        assert view.tips[-1] == (GameState.TAKING_PIECE, False)

        clock.advance(0.5)
        task_queue.run_due()

        assert pva_controller.board.get_node(21).is_empty
        assert [n.id for n in pva_controller.p1.pieces_on_board] == [22, 5]
        assert pva_controller.state == GameState.PLACING_PIECES
        assert pva_controller.current_player is pva_controller.p1
        assert pva_controller.accepting_input
        assert view.sounds[-1] == SoundEffect.PIECE_LOST

    def test_two_automated_steps_report_taking(self, pva_controller, task_queue, view):
        for node_id in (21, 22, 5):
            pva_controller.handle_tap(node_id)
            task_queue.run_all()

        processing = [call[1] for call in view.p2_view.calls if call[0] == "processing"]
        assert ProcessingState.TAKING_PIECE in processing


class TestAutomatedErrors:
    """Failures in automated steps are reported, not raised."""

    def test_decision_failure(self, view, config, task_queue):
        class BrokenPolicy(BotPolicy):
            def select_move(self, snapshot, legal_moves):
                raise RuntimeError("no idea")

        controller = TurnController(
            GameType.PLAYER_VS_AUTOMATON,
            view=view,
            config=config,
            policy=BrokenPolicy(),
            task_queue=task_queue,
        )
        controller.handle_tap(0)
        task_queue.run_all()

        assert view.errors == ["Failed to calculate move for automated player. (no idea)"]
        assert controller.current_player is controller.p2

    def test_apply_failure(self, view, config, task_queue):
        class TakeFirstPolicy(FirstLegalPolicy):
            def choose_move(self, snapshot):
                return Move.take(0)

        controller = TurnController(
            GameType.PLAYER_VS_AUTOMATON,
            view=view,
            config=config,
            policy=TakeFirstPolicy(),
            task_queue=task_queue,
        )
        controller.handle_tap(0)
        task_queue.run_all()

        assert len(view.errors) == 1
        assert view.errors[0].startswith("Failed to apply move (take 0) for automated player.")
        assert controller.board.get_node(0).colour == PieceColour.GREEN

    def test_unknown_node(self, view, config, task_queue):
        class OffBoardPolicy(BotPolicy):
            def select_move(self, snapshot, legal_moves):
                return BotDecision(move=Move.place(99))

        controller = TurnController(
            GameType.PLAYER_VS_AUTOMATON,
            view=view,
            config=config,
            policy=OffBoardPolicy(),
            task_queue=task_queue,
        )
        controller.handle_tap(0)
        task_queue.run_all()

        assert view.errors == [
            "Failed to calculate move for automated player. (Invalid node id: 99)"
        ]

    def test_illegal_placement_reported(self, view, config, task_queue):
        class OccupiedNodePolicy(FirstLegalPolicy):
            def choose_move(self, snapshot):
                return Move.place(0)

        controller = TurnController(
            GameType.PLAYER_VS_AUTOMATON,
            view=view,
            config=config,
            policy=OccupiedNodePolicy(),
            task_queue=task_queue,
        )
        controller.handle_tap(0)
        task_queue.run_all()

        assert len(view.errors) == 1
        assert view.errors[0].startswith("Failed to apply move (place on 0) for automated player.")
        assert controller.board.get_node(0).colour == PieceColour.GREEN
        assert [n.id for n in controller.p1.pieces_on_board] == [0]
        assert controller.p2.pieces_on_board == []
        assert controller.p2.pieces_left_to_play == 9

    def test_illegal_take_reported(self, view, config, task_queue):
        class OwnPieceTakePolicy(FirstLegalPolicy):
            def choose_move(self, snapshot):
                move = super().choose_move(snapshot)
                return move.with_take(0) if move.forms_mill else move

        controller = TurnController(
            GameType.PLAYER_VS_AUTOMATON,
            view=view,
            config=config,
            policy=OwnPieceTakePolicy(),
            task_queue=task_queue,
        )
        play(controller.p2, controller.board, 0, 1)
        controller.handle_tap(20)
        task_queue.run_all()

        assert view.errors == [
            "Failed to take piece 0 for automated player. (Node 0 cannot be taken)"
        ]
        assert controller.board.get_node(0).colour == PieceColour.RED
        assert [n.id for n in controller.p2.pieces_on_board] == [0, 1, 2]
        assert [n.id for n in controller.p1.pieces_on_board] == [20]
        assert controller.state == GameState.TAKING_PIECE


class TestAutomatedPhases:
    """Automated turns after placing, and automated turns that end games."""

    def reach_moving(self, controller, task_queue):
        """Leave the human to move with the usual eighteen pieces down."""
        play(controller.p1, controller.board, *P1_PLACEMENTS[:8])
        play(controller.p2, controller.board, *P2_PLACEMENTS[:8])
        controller.handle_tap(P1_PLACEMENTS[8])
        # Lowest empty node is 16
        task_queue.run_all()

    def test_reach_moving(self, pva_controller, task_queue):
        self.reach_moving(pva_controller, task_queue)

        assert pva_controller.board.get_node(16).colour == PieceColour.RED
        assert pva_controller.state == GameState.MOVING_PIECES
        assert pva_controller.current_player is pva_controller.p1
        assert pva_controller.selectable_node_ids == [10, 13]

    def test_automated_move_along_with_mill(self, pva_controller, task_queue, clock, view):
        self.reach_moving(pva_controller, task_queue)
        pva_controller.handle_drag(10, 18)

        assert task_queue.pending == ["Computer: move"]
        assert view.tips[-1] == (GameState.MOVING_PIECES, True)

        # 3 -> 10 completes 9-10-11
        clock.advance(0.5)
        task_queue.run_due()

        assert pva_controller.board.get_node(3).is_empty
        assert pva_controller.board.get_node(10).colour == PieceColour.RED
        assert pva_controller.state == GameState.TAKING_PIECE
        assert pva_controller.p2.processing_state == ProcessingState.MOVING
        assert task_queue.pending == ["Computer: take"]
        assert view.sounds[-1] == SoundEffect.MILL_FORMED

        clock.advance(0.5)
        task_queue.run_due()

        assert pva_controller.board.get_node(0).is_empty
        assert pva_controller.p1.num_of_pieces_in_play == 8
        assert pva_controller.state == GameState.MOVING_PIECES
        assert pva_controller.current_player is pva_controller.p1
        assert pva_controller.accepting_input
        assert pva_controller.interaction == Interaction.DRAG
        assert pva_controller.p2.processing_state == ProcessingState.WAITING

    def test_automated_fly(self, pva_controller, task_queue, view):
        self.reach_moving(pva_controller, task_queue)
        lose(pva_controller.p2, pva_controller.board, 1, 3, 5, 7, 9, 11)
        pva_controller.handle_drag(10, 18)

        assert pva_controller.state == GameState.FLYING_PIECES
        assert view.tips[-1] == (GameState.FLYING_PIECES, True)

        # First fly move is 12 -> 1, which forms no mill
        task_queue.run_all()

        assert pva_controller.board.get_node(12).is_empty
        assert pva_controller.board.get_node(1).colour == PieceColour.RED
        assert [n.id for n in pva_controller.p2.pieces_on_board] == [14, 16, 1]
        assert pva_controller.state == GameState.MOVING_PIECES
        assert pva_controller.current_player is pva_controller.p1
        assert ("processing", ProcessingState.MOVING) in view.p2_view.calls

    def test_mill_with_nothing_to_take(self, pva_controller, task_queue, view):
        """The turn passes at once when the opponent has no pieces down."""
        play(pva_controller.p2, pva_controller.board, 0, 1)
        pva_controller.handle_tap(20)
        lose(pva_controller.p1, pva_controller.board, 20)

        task_queue.run_all()

        assert pva_controller.board.get_node(2).colour == PieceColour.RED
        assert view.sounds[-1] == SoundEffect.MILL_FORMED
        assert pva_controller.state == GameState.PLACING_PIECES
        assert pva_controller.current_player is pva_controller.p1
        assert pva_controller.accepting_input
        assert len(task_queue) == 0
        assert view.errors == []

    def test_automated_take_ends_game(self, pva_controller, task_queue, view):
        play(pva_controller.p2, pva_controller.board, 0, 1, 3, 5, 7, 9, 11, 12)
        play(pva_controller.p1, pva_controller.board, *range(13, 21))
        lose(pva_controller.p1, pva_controller.board, *range(15, 21))
        pva_controller.handle_tap(23)

        # Places its last piece on 2, completing 0-1-2, then takes 13
        task_queue.run_all()

        assert pva_controller.board.get_node(13).is_empty
        assert [n.id for n in pva_controller.p1.pieces_on_board] == [14, 23]
        assert pva_controller.state == GameState.GAME_OVER
        assert pva_controller.winner is pva_controller.p2
        assert view.winners == [pva_controller.p2]
        assert not pva_controller.accepting_input
        assert len(task_queue) == 0
        assert pva_controller.to_dict()["winner"] == 1
