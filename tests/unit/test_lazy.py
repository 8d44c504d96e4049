"""
Unit tests for LazyGameBoard.
"""
import pytest
import numpy as np
from minefield import (
    AlreadyClosedError,
    ClearingOverflowError,
    GameBoard,
    GameNotFinishedError,
    GameState,
    KeyEvent,
    LazyGameBoard,
    LoggedGameBoard,
    NOT_VISIBLE,
    OpenCells,
    OutOfBoundsError,
    PendingBoard,
    ToggleFlag,
)


# ============================================================================
# Pending State Tests
# ============================================================================

class TestPending:
    """Test a board that has not been built yet."""

    def test_pending_queries(self, pending_board: LazyGameBoard) -> None:
        """A pending board reports its configuration and nothing open."""
        assert pending_board.is_initialized is False
        assert isinstance(pending_board.state, PendingBoard)
        assert pending_board.dimensions == (9, 9)
        assert pending_board.bomb_count == 10
        assert pending_board.opened == 0
        assert pending_board.flagged == 0
        assert pending_board.tiles_left == 71
        assert pending_board.game_state == GameState.PLAYING
        assert pending_board.opening_move() is None

    def test_pending_tiles_are_closed(self, pending_board: LazyGameBoard) -> None:
        assert pending_board.get_board_tile(0, 0) == NOT_VISIBLE
        assert pending_board.get_board_tile(9, 0) is None
        assert pending_board.render().dimensions == (9, 9)
        assert np.all(pending_board.observation() == -1)

    def test_out_of_bounds_stays_pending(self, pending_board: LazyGameBoard) -> None:
        """An off-board first move does not build the board."""
        with pytest.raises(OutOfBoundsError):
            pending_board.open_tile(9, 9)
        with pytest.raises(OutOfBoundsError):
            pending_board.flag_tile(-1, 0)
        assert pending_board.is_initialized is False

    def test_undo_while_pending(self, pending_board: LazyGameBoard) -> None:
        with pytest.raises(AlreadyClosedError):
            pending_board.undo_move(OpenCells(((0, 0),)))

    def test_game_end_while_pending(self, pending_board: LazyGameBoard) -> None:
        """Losing before any move is a no-op; winning is refused."""
        pending_board.lose_game()
        assert pending_board.game_state == GameState.PLAYING
        with pytest.raises(GameNotFinishedError) as excinfo:
            pending_board.win_game()
        assert excinfo.value.tiles_left == 71

    def test_control_event_stays_pending(self, pending_board: LazyGameBoard) -> None:
        assert pending_board.do_event(KeyEvent.pause()) is None
        assert pending_board.is_initialized is False

    def test_unclearable_config_rejected(self) -> None:
        """Configurations without room for any clearing fail up front."""
        with pytest.raises(ClearingOverflowError):
            LazyGameBoard.new_uninit(3, 3, 1)


# ============================================================================
# Initialisation Tests
# ============================================================================

class TestInitialisation:
    """Test building the board on the first move."""

    def test_first_open_builds_clearing(self, pending_board: LazyGameBoard) -> None:
        """The first open lands in a mine-free 3x3 region."""
        event = pending_board.open_tile(4, 4)
        assert pending_board.is_initialized is True
        assert isinstance(pending_board.state, GameBoard)
        assert pending_board.state.mine_layout()[3:6, 3:6].sum() == 0
        assert (4, 4) in event
        assert pending_board.opened == len(event)

    def test_first_flag_builds_board(self, pending_board: LazyGameBoard) -> None:
        """Flagging first also builds the board around that tile."""
        assert pending_board.flag_tile(0, 0) == ToggleFlag(0, 0)
        assert pending_board.is_initialized is True
        assert pending_board.state.mine_layout()[0:2, 0:2].sum() == 0
        assert pending_board.get_board_tile(0, 0).is_flagged is True

    def test_first_event_builds_board(self, pending_board: LazyGameBoard) -> None:
        """Pointer input while pending builds the board and plays."""
        event = pending_board.do_event(KeyEvent.primary(8, 8))
        assert pending_board.is_initialized is True
        assert (8, 8) in event

    def test_factory_called_once(self) -> None:
        """The factory runs on the first move only."""
        calls = []

        def factory(width, height, mines, x, y):
            calls.append((width, height, mines, x, y))
            return GameBoard.with_clearing(width, height, mines, x, y)

        board = LazyGameBoard.new_uninit(9, 9, 10, factory=factory)
        board.undo_move(board.open_tile(4, 4))
        board.open_tile(4, 4)
        board.do_event(KeyEvent.secondary(0, 0))
        assert calls == [(9, 9, 10, 4, 4)]

    def test_failed_factory_is_an_invariant_error(self) -> None:
        """A validated board that cannot be built is a RuntimeError."""
        def factory(width, height, mines, x, y):
            raise ClearingOverflowError()

        board = LazyGameBoard.new_uninit(9, 9, 10, factory=factory)
        with pytest.raises(RuntimeError):
            board.open_tile(0, 0)

    def test_with_clearing_is_initialised(self) -> None:
        board = LazyGameBoard.with_clearing(9, 9, 10, 4, 4)
        assert board.is_initialized is True
        assert board.state.mine_layout()[3:6, 3:6].sum() == 0

    def test_live_board_delegates(self, pending_board: LazyGameBoard) -> None:
        """After building, commands and queries go to the live board."""
        event = pending_board.open_tile(4, 4)
        pending_board.undo_move(event)
        assert pending_board.opened == 0
        assert pending_board.get_board_tile(4, 4).is_hidden is True
        pending_board.lose_game()
        assert pending_board.game_state == GameState.LOST


# ============================================================================
# Lazy Logged Board Tests
# ============================================================================

class TestLazyLogged:
    """Test a lazy board that builds a logged board."""

    def test_first_open_returns_opening_move(self) -> None:
        """The logged opening move is returned instead of opening twice."""
        board = LazyGameBoard.new_uninit(9, 9, 10, factory=LoggedGameBoard.start_new)
        event = board.open_tile(4, 4)

        logged = board.state
        assert isinstance(logged, LoggedGameBoard)
        assert len(logged.frames) == 1
        assert logged.opening_move() == event
        assert board.opening_move() == event

    def test_control_events_reach_log(self) -> None:
        board = LazyGameBoard.new_uninit(9, 9, 10, factory=LoggedGameBoard.start_new)
        board.open_tile(4, 4)
        board.do_event(KeyEvent.pause())
        assert len(board.state.frames) == 2
        assert board.state.frames[-1].trace.is_control is True
