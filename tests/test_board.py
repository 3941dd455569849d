import pytest

from models import Cell
from solver.board import EMPTY, Board
from solver.errors import LogicViolation


def test_next_open_cell_scans_rows_then_columns():
    board = Board(3, 2)
    assert board.find_next_open_cell() == Cell(0, 0)

    board.commit(2, 1, Cell(0, 0), 1)
    assert board.find_next_open_cell() == Cell(2, 0)

    board.commit(1, 1, Cell(2, 0), 2)
    # row 0 is full, so the scan moves to the start of row 1
    assert board.find_next_open_cell() == Cell(0, 1)

    board.commit(3, 1, Cell(0, 1), 3)
    assert board.find_next_open_cell() is None
    assert board.is_full()


def test_fits_rejects_out_of_bounds():
    board = Board(4, 3)
    assert board.fits(4, 3, Cell(0, 0))
    assert not board.fits(5, 1, Cell(0, 0))
    assert not board.fits(1, 4, Cell(0, 0))
    assert not board.fits(2, 1, Cell(3, 0))
    assert not board.fits(1, 2, Cell(0, 2))
    assert not board.fits(1, 1, Cell(-1, 0))


def test_fits_rejects_overlap():
    board = Board(4, 4)
    board.commit(2, 2, Cell(1, 1), 7)
    assert not board.fits(1, 1, Cell(2, 2))
    assert not board.fits(4, 1, Cell(0, 1))
    assert not board.fits(2, 2, Cell(0, 0))
    assert board.fits(4, 1, Cell(0, 0))
    assert board.fits(1, 4, Cell(3, 0))


def test_commit_then_undo_restores_grid_exactly():
    board = Board(5, 4)
    board.commit(2, 3, Cell(0, 0), 1)
    before = board.rows()
    occupied = board.occupied_count

    board.commit(3, 2, Cell(2, 1), 2)
    assert board.at(2, 1) == 2 and board.at(4, 2) == 2
    board.undo(3, 2, Cell(2, 1))

    assert board.rows() == before
    assert board.occupied_count == occupied
    assert board.committed == ((2, 3, Cell(0, 0)),)


def test_commit_that_does_not_fit_is_a_logic_violation():
    board = Board(2, 2)
    board.commit(1, 1, Cell(0, 0), 1)
    with pytest.raises(LogicViolation):
        board.commit(2, 1, Cell(0, 0), 2)
    with pytest.raises(LogicViolation):
        board.commit(1, 1, Cell(1, 1), EMPTY)


def test_undo_must_match_most_recent_commit():
    board = Board(3, 3)
    with pytest.raises(LogicViolation, match="no rectangle"):
        board.undo(1, 1, Cell(0, 0))

    board.commit(1, 1, Cell(0, 0), 1)
    board.commit(2, 1, Cell(1, 0), 2)
    with pytest.raises(LogicViolation, match="doesn't match"):
        board.undo(1, 1, Cell(0, 0))

    board.undo(2, 1, Cell(1, 0))
    board.undo(1, 1, Cell(0, 0))
    assert board.occupied_count == 0
