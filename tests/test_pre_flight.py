import pytest

from models import Block
from solver.errors import StructuralPrecondition
from solver.pre_flight import as_blocks, check_puzzle


def test_valid_puzzle_passes():
    pre = check_puzzle(4, 4, as_blocks([(4, 2), (2, 4)]))
    assert pre.ok
    assert pre.board_area == pre.block_area == 16
    pre.require_valid()


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (100, 1), (1, 100)])
def test_board_size_out_of_range(width, height):
    pre = check_puzzle(width, height, [])
    assert not pre.ok
    assert pre.reason == f"Bad target rectangle size {width} x {height}"


def test_block_may_use_the_longer_board_side():
    # 1x5 is longer than the board is tall but still fits when rotated
    assert check_puzzle(5, 1, [Block(1, 5)]).ok
    pre = check_puzzle(5, 1, [Block(6, 1)])
    assert not pre.ok
    assert pre.reason == "Bad rectangle size 6 x 1"


def test_area_mismatch_is_reported_and_raises_on_demand():
    pre = check_puzzle(3, 3, [Block(2, 2), Block(2, 2)])
    assert not pre.ok
    assert pre.block_area == 8 and pre.board_area == 9
    assert "(8)" in pre.reason and "(9)" in pre.reason
    with pytest.raises(StructuralPrecondition):
        pre.require_valid()


def test_max_size_override():
    assert not check_puzzle(10, 10, [Block(10, 10)], max_size=9).ok
    assert check_puzzle(10, 10, [Block(10, 10)], max_size=10).ok


def test_as_blocks_rejects_garbage():
    assert as_blocks([(1, 2), Block(3, 4)]) == (Block(1, 2), Block(3, 4))
    with pytest.raises(TypeError):
        as_blocks([(1, 2, 3)])
