"""Unit tests for /src/xiangqi/square.py"""

import pytest

from src.xiangqi.square import BOARD_DIMENSIONS, Square


@pytest.mark.parametrize(
    "iccs, file, rank",
    [
        ("a0", 0, 9),  # Red's left corner
        ("e0", 4, 9),  # Red general's starting square
        ("i9", 8, 0),  # Black's far corner
        ("b2", 1, 7),  # Red cannon
        ("E9", 4, 0),  # upper case file letter is accepted
    ],
)
def test_square_from_iccs(iccs: str, file: int, rank: int) -> None:
    assert Square.from_iccs(iccs) == Square(file, rank)


@pytest.mark.parametrize("iccs", ["a0", "e3", "h7", "i9"])
def test_square_to_iccs(iccs: str) -> None:
    assert Square.from_iccs(iccs).to_iccs() == iccs


def test_all_squares_within_bounds() -> None:
    for file in range(BOARD_DIMENSIONS[0]):
        for rank in range(BOARD_DIMENSIONS[1]):
            assert Square(file, rank).is_within_bounds()


@pytest.mark.parametrize("file, rank", [(-1, 0), (0, -1), (9, 0), (0, 10), (9, 10)])
def test_squares_out_of_bounds(file: int, rank: int) -> None:
    assert not Square(file, rank).is_within_bounds()


def test_offset() -> None:
    assert Square(4, 5).offset(1, -2) == Square(5, 3)


def test_squares_are_hashable_values() -> None:
    """Frozen dataclass: equal squares collapse in a set"""
    assert len({Square(1, 1), Square(1, 1), Square(1, 2)}) == 2
