"""Unit tests for /src/xiangqi/notation.py"""

from src.xiangqi.board import Board
from src.xiangqi.moves import Move
from src.xiangqi.notation import describe_position, last_move_notation, move_notation
from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import Square


def test_move_notation() -> None:
    cannon = Piece("c", PieceType.CANNON, Color.RED, Square(1, 7))
    assert move_notation(cannon, Square(1, 7), Square(4, 7)) == "Red Cannon (1,7)->(4,7)"


def test_move_notation_with_capture() -> None:
    horse = Piece("h", PieceType.HORSE, Color.BLACK, Square(1, 0))
    soldier = Piece("s", PieceType.SOLDIER, Color.RED, Square(2, 2))
    assert (
        move_notation(horse, Square(1, 0), Square(2, 2), soldier)
        == "Black Horse (1,0)->(2,2) x Red Soldier"
    )


def test_describe_position() -> None:
    description = describe_position(Board.starting_position(), Color.RED)
    lines = description.splitlines()
    assert lines[0] == "Current Turn: red. Board State:"
    assert len(lines) == 33
    assert "red general at (4, 9)" in lines
    assert "black general at (4, 0)" in lines
    assert "black cannon at (7, 2)" in lines


def test_describe_position_black_to_move() -> None:
    board = Board.from_fen("4k4/9/9/9/9/9/9/9/9/3K5")
    assert describe_position(board, Color.BLACK) == (
        "Current Turn: black. Board State:\n"
        "black general at (4, 0)\n"
        "red general at (3, 9)"
    )


def test_last_move_notation() -> None:
    assert last_move_notation([]) is None
    moves = [
        Move("a", Square(1, 7), Square(4, 7), notation="first"),
        Move("b", Square(7, 0), Square(6, 2), notation="second"),
    ]
    assert last_move_notation(moves) == "second"
