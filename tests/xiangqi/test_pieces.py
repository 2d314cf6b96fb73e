"""Unit tests for /src/xiangqi/pieces.py"""

import pytest

from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import Square


def test_opponent() -> None:
    assert Color.RED.opponent() == Color.BLACK
    assert Color.BLACK.opponent() == Color.RED


@pytest.mark.parametrize(
    "character, piece_type, color",
    [
        ("K", PieceType.GENERAL, Color.RED),
        ("a", PieceType.ADVISOR, Color.BLACK),
        ("B", PieceType.ELEPHANT, Color.RED),
        ("n", PieceType.HORSE, Color.BLACK),
        ("R", PieceType.CHARIOT, Color.RED),
        ("c", PieceType.CANNON, Color.BLACK),
        ("P", PieceType.SOLDIER, Color.RED),
    ],
)
def test_from_fen(character: str, piece_type: PieceType, color: Color) -> None:
    piece = Piece.from_fen(character, "id", Square(0, 0))
    assert piece.type == piece_type
    assert piece.color == color
    assert piece.to_fen() == character


def test_unknown_fen_character() -> None:
    with pytest.raises(KeyError):
        Piece.from_fen("q", "id", Square(0, 0))


def test_moved_to_keeps_identity() -> None:
    piece = Piece("p_25_red_cannon", PieceType.CANNON, Color.RED, Square(1, 7))
    moved = piece.moved_to(Square(4, 7))
    assert moved.id == piece.id
    assert moved.square == Square(4, 7)
    assert piece.square == Square(1, 7)
