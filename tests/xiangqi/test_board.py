"""Unit tests for /src/xiangqi/board.py"""

from collections import Counter

import pytest

from src.xiangqi.board import STARTING_FEN, Board
from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import Square

EMPTY_FEN = "/".join(["9"] * 10)


def test_starting_position_has_32_pieces() -> None:
    board = Board.starting_position()
    assert len(board.pieces) == 32
    assert len(board.pieces_of(Color.RED)) == 16
    assert len(board.pieces_of(Color.BLACK)) == 16


def test_starting_position_piece_counts() -> None:
    board = Board.starting_position()
    counts = Counter(piece.type for piece in board.pieces_of(Color.RED))
    assert counts == {
        PieceType.GENERAL: 1,
        PieceType.ADVISOR: 2,
        PieceType.ELEPHANT: 2,
        PieceType.HORSE: 2,
        PieceType.CHARIOT: 2,
        PieceType.CANNON: 2,
        PieceType.SOLDIER: 5,
    }


def test_starting_position_ids_are_unique_and_stable() -> None:
    first = Board.starting_position()
    second = Board.starting_position()
    assert len({piece.id for piece in first.pieces}) == 32
    assert [piece.id for piece in first.pieces] == [piece.id for piece in second.pieces]
    assert first.piece_at(Square(4, 0)).id == "p_4_black_general"
    assert first.piece_at(Square(4, 9)).id == "p_20_red_general"


def test_starting_position_matches_starting_fen() -> None:
    assert Board.starting_position().to_fen() == STARTING_FEN


def test_general_squares_in_starting_position() -> None:
    board = Board.starting_position()
    assert board.find_general(Color.RED).square == Square(4, 9)
    assert board.find_general(Color.BLACK).square == Square(4, 0)


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        EMPTY_FEN,
        "3k5/9/9/9/9/9/9/9/9/4K4",
        "r3k4/4a4/9/9/2C6/9/9/9/4A4/3K1R3",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert Board.from_fen(fen).to_fen() == fen


def test_from_fen_places_pieces() -> None:
    board = Board.from_fen("4k4/9/9/9/9/9/9/1C7/9/4K4")
    cannon = board.piece_at(Square(1, 7))
    assert cannon is not None
    assert cannon.type == PieceType.CANNON
    assert cannon.color == Color.RED
    assert board.piece_at(Square(4, 0)).color == Color.BLACK
    assert board.piece_at(Square(0, 0)) is None


def test_find_general_missing() -> None:
    board = Board.from_fen("4k4/9/9/9/9/9/9/9/9/9")
    assert board.find_general(Color.RED) is None


def test_piece_by_id() -> None:
    board = Board.starting_position()
    piece = board.piece_by_id("p_25_red_cannon")
    assert piece is not None
    assert piece.square == Square(1, 7)
    assert board.piece_by_id("no such piece") is None


def test_board_equality_ignores_order() -> None:
    board = Board.starting_position()
    shuffled = Board(tuple(reversed(board.pieces)))
    assert board == shuffled
    assert hash(board) == hash(shuffled)


def test_board_equality_compares_squares() -> None:
    board = Board.starting_position()
    moved = Board(
        tuple(
            piece.moved_to(Square(4, 7)) if piece.id == "p_25_red_cannon" else piece
            for piece in board.pieces
        )
    )
    assert board != moved


def test_apply_move_relocates_piece() -> None:
    board = Board.starting_position()
    move = Move("p_25_red_cannon", Square(1, 7), Square(4, 7))
    new_board = board.apply_move(move)
    assert new_board.piece_at(Square(4, 7)).id == "p_25_red_cannon"
    assert new_board.piece_at(Square(1, 7)) is None
    assert len(new_board.pieces) == 32


def test_apply_move_removes_captured_piece() -> None:
    board = Board.starting_position()
    move = Move(
        "p_25_red_cannon",
        Square(1, 7),
        Square(1, 0),
        captured_piece_id="p_1_black_horse",
    )
    new_board = board.apply_move(move)
    assert len(new_board.pieces) == 31
    assert new_board.piece_by_id("p_1_black_horse") is None
    assert new_board.piece_at(Square(1, 0)).id == "p_25_red_cannon"


def test_apply_move_leaves_original_untouched() -> None:
    board = Board.starting_position()
    before = board.to_fen()
    _ = board.apply_move(Move("p_25_red_cannon", Square(1, 7), Square(4, 7)))
    assert board.to_fen() == before
    assert board.piece_at(Square(1, 7)) == Piece(
        "p_25_red_cannon", PieceType.CANNON, Color.RED, Square(1, 7)
    )
