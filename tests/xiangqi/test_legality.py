"""Unit tests for /src/xiangqi/legality.py"""

from src.xiangqi.board import Board
from src.xiangqi.legality import (
    all_legal_moves,
    build_move,
    evaluate_game_state,
    has_any_legal_move,
    legal_moves,
)
from src.xiangqi.pieces import Color, Piece
from src.xiangqi.square import Square


def make_board(placement: dict[tuple[int, int], str]) -> Board:
    """Board from {(file, rank): FEN letter}. Ids are the letter + coordinates, ex. 'R45' for a Red chariot on (4, 5)"""
    return Board.from_pieces(
        Piece.from_fen(letter, f"{letter}{file}{rank}", Square(file, rank))
        for (file, rank), letter in placement.items()
    )


def piece_on(board: Board, file: int, rank: int) -> Piece:
    piece = board.piece_at(Square(file, rank))
    assert piece is not None
    return piece


def test_starting_position_has_44_legal_moves() -> None:
    board = Board.starting_position()
    for color in Color:
        moves = all_legal_moves(board, color)
        assert sum(len(squares) for squares in moves.values()) == 44


def test_all_legal_moves_skips_pieces_without_moves() -> None:
    board = Board.starting_position()
    moves = all_legal_moves(board, Color.RED)
    assert "p_25_red_cannon" in moves
    assert "p_20_red_general" in moves
    assert all(squares for squares in moves.values())


def test_pinned_chariot_must_stay_on_file() -> None:
    """The chariot shields its general from the black chariot: any move off the file exposes the general."""
    board = make_board({(4, 9): "K", (4, 5): "R", (4, 0): "r", (3, 0): "k"})
    moves = legal_moves(piece_on(board, 4, 5), board)
    assert set(moves) == {Square(4, rank) for rank in [8, 7, 6, 4, 3, 2, 1, 0]}


def test_general_cannot_step_into_attack() -> None:
    """(3, 9) is covered by the chariot, (5, 9) would face the black general."""
    board = make_board({(4, 9): "K", (3, 0): "r", (5, 0): "k"})
    assert legal_moves(piece_on(board, 4, 9), board) == [Square(4, 8)]


def test_must_resolve_check() -> None:
    """In check from the chariot: only blocking, capturing or stepping aside remain."""
    board = make_board({(4, 9): "K", (4, 2): "r", (3, 0): "k", (0, 5): "R", (8, 8): "N"})
    chariot_moves = legal_moves(piece_on(board, 0, 5), board)
    assert chariot_moves == [Square(4, 5)]

    general_moves = set(legal_moves(piece_on(board, 4, 9), board))
    assert general_moves == {Square(5, 9)}

    # the horse cannot reach file 4 between the two pieces
    assert legal_moves(piece_on(board, 8, 8), board) == []


def test_build_move_records_capture_and_notation() -> None:
    board = make_board({(0, 9): "R", (0, 3): "p", (4, 9): "K", (3, 0): "k"})
    chariot = piece_on(board, 0, 9)

    quiet = build_move(board, chariot, Square(0, 5), timestamp=42)
    assert quiet.captured_piece_id is None
    assert quiet.from_square == Square(0, 9)
    assert quiet.timestamp == 42
    assert quiet.notation == "Red Chariot (0,9)->(0,5)"

    capture = build_move(board, chariot, Square(0, 3))
    assert capture.captured_piece_id == "p03"
    assert capture.notation == "Red Chariot (0,9)->(0,3) x Black Soldier"


def test_evaluate_starting_position() -> None:
    evaluation = evaluate_game_state(Board.starting_position(), Color.RED)
    assert not evaluation.in_check
    assert not evaluation.checkmated
    assert not evaluation.stalemated


def test_evaluate_check() -> None:
    """The black general can escape to (4, 0)."""
    board = make_board({(5, 9): "K", (3, 5): "R", (3, 0): "k"})
    evaluation = evaluate_game_state(board, Color.BLACK)
    assert evaluation.in_check
    assert not evaluation.checkmated
    assert not evaluation.stalemated


def test_evaluate_checkmate() -> None:
    """Chariot on the general's file, the other palace file is covered by the red general."""
    board = make_board({(3, 0): "k", (3, 5): "R", (4, 9): "K", (8, 0): "p"})
    # black still has a soldier, but no move of it resolves the check
    assert not has_any_legal_move(board, Color.BLACK)

    evaluation = evaluate_game_state(board, Color.BLACK)
    assert evaluation.in_check
    assert evaluation.checkmated
    assert not evaluation.stalemated


def test_evaluate_stalemate() -> None:
    board = make_board({(3, 0): "k", (0, 1): "R", (4, 9): "K"})
    evaluation = evaluate_game_state(board, Color.BLACK)
    assert not evaluation.in_check
    assert not evaluation.checkmated
    assert evaluation.stalemated


def test_checkmate_and_stalemate_never_both() -> None:
    for placement in [
        {(3, 0): "k", (3, 5): "R", (4, 9): "K"},
        {(3, 0): "k", (0, 1): "R", (4, 9): "K"},
        {(4, 0): "k", (4, 9): "K", (4, 5): "P"},
    ]:
        evaluation = evaluate_game_state(make_board(placement), Color.BLACK)
        assert not (evaluation.checkmated and evaluation.stalemated)
