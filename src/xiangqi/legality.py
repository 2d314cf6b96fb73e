"""
Legal moves and the evaluation of the state of the game for the side to move.

Brute force: every candidate move is played out on a new snapshot of the board and tested for check.
At most 32 pieces on 90 intersections, once per half-move.
"""

from dataclasses import dataclass

from src.xiangqi.board import Board
from src.xiangqi.moves import Move, candidate_squares
from src.xiangqi.notation import move_notation
from src.xiangqi.pieces import Color, Piece
from src.xiangqi.square import Square
from src.xiangqi.threats import is_in_check


@dataclass(frozen=True)
class GameStateEvaluation:
    in_check: bool
    checkmated: bool
    stalemated: bool


def build_move(board: Board, piece: Piece, to_square: Square, timestamp: int = 0) -> Move:
    """Create the Move record: whatever stands on the target square is the captured piece."""
    captured = board.piece_at(to_square)
    return Move(
        piece_id=piece.id,
        from_square=piece.square,
        to_square=to_square,
        captured_piece_id=captured.id if captured is not None else None,
        timestamp=timestamp,
        notation=move_notation(piece, piece.square, to_square, captured),
    )


def _leaves_own_general_in_check(board: Board, piece: Piece, to_square: Square) -> bool:
    """
    plan:
    1. make the candidate move on a new snapshot (capture + relocation)
    2. determine if the mover's general is in check on the new board
    """
    next_board = board.apply_move(build_move(board, piece, to_square))
    return is_in_check(next_board, piece.color)


def legal_moves(piece: Piece, board: Board) -> list[Square]:
    """Pseudo-legal destinations, minus those that put (or leave) your own general in check."""
    return [
        square
        for square in candidate_squares(piece, board)
        if not _leaves_own_general_in_check(board, piece, square)
    ]


def all_legal_moves(board: Board, color: Color) -> dict[str, list[Square]]:
    """Legal destinations for every piece of `color` that has at least one."""
    moves_by_piece: dict[str, list[Square]] = {}
    for piece in board.pieces_of(color):
        squares = legal_moves(piece, board)
        if squares:
            moves_by_piece[piece.id] = squares
    return moves_by_piece


def has_any_legal_move(board: Board, color: Color) -> bool:
    return any(legal_moves(piece, board) for piece in board.pieces_of(color))


def evaluate_game_state(board: Board, color_to_move: Color) -> GameStateEvaluation:
    """
    * in check + no legal move --> checkmated
    * not in check + no legal move --> stalemated (a loss in most rule sets, recorded as a draw here)
    """
    in_check = is_in_check(board, color_to_move)
    has_moves = has_any_legal_move(board, color_to_move)
    return GameStateEvaluation(
        in_check=in_check,
        checkmated=in_check and not has_moves,
        stalemated=not in_check and not has_moves,
    )
