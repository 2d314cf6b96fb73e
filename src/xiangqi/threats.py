"""
Attack / check detection.

Built directly on the move generator: a square is attacked when any opposing piece has it among its pseudo-legal destinations.
The flying general rule is an extra source of threat, since a general's own move set is a single step.
"""

import logging

from src.xiangqi.board import Board
from src.xiangqi.moves import candidate_squares, generals_facing
from src.xiangqi.pieces import Color, PieceType
from src.xiangqi.square import Square

logger = logging.getLogger(__name__)


def is_on_open_file(board: Board, a: Square, b: Square) -> bool:
    """Same file and no piece on any rank strictly between the two squares."""
    if a.file != b.file:
        return False
    low, high = sorted([a.rank, b.rank])
    return not any(board.is_occupied(Square(a.file, rank)) for rank in range(low + 1, high))


def is_square_threatened(board: Board, square: Square, defending_color: Color) -> bool:
    """Could any piece of the opponent of `defending_color` move onto `square`?"""
    for piece in board.pieces_of(defending_color.opponent()):
        if piece.type == PieceType.GENERAL and is_on_open_file(board, piece.square, square):
            return True

        if square in candidate_squares(piece, board):
            return True
    return False


def is_in_check(board: Board, color: Color) -> bool:
    """
    Is the general of `color` under attack?
    ---

    A board without that general counts as 'in check'. Normal play ends the game on the capture of a general before
    such a position gets stored, so reaching it means it was constructed by hand (or corrupted). It is treated as lost.
    """
    general = board.find_general(color)
    if general is None:
        logger.warning("No %s general on the board, treating it as in check.", color.name.lower())
        return True
    if generals_facing(board.pieces):
        return True
    return is_square_threatened(board, general.square, color)
