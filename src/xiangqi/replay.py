"""
Rebuilding positions from the move history.

A game only needs to store its list of moves: any position in it can be recomputed by replaying a prefix of that list
from the starting position. The server uses the same function to verify stored positions.
"""

from typing import Sequence

from src.xiangqi.board import Board
from src.xiangqi.moves import Move


def apply_move(board: Board, move: Move) -> Board:
    """Pure: returns a new snapshot and leaves `board` untouched. Performs no legality checks."""
    return board.apply_move(move)


def reconstruct_board(moves: Sequence[Move]) -> Board:
    board = Board.starting_position()
    for move in moves:
        board = apply_move(board, move)
    return board


def board_at_ply(moves: Sequence[Move], ply: int) -> Board:
    """Position after the first `ply` moves. `ply` is clamped to the length of the history."""
    ply = max(0, min(ply, len(moves)))
    return reconstruct_board(moves[:ply])


def matches_history(board: Board, moves: Sequence[Move]) -> bool:
    """Does the snapshot hold exactly the pieces the history produces (compared by id, type, color and square)?"""
    return board == reconstruct_board(moves)
