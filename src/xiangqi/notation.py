"""Human readable text for moves and positions. Display only: nothing in the engine parses these strings back."""

from typing import Optional, Sequence

from src.xiangqi.board import Board
from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color, Piece
from src.xiangqi.square import Square


def _name(piece: Piece) -> str:
    return f"{piece.color.name.capitalize()} {piece.type.name.capitalize()}"


def move_notation(
    piece: Piece, from_square: Square, to_square: Square, captured: Optional[Piece] = None
) -> str:
    """ex) 'Red Cannon (1,7)->(4,7)' or 'Red Chariot (0,9)->(0,3) x Black Soldier'"""
    notation = (
        f"{_name(piece)} ({from_square.file},{from_square.rank})"
        f"->({to_square.file},{to_square.rank})"
    )
    if captured is not None:
        notation += f" x {_name(captured)}"
    return notation


def describe_position(board: Board, turn: Color) -> str:
    """Plain text listing of the position, as handed to the commentary service."""
    lines = [f"Current Turn: {turn.name.lower()}. Board State:"]
    lines.extend(
        f"{piece.color.name.lower()} {piece.type.name.lower()} at ({piece.square.file}, {piece.square.rank})"
        for piece in board.pieces
    )
    return "\n".join(lines)


def last_move_notation(moves: Sequence[Move]) -> Optional[str]:
    return moves[-1].notation if moves else None
