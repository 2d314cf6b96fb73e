"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the pseudo-legal destinations for each piece type.

Whether a move leaves your own general in check is decided later (see legality.py).
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import PALACE_FILES, RIVER_RANK, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    @property
    def pieces(self) -> tuple[Piece, ...]: ...
    def piece_at(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

ORTHOGONALS: list[Vector] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]


@dataclass(frozen=True)
class Move:
    """
    A move as it is recorded in the history of a game.

    The captured piece is identified by id (not by square), so a move can be replayed on a bare list of pieces.
    `notation` is only meant for display.
    """

    piece_id: str
    from_square: Square
    to_square: Square
    captured_piece_id: Optional[str] = None
    timestamp: int = 0
    notation: str = ""


# --- BOARD GEOMETRY ---
def is_in_palace(square: Square, color: Color) -> bool:
    """Palace: files 3-5, the three ranks nearest to the side's own edge."""
    palace_ranks = range(7, 10) if color == Color.RED else range(0, 3)
    return square.file in PALACE_FILES and square.rank in palace_ranks


def is_own_half(square: Square, color: Color) -> bool:
    """Red's half is rank 5-9, Black's half is rank 0-4."""
    return square.rank >= RIVER_RANK if color == Color.RED else square.rank < RIVER_RANK


def forward(color: Color) -> int:
    """Red moves UP the board (towards rank 0), Black moves DOWN"""
    return -1 if color == Color.RED else 1


def _can_land(piece: Piece, square: Square, board: Board) -> bool:
    """On the board and not taken by a piece of your own."""
    if not square.is_within_bounds():
        return False
    occupant = board.piece_at(square)
    return occupant is None or occupant.color != piece.color


# --- MOVEMENT RULES ---
def raycasting_move(piece: Piece, board: Board, directions: list[Vector]) -> list[Square]:
    """
    Raycasting algorithm
    -----

    Move along each direction until we hit another piece or the edge of the board.
    The first occupied square is only added if it holds an opponent's piece (capture).
    """
    squares: list[Square] = []
    for df, dr in directions:
        target_square = piece.square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            occupant = board.piece_at(target_square)
            if occupant is not None:
                if occupant.color != piece.color:
                    squares.append(target_square)
                break

            squares.append(target_square)
    return squares


def single_step_move(piece: Piece, board: Board, deltas: list[Vector]) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for pieces that jump straight to their target."""
    return [
        piece.square.offset(df, dr)
        for df, dr in deltas
        if _can_land(piece, piece.square.offset(df, dr), board)
    ]


def candidate_general_moves(piece: Piece, board: Board) -> list[Square]:
    """One orthogonal step, never leaving the palace."""
    return [
        square
        for square in single_step_move(piece, board, ORTHOGONALS)
        if is_in_palace(square, piece.color)
    ]


def candidate_advisor_moves(piece: Piece, board: Board) -> list[Square]:
    """One diagonal step, never leaving the palace."""
    return [
        square
        for square in single_step_move(piece, board, DIAGONALS)
        if is_in_palace(square, piece.color)
    ]


def candidate_elephant_moves(piece: Piece, board: Board) -> list[Square]:
    """
    Exactly two steps diagonally, staying on its own side of the river.
    Blocked when the 'eye' (the intersection halfway) is occupied, no matter by whom.
    """
    squares: list[Square] = []
    for df, dr in DIAGONALS:
        target_square = piece.square.offset(2 * df, 2 * dr)
        eye = piece.square.offset(df, dr)
        if not is_own_half(target_square, piece.color):
            continue
        if board.piece_at(eye) is not None:
            continue
        if _can_land(piece, target_square, board):
            squares.append(target_square)
    return squares


# (leg, destination): the leg is the orthogonal neighbour in the direction of the long leg of the jump
HORSE_JUMPS: list[tuple[Vector, Vector]] = [
    ((0, 1), (1, 2)),
    ((0, 1), (-1, 2)),
    ((0, -1), (1, -2)),
    ((0, -1), (-1, -2)),
    ((1, 0), (2, 1)),
    ((1, 0), (2, -1)),
    ((-1, 0), (-2, 1)),
    ((-1, 0), (-2, -1)),
]


def candidate_horse_moves(piece: Piece, board: Board) -> list[Square]:
    """Moves like the chess knight, but is 'hobbled' if the leg square is occupied."""
    squares: list[Square] = []
    for (leg_df, leg_dr), (df, dr) in HORSE_JUMPS:
        leg = piece.square.offset(leg_df, leg_dr)
        target_square = piece.square.offset(df, dr)
        if board.piece_at(leg) is not None:
            continue
        if _can_land(piece, target_square, board):
            squares.append(target_square)
    return squares


def candidate_chariot_moves(piece: Piece, board: Board) -> list[Square]:
    """Chariots move either horizontally or vertically (like a rook)"""
    return raycasting_move(piece, board, ORTHOGONALS)


def candidate_cannon_moves(piece: Piece, board: Board) -> list[Square]:
    """
    The cannon moves like a chariot, but captures by jumping over exactly one piece (the screen).

    Per direction:
    * empty squares before the screen are regular moves
    * the first occupied square is the screen (cannot be taken)
    * the next occupied square after the screen can be taken, if it is the opponent's. The ray ends there either way.
    """
    squares: list[Square] = []
    for df, dr in ORTHOGONALS:
        target_square = piece.square
        found_screen = False
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            occupant = board.piece_at(target_square)
            if not found_screen:
                if occupant is None:
                    squares.append(target_square)
                else:
                    found_screen = True
            elif occupant is not None:
                if occupant.color != piece.color:
                    squares.append(target_square)
                break
    return squares


def candidate_soldier_moves(piece: Piece, board: Board) -> list[Square]:
    """
    A soldier:
    - moves a single step forward.
    - once it crossed the river, it may also move a single step sideways.
    - never moves backwards.
    """
    deltas: list[Vector] = [(0, forward(piece.color))]
    if not is_own_half(piece.square, piece.color):
        deltas.extend([(-1, 0), (1, 0)])
    return single_step_move(piece, board, deltas)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.GENERAL: candidate_general_moves,
    PieceType.ADVISOR: candidate_advisor_moves,
    PieceType.ELEPHANT: candidate_elephant_moves,
    PieceType.HORSE: candidate_horse_moves,
    PieceType.CHARIOT: candidate_chariot_moves,
    PieceType.CANNON: candidate_cannon_moves,
    PieceType.SOLDIER: candidate_soldier_moves,
}


# --- FLYING GENERAL ---
def generals_facing(pieces: Iterable[Piece]) -> bool:
    """
    The two generals may never 'see' each other: same file, nothing in between.
    Returns False if one of the generals is missing.
    """
    pieces = list(pieces)
    generals = {
        piece.color: piece.square for piece in pieces if piece.type == PieceType.GENERAL
    }
    red = generals.get(Color.RED)
    black = generals.get(Color.BLACK)
    if red is None or black is None or red.file != black.file:
        return False

    low, high = sorted([red.rank, black.rank])
    return not any(
        piece.square.file == red.file and low < piece.square.rank < high
        for piece in pieces
    )


def simulate_move(pieces: Iterable[Piece], piece: Piece, to_square: Square) -> list[Piece]:
    """Pieces after `piece` moves to `to_square`, taking whatever stands there."""
    return [
        p.moved_to(to_square) if p.id == piece.id else p
        for p in pieces
        if p.square != to_square
    ]


def candidate_squares(piece: Piece, board: Board) -> list[Square]:
    """
    Pseudo-legal destinations of a single piece.

    Uses the movement rule of its type, then drops every destination that would leave the generals facing each other.
    """
    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
    return [
        square
        for square in movement_rule(piece, board)
        if not generals_facing(simulate_move(board.pieces, piece, square))
    ]
