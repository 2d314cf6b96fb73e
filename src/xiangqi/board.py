"""
The Board is an immutable snapshot of the pieces in play. It only answers questions about *where* pieces are,
the movement rules live in moves.py and the check logic in threats.py / legality.py.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Self

from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import BOARD_DIMENSIONS, Square

STARTING_FEN = "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR"

# Order in which the pieces of one side are created. Fixes the ids of the starting position.
_BACK_RANK: list[tuple[PieceType, int]] = [
    (PieceType.CHARIOT, 0),
    (PieceType.HORSE, 1),
    (PieceType.ELEPHANT, 2),
    (PieceType.ADVISOR, 3),
    (PieceType.GENERAL, 4),
    (PieceType.ADVISOR, 5),
    (PieceType.ELEPHANT, 6),
    (PieceType.HORSE, 7),
    (PieceType.CHARIOT, 8),
]
_CANNON_FILES = [1, 7]
_SOLDIER_FILES = [0, 2, 4, 6, 8]

# (back rank, cannon rank, soldier rank) per side
_HOME_RANKS: dict[Color, tuple[int, int, int]] = {
    Color.BLACK: (0, 2, 3),
    Color.RED: (9, 7, 6),
}


def _piece_id(counter: int, color: Color, piece_type: PieceType) -> str:
    return f"p_{counter}_{color.name.lower()}_{piece_type.name.lower()}"


@dataclass(frozen=True, eq=False)
class Board:
    pieces: tuple[Piece, ...]
    _by_square: dict[Square, Piece] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # frozen dataclass: index is computed once per snapshot
        object.__setattr__(
            self, "_by_square", {piece.square: piece for piece in self.pieces}
        )

    def __eq__(self, other: object) -> bool:
        """Two snapshots are equal when they hold the same set of pieces (id, type, color and square), in any order."""
        if not isinstance(other, Board):
            return NotImplemented
        return frozenset(self.pieces) == frozenset(other.pieces)

    def __hash__(self) -> int:
        return hash(frozenset(self.pieces))

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Self:
        return cls(tuple(pieces))

    @classmethod
    def starting_position(cls) -> Self:
        """The canonical 32 piece layout. Black pieces are created first, then Red, each side in the same order."""
        pieces: list[Piece] = []
        counter = 0
        for color in [Color.BLACK, Color.RED]:
            back_rank, cannon_rank, soldier_rank = _HOME_RANKS[color]
            placements = (
                [(piece_type, Square(file, back_rank)) for piece_type, file in _BACK_RANK]
                + [(PieceType.CANNON, Square(file, cannon_rank)) for file in _CANNON_FILES]
                + [(PieceType.SOLDIER, Square(file, soldier_rank)) for file in _SOLDIER_FILES]
            )
            for piece_type, square in placements:
                pieces.append(
                    Piece(_piece_id(counter, color, piece_type), piece_type, color, square)
                )
                counter += 1
        return cls(tuple(pieces))

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board from the placement field of a Xiangqi FEN string.

        ex. standard starting position:
        rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR
        means:
        * the first group is rank 0 (Black's back rank), the last group is rank 9 (Red's back rank)
        * lower case letters are Black pieces, capital letters are Red pieces
        * a number denotes that many consecutive empty intersections

        Pieces get ids in reading order: '<color>_<type>_<n>'.
        """
        pieces: list[Piece] = []
        for rank, fen_one_rank in enumerate(fen_str.split("/")):
            file = 0
            for character in fen_one_rank:
                if character.isalpha():
                    color = "red" if character.isupper() else "black"
                    piece_id = f"{color}_{character.lower()}_{len(pieces)}"
                    pieces.append(Piece.from_fen(character, piece_id, Square(file, rank)))
                    file += 1
                else:
                    file += int(character)
        return cls(tuple(pieces))

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1]))

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece_at(Square(file, rank))
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self._by_square.get(square)

    def is_occupied(self, square: Square) -> bool:
        return square in self._by_square

    def piece_by_id(self, piece_id: str) -> Optional[Piece]:
        return next((piece for piece in self.pieces if piece.id == piece_id), None)

    def pieces_of(self, color: Color) -> list[Piece]:
        return [piece for piece in self.pieces if piece.color == color]

    def find_general(self, color: Color) -> Optional[Piece]:
        return next(
            (
                piece
                for piece in self.pieces
                if piece.type == PieceType.GENERAL and piece.color == color
            ),
            None,
        )

    def apply_move(self, move: Move) -> "Board":
        """
        Mechanical update of the snapshot: drop the captured piece (if any) and relocate the moving piece.

        NOTE: No rule checking at all. Illegal moves are just as applicable, rejecting them is up to the caller.
        """
        return Board(
            tuple(
                piece.moved_to(move.to_square) if piece.id == move.piece_id else piece
                for piece in self.pieces
                if piece.id != move.captured_piece_id
            )
        )

