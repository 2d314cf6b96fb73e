"""Defines the types of Xiangqi pieces"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Self

from src.xiangqi.square import Square


class PieceType(Enum):
    GENERAL = auto()
    ADVISOR = auto()
    ELEPHANT = auto()
    HORSE = auto()
    CHARIOT = auto()
    CANNON = auto()
    SOLDIER = auto()


class Color(Enum):
    RED = auto()
    BLACK = auto()

    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.RED else Color.RED


AVAILABLE_COLOR_NAMES = [color.name for color in Color]

# FEN letters as used by most Xiangqi software. Upper case: Red, lower case: Black
FEN_TO_PIECE: dict[str, PieceType] = {
    "k": PieceType.GENERAL,
    "a": PieceType.ADVISOR,
    "b": PieceType.ELEPHANT,
    "n": PieceType.HORSE,
    "r": PieceType.CHARIOT,
    "c": PieceType.CANNON,
    "p": PieceType.SOLDIER,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


@dataclass(frozen=True)
class Piece:
    """
    A piece keeps its id for its whole lifetime. Moving it creates a new (frozen) Piece with the same id,
    so snapshots of the board never share mutable state.
    """

    id: str
    type: PieceType
    color: Color
    square: Square

    @classmethod
    def from_fen(cls, character: str, piece_id: str, square: Square) -> Self:
        color = Color.RED if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_id, piece_type, color, square)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.RED
            else PIECE_TO_FEN[self.type].lower()
        )

    def moved_to(self, square: Square) -> Self:
        return replace(self, square=square)
