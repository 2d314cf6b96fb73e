"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    ACTIVE = "active"
    FINISHED = "finished"


class ResultReason(StrEnum):
    CAPTURE = "capture"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_AGREED = "draw-agreed"
    RESIGN = "resign"


# --- NOTE Same names as the domain enums in src/xiangqi/pieces.py. The imports show which version is used where.
class Color(StrEnum):
    RED = "red"
    BLACK = "black"


class PieceType(StrEnum):
    GENERAL = "general"
    ADVISOR = "advisor"
    ELEPHANT = "elephant"
    HORSE = "horse"
    CHARIOT = "chariot"
    CANNON = "cannon"
    SOLDIER = "soldier"


# A finished game is won by one of the colors, or drawn.
DRAW = "draw"
