"""
A square (intersection) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Xiangqi board: 9 files x 10 ranks
BOARD_DIMENSIONS = (9, 10)

# Ranks 0-4 are Black's half, 5-9 are Red's half.
RIVER_RANK = 5
PALACE_FILES = range(3, 6)


@dataclass(frozen=True)
class Square:
    """
    file 0-8 runs left to right (seen from Red), rank 0-9 runs top to bottom.
    Rank 0 is Black's back rank and rank 9 is Red's back rank.
    """

    file: int
    rank: int

    @classmethod
    def from_iccs(cls, sq: str) -> Square:
        """
        ICCS notation: files 'a'-'i', ranks '0'-'9' counted from Red's back rank.
        'a0' is Red's left corner --> (0, 9). 'i9' is Black's far corner --> (8, 0)
        """
        file = ord(sq[0].lower()) - ord("a")
        rank = BOARD_DIMENSIONS[1] - 1 - int(sq[1])
        return cls(file, rank)

    def to_iccs(self) -> str:
        return f"{chr(self.file + ord('a'))}{BOARD_DIMENSIONS[1] - 1 - self.rank}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)
