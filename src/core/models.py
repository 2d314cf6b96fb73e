"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str


@dataclass
class PieceModel:
    id: str
    type: str
    color: str
    file: int
    rank: int


@dataclass
class MoveModel:
    piece_id: str
    from_file: int
    from_rank: int
    to_file: int
    to_rank: int
    captured_piece_id: Optional[str]
    timestamp: int
    notation: str


@dataclass
class GameModel:
    """Transport-safe representation of a Xiangqi game used between API, Service, DB, and Game layers."""

    name: str
    status: str
    turn: str
    pieces: list[PieceModel]
    moves: list[MoveModel]
    start_time: int
    last_updated: int
    registered_players: dict[PieceColor, PlayerName] = field(default_factory=dict)
    winner: Optional[str] = None
    result_reason: Optional[str] = None


@dataclass
class GameStats:
    """Tally over all stored games."""

    games_played: int
    red_wins: int
    black_wins: int
    draws: int
    unfinished: int
