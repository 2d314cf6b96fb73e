"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, ResultReason, Status

PieceColor = str
PlayerName = str


def _is_iccs_notation(value: str) -> bool:
    """'a0' - 'i9': file letter followed by a rank digit"""
    if len(value) != 2:
        return False
    return value[0].lower() in "abcdefghi" and value[1].isdigit()


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    name: Optional[str] = None
    player_name: Optional[str] = None
    color: Optional[Color] = None


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class LegalMovesRequest(BaseModel):
    game_id: UUID
    piece_id: str


class MoveRequest(BaseModel):
    game_id: UUID
    piece_id: str
    to_square: str
    player_name: Optional[str] = None

    @field_validator("to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_iccs_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret to_square: {value!r} as a valid square name."
            )
        return value.lower()


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class ReplayRequest(BaseModel):
    game_id: UUID
    ply: int


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    id: str
    type: PieceType
    color: Color
    file: int
    rank: int
    square: str


class MoveRecordResponse(BaseModel):
    piece_id: str
    from_square: str
    to_square: str
    captured_piece_id: Optional[str]
    timestamp: int
    notation: str


class GameResponse(BaseModel):
    game_id: UUID
    name: str
    status: Status
    turn: Color
    winner: Optional[str]
    result_reason: Optional[ResultReason]
    players: dict[PieceColor, PlayerName]
    pieces: list[PieceResponse]
    moves: list[MoveRecordResponse]
    start_time: int
    last_updated: int


class MoveResponse(BaseModel):
    game: GameResponse
    in_check: bool


class LegalMovesResponse(BaseModel):
    game_id: UUID
    piece_id: str
    legal_moves: list[str]


class AllLegalMovesResponse(BaseModel):
    game_id: UUID
    turn: Color
    legal_moves: dict[str, list[str]]


class EvaluationResponse(BaseModel):
    game_id: UUID
    turn: Color
    in_check: bool
    checkmated: bool
    stalemated: bool


class ReplayResponse(BaseModel):
    game_id: UUID
    ply: int
    total_plies: int
    fen: str
    pieces: list[PieceResponse]


class DescriptionResponse(BaseModel):
    game_id: UUID
    description: str
    last_move: Optional[str]


class GameStatsResponse(BaseModel):
    games_played: int
    red_wins: int
    black_wins: int
    draws: int
    unfinished: int
