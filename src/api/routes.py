"""HTTP routes. Thin layer: parse the request, call the service, let the exception handlers deal with failures."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from src.api.models import (
    AllLegalMovesResponse,
    CreateGameRequest,
    DeleteGameRequest,
    DescriptionResponse,
    EvaluationResponse,
    GameResponse,
    GameStatsResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    ReplayRequest,
    ReplayResponse,
)
from src.core.config import get_settings
from src.db.database import get_db
from src.db.sql_repository import SQLGameRepository
from src.services.xiangqi_service import XiangqiService

router = APIRouter(prefix="/api")


def get_service(db: Annotated[Session, Depends(get_db)]) -> XiangqiService:
    return XiangqiService(SQLGameRepository(db), history_limit=get_settings().history_limit)


Service = Annotated[XiangqiService, Depends(get_service)]


# --- Bodies for routes that take the game id from the path ---
class JoinBody(BaseModel):
    player_name: str


class LegalMovesBody(BaseModel):
    piece_id: str


class MoveBody(BaseModel):
    piece_id: str
    to_square: str
    player_name: Optional[str] = None


class CurrentGameResponse(BaseModel):
    game: Optional[GameResponse]


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/games", status_code=status.HTTP_201_CREATED)
def create_game(request: CreateGameRequest, service: Service) -> GameResponse:
    return service.create_new_game(request)


@router.get("/games/current")
def current_game(service: Service) -> CurrentGameResponse:
    return CurrentGameResponse(game=service.current_game())


@router.get("/games/history")
def game_history(service: Service, limit: Annotated[int, Query(ge=1)] = 50) -> list[GameResponse]:
    return service.game_history(limit)


@router.get("/games/stats")
def game_stats(service: Service) -> GameStatsResponse:
    return service.game_stats()


@router.get("/games/{game_id}")
def get_game(game_id: UUID, service: Service) -> GameResponse:
    return service.get_game_state(GetGameRequest(game_id=game_id))


@router.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(game_id: UUID, service: Service) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))


@router.post("/games/{game_id}/join")
def join_game(game_id: UUID, body: JoinBody, service: Service) -> GameResponse:
    return service.join_game(JoinGameRequest(game_id=game_id, player_name=body.player_name))


@router.get("/games/{game_id}/legal-moves")
def all_legal_moves(game_id: UUID, service: Service) -> AllLegalMovesResponse:
    return service.all_legal_moves(GetGameRequest(game_id=game_id))


@router.post("/games/{game_id}/legal-moves")
def legal_moves(game_id: UUID, body: LegalMovesBody, service: Service) -> LegalMovesResponse:
    return service.legal_moves(LegalMovesRequest(game_id=game_id, piece_id=body.piece_id))


@router.post("/games/{game_id}/moves")
def make_move(game_id: UUID, body: MoveBody, service: Service) -> MoveResponse:
    request = MoveRequest(
        game_id=game_id,
        piece_id=body.piece_id,
        to_square=body.to_square,
        player_name=body.player_name,
    )
    return service.make_move(request)


@router.get("/games/{game_id}/state")
def game_state(game_id: UUID, service: Service) -> EvaluationResponse:
    return service.evaluate(GetGameRequest(game_id=game_id))


@router.get("/games/{game_id}/replay")
def replay(game_id: UUID, service: Service, ply: Annotated[int, Query(ge=0)] = 0) -> ReplayResponse:
    return service.replay(ReplayRequest(game_id=game_id, ply=ply))


@router.get("/games/{game_id}/description")
def description(game_id: UUID, service: Service) -> DescriptionResponse:
    return service.describe(GetGameRequest(game_id=game_id))
