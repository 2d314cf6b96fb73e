"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from dataclasses import asdict
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError, StaleGameError
from src.core.models import GameModel, GameStats, MoveModel, PieceModel
from src.core.shared_types import DRAW, Color, Status
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id, **self._to_columns(game))
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.info("Created game %s (%r).", new_id, game.name)
        return self._to_model(game_db), new_id

    def update_game(
        self, game_id: UUID, game: GameModel, expected_move_count: Optional[int] = None
    ) -> GameModel | None:
        """
        Add new info to existing record.

        Compare-and-swap on `move_count`: the UPDATE only matches a row that still has the expected number of moves,
        so of two clients submitting a move for the same turn only the first one gets committed.
        """
        if not self._fetch_game(game_id):
            return None

        query = update(DBGame).where(DBGame.id == game_id)
        if expected_move_count is not None:
            query = query.where(DBGame.move_count == expected_move_count)

        result = self.db.execute(query.values(**self._to_columns(game)))
        if result.rowcount == 0:
            self.db.rollback()
            logger.info("Update of game %s lost the race (expected %s moves).", game_id, expected_move_count)
            raise StaleGameError(
                f"Game {game_id} was updated by another request. Fetch the game and try again."
            )
        self.db.commit()

        game_db = self._fetch_game(game_id)
        if game_db is None:
            raise RepositoryError(f"Game {game_id} disappeared during the update.")
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def latest_active_game(self) -> tuple[UUID, GameModel] | None:
        query = (
            select(DBGame)
            .where(DBGame.status == Status.ACTIVE)
            .order_by(DBGame.last_updated.desc())
            .limit(1)
        )
        game_db = self.db.scalar(query)
        if game_db is None:
            return None
        return game_db.id, self._to_model(game_db)

    def finished_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        query = (
            select(DBGame)
            .where(DBGame.status == Status.FINISHED)
            .order_by(DBGame.last_updated.desc())
            .limit(limit)
        )
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    def game_stats(self) -> GameStats:
        finished_by_winner: dict[Optional[str], int] = {
            winner: total
            for winner, total in self.db.execute(
                select(DBGame.winner, func.count())
                .where(DBGame.status == Status.FINISHED)
                .group_by(DBGame.winner)
            ).all()
        }
        unfinished = self.db.scalar(
            select(func.count()).select_from(DBGame).where(DBGame.status != Status.FINISHED)
        )
        return GameStats(
            games_played=sum(finished_by_winner.values()),
            red_wins=finished_by_winner.get(Color.RED, 0),
            black_wins=finished_by_winner.get(Color.BLACK, 0),
            draws=finished_by_winner.get(DRAW, 0),
            unfinished=unfinished or 0,
        )

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_columns(self, game: GameModel) -> dict:
        """Convert data transfer model to column values."""
        return dict(
            name=game.name,
            status=game.status,
            turn=game.turn,
            winner=game.winner,
            result_reason=game.result_reason,
            pieces=[asdict(piece) for piece in game.pieces],
            moves=[asdict(move) for move in game.moves],
            move_count=len(game.moves),
            registered_players=dict(game.registered_players),
            start_time=game.start_time,
            last_updated=game.last_updated,
        )

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            name=game_db.name,
            status=game_db.status,
            turn=game_db.turn,
            pieces=[PieceModel(**piece) for piece in game_db.pieces],
            moves=[MoveModel(**move) for move in game_db.moves],
            start_time=game_db.start_time,
            last_updated=game_db.last_updated,
            registered_players=game_db.registered_players,
            winner=game_db.winner,
            result_reason=game_db.result_reason,
        )
