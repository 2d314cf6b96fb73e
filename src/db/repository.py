"""Protocol repository (can implement later for SQL Alchemy / simple JSON file etc.)"""

from typing import Optional, Protocol
from uuid import UUID

from src.core.models import GameModel, GameStats


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(
        self, game_id: UUID, game: GameModel, expected_move_count: Optional[int] = None
    ) -> GameModel | None:
        """
        Add new info to existing record.

        With `expected_move_count` the write only happens if the stored game still has that many moves
        (raises StaleGameError otherwise).
        """
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...

    def latest_active_game(self) -> tuple[UUID, GameModel] | None:
        """The active game that was updated most recently."""
        ...

    def finished_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        """Finished games, most recently updated first."""
        ...

    def game_stats(self) -> GameStats:
        """Tally of results over all stored games."""
        ...
