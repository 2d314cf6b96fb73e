"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

from uuid import UUID

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
    MoveRecordResponse,
    MoveRequest,
    MoveResponse,
    PieceResponse,
    ReplayRequest,
    ReplayResponse,
)
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel, PieceModel
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.xiangqi.game import Game, MoveOutcome, Rejection, piece_to_model
from src.xiangqi.notation import describe_position, last_move_notation
from src.xiangqi.replay import board_at_ply
from src.xiangqi.square import Square


class XiangqiService:
    """Orchestration of layers for a Xiangqi game."""

    def __init__(self, repository: GameRepository, history_limit: int = 200) -> None:
        self.repo = repository
        self.history_limit = history_limit

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """A player (or an anonymous client) requested a new game."""

        new_game = Game.new_game(
            name=request.name,
            player=request.player_name,
            color=request.color.value if request.color else None,
        )
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""

        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)
        game.register_player(request.player_name)

        with_player_registered = game.to_model()
        self.repo.update_game(
            request.game_id, with_player_registered, expected_move_count=len(stored_model.moves)
        )
        return self._create_game_response(request.game_id, with_player_registered)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def current_game(self) -> GameResponse | None:
        """The most recently updated game that is still being played (if any)."""
        found = self.repo.latest_active_game()
        if found is None:
            return None
        game_id, game_model = found
        return self._create_game_response(game_id, game_model)

    def game_history(self, limit: int) -> list[GameResponse]:
        """Finished games, most recent first."""
        limit = max(1, min(limit, self.history_limit))
        return [
            self._create_game_response(game_id, game_model)
            for game_id, game_model in self.repo.finished_games(limit)
        ]

    def game_stats(self) -> GameStatsResponse:
        stats = self.repo.game_stats()
        return GameStatsResponse(
            games_played=stats.games_played,
            red_wins=stats.red_wins,
            black_wins=stats.black_wins,
            draws=stats.draws,
            unfinished=stats.unfinished,
        )

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the squares a piece may move to."""

        game = Game.from_model(self._fetch_game(request.game_id))
        destinations = game.legal_moves(request.piece_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            piece_id=request.piece_id,
            legal_moves=[square.to_iccs() for square in destinations],
        )

    def all_legal_moves(self, request: GetGameRequest) -> AllLegalMovesResponse:
        """Every movable piece of the side to move, keyed by piece id."""
        game = Game.from_model(self._fetch_game(request.game_id))
        moves_by_piece = game.all_legal_moves()
        return AllLegalMovesResponse(
            game_id=request.game_id,
            turn=Color(game.turn.name.lower()),
            legal_moves={
                piece_id: [square.to_iccs() for square in destinations]
                for piece_id, destinations in moves_by_piece.items()
            },
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.

        The game is read once, the move is validated against that snapshot, and the write only succeeds if nobody
        else committed a move in between (see `GameRepository.update_game`).
        """
        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)

        outcome = game.play(
            piece_id=request.piece_id,
            to_square=Square.from_iccs(request.to_square),
            player=request.player_name,
        )
        if not outcome.accepted:
            self._raise_rejection(outcome)

        after_move = game.to_model()
        self.repo.update_game(
            request.game_id, after_move, expected_move_count=len(stored_model.moves)
        )

        evaluation = outcome.evaluation
        return MoveResponse(
            game=self._create_game_response(request.game_id, after_move),
            in_check=evaluation.in_check if evaluation else False,
        )

    def evaluate(self, request: GetGameRequest) -> EvaluationResponse:
        """Check / checkmate / stalemate flags for the side to move."""
        game = Game.from_model(self._fetch_game(request.game_id))
        evaluation = game.evaluate()
        return EvaluationResponse(
            game_id=request.game_id,
            turn=Color(game.turn.name.lower()),
            in_check=evaluation.in_check,
            checkmated=evaluation.checkmated,
            stalemated=evaluation.stalemated,
        )

    def replay(self, request: ReplayRequest) -> ReplayResponse:
        """Position after the first `ply` moves, recomputed from the move history."""
        game = Game.from_model(self._fetch_game(request.game_id))
        ply = max(0, min(request.ply, len(game.moves)))
        board = board_at_ply(game.moves, ply)
        return ReplayResponse(
            game_id=request.game_id,
            ply=ply,
            total_plies=len(game.moves),
            fen=board.to_fen(),
            pieces=self._piece_responses([piece_to_model(piece) for piece in board.pieces]),
        )

    def describe(self, request: GetGameRequest) -> DescriptionResponse:
        """Read-only text for the commentary collaborator."""
        game = Game.from_model(self._fetch_game(request.game_id))
        return DescriptionResponse(
            game_id=request.game_id,
            description=describe_position(game.board, game.turn),
            last_move=last_move_notation(game.moves),
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _raise_rejection(self, outcome: MoveOutcome) -> None:
        """Rejections are plain values in the domain. At this boundary they become the exceptions the API layer maps."""
        match outcome.rejection:
            case Rejection.OUT_OF_TURN:
                raise NotYourTurnError(outcome.message)
            case Rejection.GAME_FINISHED:
                raise GameStateError(outcome.message)
            case _:
                raise IllegalMoveError(outcome.message)

    def _piece_responses(self, pieces: list[PieceModel]) -> list[PieceResponse]:
        return [
            PieceResponse(
                id=piece.id,
                type=piece.type,
                color=piece.color,
                file=piece.file,
                rank=piece.rank,
                square=Square(piece.file, piece.rank).to_iccs(),
            )
            for piece in pieces
        ]

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            name=model.name,
            status=model.status,
            turn=model.turn,
            winner=model.winner,
            result_reason=model.result_reason,
            players=model.registered_players,
            pieces=self._piece_responses(model.pieces),
            moves=[
                MoveRecordResponse(
                    piece_id=move.piece_id,
                    from_square=Square(move.from_file, move.from_rank).to_iccs(),
                    to_square=Square(move.to_file, move.to_rank).to_iccs(),
                    captured_piece_id=move.captured_piece_id,
                    timestamp=move.timestamp,
                    notation=move.notation,
                )
                for move in model.moves
            ],
            start_time=model.start_time,
            last_updated=model.last_updated,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
