"""
The Game class is the entrypoint into the domain layer for the service layer.
It owns the lifecycle of a single session (active --> finished) and is the only place where moves get accepted:
validate --> apply --> detect the end of the game --> pass the new state back to the service layer.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Optional, Self, TypeVar

from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.models import GameModel, MoveModel, PieceModel
from src.xiangqi.board import Board
from src.xiangqi.legality import (
    GameStateEvaluation,
    all_legal_moves,
    build_move,
    evaluate_game_state,
    legal_moves,
)
from src.xiangqi.moves import Move, candidate_squares
from src.xiangqi.pieces import AVAILABLE_COLOR_NAMES, Color, Piece, PieceType
from src.xiangqi.replay import apply_move, matches_history
from src.xiangqi.square import Square
from src.xiangqi.threats import is_in_check

logger = logging.getLogger(__name__)


class Status(Enum):
    ACTIVE = auto()
    FINISHED = auto()


class Winner(Enum):
    RED = auto()
    BLACK = auto()
    DRAW = auto()

    @classmethod
    def from_color(cls, color: Color) -> "Winner":
        return cls[color.name]


class ResultReason(Enum):
    CAPTURE = "capture"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_AGREED = "draw-agreed"
    RESIGN = "resign"


class Rejection(Enum):
    """Why a submitted move was refused. The game state is left untouched in every case."""

    GAME_FINISHED = auto()
    OUT_OF_TURN = auto()
    UNKNOWN_PIECE = auto()
    ILLEGAL_DESTINATION = auto()
    SELF_CHECK_REMAINING = auto()


@dataclass(frozen=True)
class MoveOutcome:
    """Result of `Game.submit_move()`. Rejections are returned, not raised, so the caller decides how to report them."""

    accepted: bool
    rejection: Optional[Rejection] = None
    message: str = ""
    evaluation: Optional[GameStateEvaluation] = None

    @classmethod
    def rejected(cls, rejection: Rejection, message: str) -> Self:
        return cls(accepted=False, rejection=rejection, message=message)


def now_ms() -> int:
    return int(time.time() * 1000)


def default_game_name() -> str:
    return f"Game {datetime.now(timezone.utc):%Y-%m-%d %H:%M}"


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    moves: list[Move]
    turn: Color
    status: Status
    name: str
    start_time: int
    last_updated: int
    players: dict[Color, str] = field(default_factory=dict)
    winner: Optional[Winner] = None
    result_reason: Optional[ResultReason] = None

    @classmethod
    def new_game(
        cls,
        name: Optional[str] = None,
        player: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Self:
        """Canonical starting position, Red to move. Optionally seat the creating player on the requested color."""
        players: dict[Color, str] = {}
        if player is not None:
            color_name = (color or Color.RED.name).upper()
            if color_name not in AVAILABLE_COLOR_NAMES:
                raise GameStateError(
                    f"Cannot create new game. Color {color} not in {','.join([c.lower() for c in AVAILABLE_COLOR_NAMES])}."
                )
            players[Color[color_name]] = player

        created = now_ms()
        return cls(
            board=Board.starting_position(),
            moves=[],
            turn=Color.RED,
            status=Status.ACTIVE,
            name=name or default_game_name(),
            start_time=created,
            last_updated=created,
            players=players,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Define how to construct a Game from the information the Service layer actually has.

        The stored pieces are not trusted blindly: they must be exactly what replaying the stored moves produces.
        """
        status = _parse_enum(Status, model.status, "status")
        turn = _parse_enum(Color, model.turn, "turn")
        board = Board.from_pieces(_piece_from_model(piece) for piece in model.pieces)
        moves = [_move_from_model(move) for move in model.moves]

        if not matches_history(board, moves):
            logger.warning(
                "Stored position of game %r does not match its %d moves.", model.name, len(moves)
            )
            raise GameStateError("Stored position does not match the move history.")

        expected_turn = Color.RED if len(moves) % 2 == 0 else Color.BLACK
        if turn != expected_turn:
            raise GameStateError(
                f"Stored turn {model.turn!r} does not match the number of moves played ({len(moves)})."
            )

        winner = _parse_enum(Winner, model.winner, "winner") if model.winner else None
        result_reason = (
            _parse_enum(ResultReason, model.result_reason, "result reason")
            if model.result_reason
            else None
        )
        if (status == Status.FINISHED) != (winner is not None):
            raise GameStateError("A winner must be recorded if and only if the game is finished.")

        players = {
            color: model.registered_players[color.name.lower()]
            for color in Color
            if color.name.lower() in model.registered_players
        }
        return cls(
            board=board,
            moves=moves,
            turn=turn,
            status=status,
            name=model.name,
            start_time=model.start_time,
            last_updated=model.last_updated,
            players=players,
            winner=winner,
            result_reason=result_reason,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            name=self.name,
            status=self.status.name.lower(),
            turn=self.turn.name.lower(),
            pieces=[piece_to_model(piece) for piece in self.board.pieces],
            moves=[_move_to_model(move) for move in self.moves],
            start_time=self.start_time,
            last_updated=self.last_updated,
            registered_players={
                color.name.lower(): player for color, player in self.players.items()
            },
            winner=self.winner.name.lower() if self.winner else None,
            result_reason=self.result_reason.value if self.result_reason else None,
        )

    @property
    def is_finished(self) -> bool:
        return self.status == Status.FINISHED

    def register_player(self, player: str) -> Color:
        """Seat a player on the color that is still free (Red first)."""
        if player in self.players.values():
            raise GameStateError(f"Player {player!r} already joined this game.")

        free_colors = [color for color in Color if color not in self.players]
        if not free_colors:
            raise GameStateError("Cannot join this game. Both colors are taken.")

        color = free_colors[0]
        self.players[color] = player
        logger.info("Player %r joined as %s.", player, color.name.lower())
        return color

    def player_color(self, player: str) -> Optional[Color]:
        return next((color for color, name in self.players.items() if name == player), None)

    def legal_moves(self, piece_id: str) -> list[Square]:
        """Destinations to highlight for one piece. Works for either side, so a player can inspect the opponent's options."""
        if self.is_finished:
            raise GameStateError("Game is finished. No more moves can be made.")

        piece = self.board.piece_by_id(piece_id)
        if piece is None:
            raise IllegalMoveError(f"No piece with id {piece_id!r} on the board.")
        return legal_moves(piece, self.board)

    def all_legal_moves(self) -> dict[str, list[Square]]:
        """Every piece of the side to move that has somewhere to go, with its destinations."""
        if self.is_finished:
            raise GameStateError("Game is finished. No more moves can be made.")
        return all_legal_moves(self.board, self.turn)

    def evaluate(self) -> GameStateEvaluation:
        """Check / mate / stalemate status of the side to move."""
        return evaluate_game_state(self.board, self.turn)

    def play(
        self,
        piece_id: str,
        to_square: Square,
        player: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> MoveOutcome:
        """Build the Move record (capture + notation) from the current board and submit it."""
        piece = self.board.piece_by_id(piece_id)
        if piece is None:
            return MoveOutcome.rejected(
                Rejection.UNKNOWN_PIECE, f"No piece with id {piece_id!r} on the board."
            )
        move = build_move(
            self.board, piece, to_square, timestamp if timestamp is not None else now_ms()
        )
        return self.submit_move(move, player)

    def submit_move(self, move: Move, player: Optional[str] = None) -> MoveOutcome:
        """
        Attempt to make a move
        -----

        1. game must still be active, it must be the mover's turn
        2. the destination must be one the piece can reach (and the recorded capture must match the board)
        3. apply the move to a new snapshot
        4. the mover's own general may not be left in check
        5. general taken --> game over (capture), no need to look any further
        6. otherwise: switch turns and look for checkmate / stalemate of the opponent
        """
        rejection = self._validate(move, player)
        if rejection is not None:
            logger.info("Move %s rejected: %s", move.notation or move.piece_id, rejection.message)
            return rejection

        new_board = apply_move(self.board, move)
        if is_in_check(new_board, self.turn):
            outcome = MoveOutcome.rejected(
                Rejection.SELF_CHECK_REMAINING,
                "Move leaves your own general in check.",
            )
            logger.info("Move %s rejected: %s", move.notation or move.piece_id, outcome.message)
            return outcome

        mover = self.turn
        self._commit(new_board, move)

        if any(new_board.find_general(color) is None for color in Color):
            self._finish(Winner.from_color(mover), ResultReason.CAPTURE)
            return MoveOutcome(accepted=True)

        evaluation = evaluate_game_state(new_board, self.turn)
        if evaluation.checkmated:
            self._finish(Winner.from_color(mover), ResultReason.CHECKMATE)
        elif evaluation.stalemated:
            self._finish(Winner.DRAW, ResultReason.STALEMATE)
        elif evaluation.in_check:
            logger.info("%s is in check.", self.turn.name.capitalize())
        return MoveOutcome(accepted=True, evaluation=evaluation)

    # -- PRIVATE HELPERS ---
    def _validate(self, move: Move, player: Optional[str]) -> Optional[MoveOutcome]:
        if self.is_finished:
            return MoveOutcome.rejected(
                Rejection.GAME_FINISHED, "Game is finished. Start a new game to keep playing."
            )

        if player is not None and self.players and self.player_color(player) != self.turn:
            return MoveOutcome.rejected(
                Rejection.OUT_OF_TURN,
                f"It is not your turn. Waiting for {self.turn.name.lower()} to move.",
            )

        piece = self.board.piece_by_id(move.piece_id)
        if piece is None:
            return MoveOutcome.rejected(
                Rejection.UNKNOWN_PIECE, f"No piece with id {move.piece_id!r} on the board."
            )
        if piece.color != self.turn:
            return MoveOutcome.rejected(
                Rejection.OUT_OF_TURN,
                f"Cannot move a {piece.color.name.lower()} piece on {self.turn.name.lower()}'s turn.",
            )

        if piece.square != move.from_square or move.to_square not in candidate_squares(piece, self.board):
            return MoveOutcome.rejected(
                Rejection.ILLEGAL_DESTINATION,
                f"{_describe(piece)} cannot move to {move.to_square.to_iccs()}.",
            )

        occupant = self.board.piece_at(move.to_square)
        occupant_id = occupant.id if occupant is not None else None
        if move.captured_piece_id != occupant_id:
            return MoveOutcome.rejected(
                Rejection.ILLEGAL_DESTINATION,
                "Recorded capture does not match the piece on the target square.",
            )
        return None

    def _commit(self, new_board: Board, move: Move) -> None:
        """Every accepted move is recorded, including the one that ends the game, so board == replay(moves) always holds."""
        self.board = new_board
        self.moves.append(move)
        self.turn = self.turn.opponent()
        self.last_updated = now_ms()
        logger.info("Move %d accepted: %s", len(self.moves), move.notation or move.piece_id)

    def _finish(self, winner: Winner, reason: ResultReason) -> None:
        self.status = Status.FINISHED
        self.winner = winner
        self.result_reason = reason
        logger.info("Game %r finished: %s (%s).", self.name, winner.name.lower(), reason.value)


# --- CONVERSION HELPERS (Domain <--> GameModel) ---
E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: type[E], value: str, field_name: str) -> E:
    name = value.replace(" ", "_").replace("-", "_").upper()
    if name not in enum_cls.__members__:
        raise GameStateError(
            f"Invalid {field_name}: {value!r}. \nPick one from {','.join([member.name.lower() for member in enum_cls])}"
        )
    return enum_cls[name]


def _describe(piece: Piece) -> str:
    return f"{piece.color.name.capitalize()} {piece.type.name.lower()}"


def _piece_from_model(model: PieceModel) -> Piece:
    return Piece(
        id=model.id,
        type=_parse_enum(PieceType, model.type, "piece type"),
        color=_parse_enum(Color, model.color, "color"),
        square=Square(model.file, model.rank),
    )


def piece_to_model(piece: Piece) -> PieceModel:
    return PieceModel(
        id=piece.id,
        type=piece.type.name.lower(),
        color=piece.color.name.lower(),
        file=piece.square.file,
        rank=piece.square.rank,
    )


def _move_from_model(model: MoveModel) -> Move:
    return Move(
        piece_id=model.piece_id,
        from_square=Square(model.from_file, model.from_rank),
        to_square=Square(model.to_file, model.to_rank),
        captured_piece_id=model.captured_piece_id,
        timestamp=model.timestamp,
        notation=model.notation,
    )


def _move_to_model(move: Move) -> MoveModel:
    return MoveModel(
        piece_id=move.piece_id,
        from_file=move.from_square.file,
        from_rank=move.from_square.rank,
        to_file=move.to_square.file,
        to_rank=move.to_square.rank,
        captured_piece_id=move.captured_piece_id,
        timestamp=move.timestamp,
        notation=move.notation,
    )
