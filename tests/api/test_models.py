from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import CreateGameRequest, MoveRequest, PieceResponse
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_create_request_fields_are_optional() -> None:
    request = CreateGameRequest()
    assert request.name is None
    assert request.player_name is None
    assert request.color is None


def test_create_request_color() -> None:
    request = CreateGameRequest(player_name="don't hate the player, hate the name.", color="black")
    assert request.color == Color.BLACK


def test_create_request_unknown_color() -> None:
    with pytest.raises(ValidationError):
        _ = CreateGameRequest(player_name="player", color="white")


# -- Validation - MoveRequest --
@pytest.mark.parametrize("square", ["a0", "e2", "i9", "b7"])
def test_valid_square(mock_id: UUID, square: str) -> None:
    request = MoveRequest(game_id=mock_id, piece_id="p_25_red_cannon", to_square=square)
    assert request.to_square == square
    assert request.player_name is None


def test_square_is_lower_cased(mock_id: UUID) -> None:
    request = MoveRequest(game_id=mock_id, piece_id="p_25_red_cannon", to_square="E2")
    assert request.to_square == "e2"


@pytest.mark.parametrize(
    "invalid_square",
    [
        "j0",  # files only go up to 'i'
        "e10",  # ranks only go up to 9
        "e",
        "",
        "2e",
        "e2e4",
    ],
)
def test_invalid_square(mock_id: UUID, invalid_square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, piece_id="p_25_red_cannon", to_square=invalid_square)


# -- Response models --
def test_piece_response_from_strings() -> None:
    """Pieces leave the service as plain strings, the response model turns them into the shared enums."""
    response = PieceResponse(id="p_20_red_general", type="general", color="red", file=4, rank=9, square="e0")
    assert response.type == PieceType.GENERAL
    assert response.color == Color.RED
