"""
Custom exceptions shared by all layers.

The API layer only needs to catch `GameError` (and its subclasses) to turn anything raised by the lower layers into a response.
"""


class GameError(Exception):
    """Top-level exception for anything that goes wrong while handling a game."""


class GameStateError(GameError):
    """The game is in a state that does not allow the requested action (or the stored state is corrupt)."""


class IllegalMoveError(GameError):
    """The move does not follow the rules of Xiangqi."""


class NotYourTurnError(GameError):
    """A player tried to act while it is the opponent's turn."""


class InvalidRequestError(GameError):
    """Request data cannot be interpreted."""


class RepositoryError(GameError):
    """Requested record could not be found / written."""


class StaleGameError(RepositoryError):
    """Another client committed a move first. Re-read the game and try again."""
