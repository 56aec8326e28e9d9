"""Custom exceptions, grouped per layer. Catch `GameError` to catch anything raised on purpose by this package."""


class GameError(Exception):
    """Top-level exception"""


# --- Domain layer ---
class GameStateError(GameError):
    """A game state that breaks the rules of its game type (wrong board size, etc.)"""


class MalformedStateError(GameStateError):
    """A serialized state could not be decoded into a usable game state."""


# --- Persistence layer ---
class RepositoryError(GameError):
    """The store could not find / accept the requested record."""


# --- Service layer ---
class TransportError(GameError):
    """A remote call failed. The action that triggered it can be retried by the user."""


# --- API layer ---
class InvalidRequestError(GameError):
    """Request data did not pass validation."""
