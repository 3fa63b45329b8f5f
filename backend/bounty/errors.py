"""Typed failures raised by the services.

`bounty.actions` turns every one of these into a failed Result; nothing in
this taxonomy escapes the action layer.
"""


class GameError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    """Malformed or out-of-range input."""

    kind = "validation"


class StateConflictError(GameError):
    """Operation illegal for the entity's current state."""

    kind = "state_conflict"


class NotFoundError(GameError):
    """Referenced entity does not exist."""

    kind = "not_found"


class ConcurrencyError(GameError):
    """State changed between the offer and the write."""

    kind = "concurrency"
