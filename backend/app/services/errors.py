"""Errors raised by the shopping-list engine.

The engine knows nothing about HTTP; the API layer maps these to
status codes.
"""


class ShoppingListError(Exception):
    """Base class for shopping-list engine errors."""


class ValidationError(ShoppingListError, ValueError):
    """Input is malformed or logically invalid (e.g. zero recipe servings)."""


class NotFoundError(ShoppingListError, LookupError):
    """A referenced resource does not exist for the requesting user."""

    def __init__(self, resource: str, ids: list[str] | None = None):
        self.resource = resource
        self.ids = list(ids or [])
        if self.ids:
            message = f"{resource} not found: {', '.join(self.ids)}"
        else:
            message = f"{resource} not found"
        super().__init__(message)
