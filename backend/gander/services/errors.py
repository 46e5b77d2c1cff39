"""Domain errors raised by services and mapped to HTTP status codes in routers.

Plain ValueError means invalid input (400).
"""


class NotFoundError(ValueError):
    """Unknown recommendation, aircraft or workflow (404)."""


class ConflictError(ValueError):
    """Transition not allowed from the current state (409)."""
