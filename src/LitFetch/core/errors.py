"""Error types raised while retrieving bibliographic records."""

from __future__ import annotations


class FetcherError(RuntimeError):
    """Base error for a failed retrieval call.

    Carries a technical message for logs and a short user-facing message
    suitable for display at the CLI boundary.
    """

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message


class RetrievalError(FetcherError):
    """Transport or connectivity failure during the search or fetch call."""


class ParseError(FetcherError):
    """The network call worked but the returned payload was unreadable."""


class QuerySyntaxError(ValueError):
    """Raw query text could not be parsed into a query tree."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.position = position
