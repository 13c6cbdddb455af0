"""Exceptions raised by the planning orchestrator."""


class InvalidAnswerError(Exception):
    """Raised when an answer is empty or malformed for its field."""

    pass


class UnknownFieldError(Exception):
    """Raised when a field has no registered question or handler."""

    pass
