"""
Custom exceptions for the flashcard scheduling engine.
"""


class FlashdeckError(Exception):
    """Base exception for all flashdeck exceptions."""
    pass


class NotFoundError(FlashdeckError, LookupError):
    """Raised when a referenced deck or card does not exist."""
    pass


class InvalidInputError(FlashdeckError, ValueError):
    """Raised when a quality rating or required text field is invalid."""
    pass


class ConflictError(FlashdeckError):
    """Raised when a card was changed by another writer since it was read."""
    pass
