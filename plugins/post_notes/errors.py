"""Exceptions raised by the Post Notes plugin"""


class PostNotesError(Exception):
    """Base exception for Post Notes errors"""


class AuthorizationError(PostNotesError):
    """Raised when a note write is not allowed

    ``stage`` is the last write state reached before the failing check.
    """

    def __init__(self, message, stage=None):
        self.message = message
        self.stage = stage
        super().__init__(self.message)


class StorageError(PostNotesError):
    """Raised when the underlying meta/option store fails"""


class ValidationError(PostNotesError):
    """Raised for settings data of the wrong shape or items that cannot take a note"""

    def __init__(self, field, message):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
