"""Domain errors raised by the service layer.

Endpoints catch these at the boundary and translate them into the
JSON envelope of their router.  ``status_code`` carries the HTTP
status each kind maps to.
"""


class ChapterRegistryError(Exception):
    """Base exception for all service errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ChapterRegistryError):
    """Raised when required input is missing or malformed."""

    status_code = 400


class ConflictError(ChapterRegistryError):
    """Raised when a uniqueness rule would be violated.

    Reported as 400 rather than 409 to stay compatible with existing
    clients.
    """

    status_code = 400


class NotFoundError(ChapterRegistryError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class InternalError(ChapterRegistryError):
    """Raised when the store fails in a way callers cannot fix."""

    status_code = 500
