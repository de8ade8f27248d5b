class AuthenticationError(Exception):
    """Raised when the bearer token is missing or rejected by the store."""


class NotFoundError(Exception):
    """Raised when a form does not exist, is not published, or belongs to another user."""


class StorageError(Exception):
    """Raised when a call to the backing store fails."""


class ValidationError(Exception):
    """Raised when a submission misses required answers or has answers of the wrong shape."""

    def __init__(
        self,
        message: str,
        missing_indices: list[int] | None = None,
        invalid_indices: list[int] | None = None,
    ):
        super().__init__(message)
        self.missing_indices = missing_indices or []
        self.invalid_indices = invalid_indices or []
