"""
Application error kinds.

Every error carries a human readable message and the HTTP status code the API
layer should answer with.
"""


class CourseWatcherError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(CourseWatcherError):
    """Raised when a video, module or notes record does not exist."""

    def __init__(self, resource: str):
        super().__init__(
            message=f"Not found: {resource}",
            status_code=404
        )
        self.resource = resource


class ValidationError(CourseWatcherError):
    """Raised for malformed or out of range caller input."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class StorageInitError(CourseWatcherError):
    """Raised when the database cannot be opened or its schema created."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=500)
