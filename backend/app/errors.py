"""Error types raised by the file service and rendered as JSON by main.py."""


class FileServiceError(Exception):
    """Base error, carries the HTTP status and the client-facing message."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"


class ValidationError(FileServiceError):
    """Bad content type, oversized payload or malformed request."""
    status_code = 400


class NotFoundError(FileServiceError):
    status_code = 404


class InternalError(FileServiceError):
    status_code = 500
