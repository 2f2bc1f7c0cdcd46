"""Domain-level errors and exceptions."""

from typing import Optional


class DomainError(Exception):
    """Base domain error."""
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(DomainError):
    """Validation error."""
    pass


class ConfigurationError(DomainError):
    """Configuration error."""
    pass


class SessionError(DomainError):
    """Session-related error."""
    pass


class SessionNotFoundError(SessionError):
    """Raised when a session cannot be found."""
    def __init__(self, message: str, code: Optional[str] = "SESSION_NOT_FOUND"):
        super().__init__(message, code)


class SessionDecodeError(SessionError):
    """Raised when stored session data cannot be decoded."""
    def __init__(self, message: str, code: Optional[str] = "DECODE_FAILURE"):
        super().__init__(message, code)


class StorageError(DomainError):
    """Local storage error."""
    pass


class StorageUnavailableError(StorageError):
    """Raised when the local cache location cannot be resolved or accessed."""
    def __init__(self, message: str, code: Optional[str] = "STORAGE_UNAVAILABLE"):
        super().__init__(message, code)


class RemoteServiceError(DomainError):
    """Raised for failures surfaced by the remote session service."""
    def __init__(self, message: str, code: Optional[str] = "REMOTE_FAILURE"):
        super().__init__(message, code)
