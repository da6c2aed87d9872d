"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

Storage operations report I/O and parse failures through boolean or empty
results, so most of these never reach callers of NoteStore. The exceptions
that do escape are StorageInitError (the data directory cannot be created)
and ValidationError (an invalid configuration was requested).
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a note cannot be found."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class StorageError(ApplicationError):
    """Raised when the backing file cannot be read, written or copied."""

    def __init__(self, message: str = "Storage error", code: str = "SYS_STORAGE_ERROR") -> None:
        super().__init__(message, code=code)


class StorageInitError(StorageError):
    """Raised when the data directory cannot be created."""

    def __init__(self, message: str = "Cannot create data directory") -> None:
        super().__init__(message, code="SYS_STORAGE_INIT_ERROR")


class CorruptDataError(StorageError):
    """Raised when the backing file holds unparsable or mistyped JSON."""

    def __init__(self, message: str = "Notes file is corrupt") -> None:
        super().__init__(message, code="DATA_CORRUPT")
